"""Archive reader implementations.

This package contains self-contained reader modules, each wrapping one
archive library. Each reader module auto-registers itself with the
ReaderRegistry when imported.
"""

# Reader modules are imported dynamically by ReaderRegistry.discover_readers()
# to handle missing dependencies gracefully
