"""libarchive fallback reader.

This module registers the libarchive reader with ReaderRegistry if
libarchive-c (and the system libarchive it binds) is available.

Usage:
    >>> from addon_extractor import ReaderRegistry
    >>>
    >>> if 'libarchive' in ReaderRegistry.list_readers():
    ...     reader = ReaderRegistry.open(Path('/uploads/theme.zip'), order=('libarchive',))
"""

# Gated import: Only load if libarchive-c is installed
try:
    from pathlib import Path

    from .reader import LibarchiveReader

    # Import registry for auto-registration
    from ...registry import ReaderRegistry

    def _create_libarchive_reader(path: Path) -> LibarchiveReader:
        """Factory function for creating LibarchiveReader.

        Args:
            path: Archive to open

        Returns:
            LibarchiveReader instance
        """
        return LibarchiveReader(path)

    # Auto-register with registry when module is imported
    ReaderRegistry.register_factory('libarchive', _create_libarchive_reader)

    # Availability flag
    LIBARCHIVE_AVAILABLE = True

    __all__ = [
        'LibarchiveReader',
        'LIBARCHIVE_AVAILABLE',
    ]

except (ImportError, OSError):
    # libarchive-c or the libarchive shared library is missing
    LIBARCHIVE_AVAILABLE = False
    LibarchiveReader = None  # type: ignore[assignment,misc]

    __all__ = ['LIBARCHIVE_AVAILABLE']
