"""Zip reader for the archive registry.

This reader uses the standard library and is always available, so it is
the primary reader.
"""

from pathlib import Path

from .reader import ZipReader, failure_for

# Auto-register with the registry
from ...registry import ReaderRegistry


def _create_zip_reader(path: Path) -> ZipReader:
    """Factory function for creating zip readers.

    Args:
        path: Archive to open

    Returns:
        ZipReader instance
    """
    return ZipReader(path)


# Auto-register at module import
ReaderRegistry.register_factory('zip', _create_zip_reader)

__all__ = [
    "ZipReader",
    "failure_for",
]
