"""Reader registry for opening archives.

This module provides a central registry for archive reader factories,
enabling primary/fallback opening and automatic reader discovery.
"""

import importlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .core.locale import translate
from .errors import ArchiveOpenError, OpenFailure

if TYPE_CHECKING:
    from .readers.base import ArchiveReader

logger = logging.getLogger(__name__)

DEFAULT_READER_ORDER: tuple[str, ...] = ("zip", "libarchive")


class ReaderRegistry:
    """Central registry for archive reader factories.

    Reader modules register themselves when imported, and the registry
    can automatically discover all available readers. Readers whose
    library is not installed never register, so opening quietly falls
    through to the next one.
    """

    _factories: dict[str, Callable[[Path], "ArchiveReader"]] = {}

    @classmethod
    def register_factory(cls, name: str, factory: Callable[[Path], "ArchiveReader"]) -> None:
        """Register a factory function for creating readers.

        Args:
            name: Name of the reader (e.g., 'zip', 'libarchive')
            factory: Callable that opens a path and returns an ArchiveReader

        Example:
            >>> ReaderRegistry.register_factory('zip', ZipReader)
        """
        cls._factories[name] = factory

    @classmethod
    def unregister_factory(cls, name: str) -> None:
        """Remove a registered factory, if present."""
        cls._factories.pop(name, None)

    @classmethod
    def list_readers(cls) -> list[str]:
        """List all registered reader names.

        Returns:
            List of registered reader names

        Example:
            >>> ReaderRegistry.list_readers()
            ['zip', 'libarchive']
        """
        return list(cls._factories.keys())

    @classmethod
    def open(cls, path: Path, order: tuple[str, ...] = DEFAULT_READER_ORDER) -> "ArchiveReader":
        """Open an archive with the first reader that accepts it.

        Args:
            path: Archive to open
            order: Reader names to try, primary first. Unregistered names
                are skipped.

        Returns:
            An open ArchiveReader; the caller is responsible for closing it

        Raises:
            ArchiveOpenError: If no reader could open the archive. The
                primary reader's failure reason is reported.
        """
        failures: list[ArchiveOpenError] = []

        for name in order:
            factory = cls._factories.get(name)
            if factory is None:
                logger.debug("Archive reader %r is not available", name)
                continue
            try:
                reader = factory(path)
            except ArchiveOpenError as e:
                logger.debug("Archive reader %r could not open %s: %s", name, path, e.reason.value)
                failures.append(e)
                continue
            logger.debug("Opened %s with the %r reader", path, name)
            return reader

        if failures:
            raise failures[0]

        message = translate("Could not open addon file. Addons must be zip files.")
        raise ArchiveOpenError(f"{message} ({path} {OpenFailure.UNKNOWN.value})", OpenFailure.UNKNOWN)

    @classmethod
    def discover_readers(cls) -> None:
        """Auto-discover and import all readers.

        This method iterates through the readers/ directory and attempts
        to import each reader package. Readers with missing dependencies
        are gracefully skipped.
        """
        readers_dir = Path(__file__).parent / 'readers'

        if not readers_dir.exists():
            return

        for reader_path in sorted(readers_dir.iterdir()):
            if not reader_path.is_dir():
                continue

            if not (reader_path / '__init__.py').exists():
                continue

            try:
                # This triggers auto-registration via the reader's __init__.py
                importlib.import_module(
                    f'.readers.{reader_path.name}',
                    package='addon_extractor'
                )
            except ImportError:
                # Reader dependencies not installed, skip silently
                logger.debug("Skipping archive reader %r: dependencies missing", reader_path.name)
