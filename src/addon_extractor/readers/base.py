"""Base abstractions for archive readers.

This module defines the interface every archive reader implements so the
scanner can walk and extract entries without knowing which library does
the decoding.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ..core.locale import translate
from ..errors import ArchiveOpenError, OpenFailure

# Read size used when streaming entry contents
CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ArchiveEntry:
    """A single entry listed by an archive.

    Attributes:
        index: Position in the archive's native listing order
        name: Entry name exactly as stored in the archive
        size: Declared uncompressed size in bytes
        is_dir: Whether the entry is a directory
    """

    index: int
    name: str
    size: int = 0
    is_dir: bool = False


def open_error(path: Path, reason: OpenFailure) -> ArchiveOpenError:
    """Build the error raised when an archive cannot be opened.

    Args:
        path: Archive that failed to open
        reason: Underlying failure code

    Returns:
        ArchiveOpenError with a user-facing message
    """
    message = translate("Could not open addon file. Addons must be zip files.")
    return ArchiveOpenError(f"{message} ({path} {reason.value})", reason)


class ArchiveReader(ABC):
    """Abstract base class for archive readers.

    Implementations open the archive in ``__init__`` and raise
    ArchiveOpenError when they cannot. Readers are context managers and
    release their handle on exit.
    """

    name = "base"

    def __init__(self, path: Path):
        self.path = path

    @abstractmethod
    def entries(self) -> list[ArchiveEntry]:
        """List every entry in native archive order.

        Returns:
            Entries in the order the archive stores them
        """
        pass

    @abstractmethod
    def iter_blocks(self, entry: ArchiveEntry) -> Iterator[bytes]:
        """Stream the uncompressed contents of an entry.

        Args:
            entry: An entry previously returned by ``entries()``

        Yields:
            Chunks of entry data

        Raises:
            ArchiveOpenError: If the entry cannot be read
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the archive handle."""
        pass

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
