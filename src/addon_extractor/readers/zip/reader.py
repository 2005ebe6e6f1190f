"""Archive reader backed by the standard library's zipfile module."""

import errno
import zipfile
import zlib
from collections.abc import Iterator
from pathlib import Path

from ...errors import OpenFailure
from ..base import CHUNK_SIZE, ArchiveEntry, ArchiveReader, open_error


def failure_for(exc: BaseException) -> OpenFailure:
    """Map an exception raised by zipfile onto an open failure code.

    Args:
        exc: Exception raised while opening or reading the archive

    Returns:
        The matching OpenFailure code
    """
    if isinstance(exc, zipfile.BadZipFile):
        # zipfile reports a missing end-of-central-directory record this way;
        # everything else means the structure itself is broken.
        if "not a zip file" in str(exc):
            return OpenFailure.NOT_A_ZIP
        return OpenFailure.INCONSISTENT
    if isinstance(exc, NotImplementedError):
        # Unsupported compression method
        return OpenFailure.READ_ERROR
    if isinstance(exc, RuntimeError):
        # Encrypted entry and no password
        return OpenFailure.INVALID
    if isinstance(exc, zipfile.LargeZipFile):
        return OpenFailure.INVALID
    if isinstance(exc, FileNotFoundError):
        return OpenFailure.NOT_FOUND
    if isinstance(exc, FileExistsError):
        return OpenFailure.ALREADY_EXISTS
    if isinstance(exc, (PermissionError, IsADirectoryError)):
        return OpenFailure.CANNOT_OPEN
    if isinstance(exc, MemoryError):
        return OpenFailure.OUT_OF_MEMORY
    if isinstance(exc, zlib.error):
        return OpenFailure.READ_ERROR
    if isinstance(exc, OSError):
        if exc.errno == errno.ESPIPE:
            return OpenFailure.SEEK_ERROR
        return OpenFailure.READ_ERROR
    if isinstance(exc, (ValueError, EOFError)):
        return OpenFailure.INVALID
    return OpenFailure.UNKNOWN


class ZipReader(ArchiveReader):
    """Reader for .zip archives using zipfile.

    Example:
        >>> with ZipReader(Path('/uploads/myplugin.zip')) as reader:
        ...     names = [entry.name for entry in reader.entries()]
    """

    name = "zip"

    def __init__(self, path: Path):
        """Open the archive.

        Args:
            path: Archive to open

        Raises:
            ArchiveOpenError: If zipfile cannot open the archive
        """
        super().__init__(path)
        try:
            self._zip = zipfile.ZipFile(path)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, MemoryError, ValueError, EOFError) as e:
            raise open_error(path, failure_for(e)) from e

    def entries(self) -> list[ArchiveEntry]:
        return [
            ArchiveEntry(
                index=index,
                name=info.filename,
                size=info.file_size,
                is_dir=info.is_dir(),
            )
            for index, info in enumerate(self._zip.infolist())
        ]

    def iter_blocks(self, entry: ArchiveEntry) -> Iterator[bytes]:
        info = self._zip.infolist()[entry.index]
        try:
            with self._zip.open(info) as f:
                while chunk := f.read(CHUNK_SIZE):
                    yield chunk
        except (zipfile.BadZipFile, zlib.error, OSError, EOFError, RuntimeError) as e:
            raise open_error(self.path, failure_for(e)) from e

    def close(self) -> None:
        self._zip.close()
