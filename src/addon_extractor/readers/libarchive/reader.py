"""Fallback archive reader backed by libarchive-c.

libarchive tolerates some zip variants zipfile rejects (odd extra fields,
broken central directories with intact local headers), which makes it a
useful second attempt for uploads built by unusual tools.
"""

from collections.abc import Iterator
from pathlib import Path

import libarchive

from ...errors import OpenFailure
from ..base import ArchiveEntry, ArchiveReader, open_error


class LibarchiveReader(ArchiveReader):
    """Reader for zip archives using libarchive.

    libarchive only streams entries, so the listing is read once when the
    reader is opened and the archive is re-read for each extraction.
    """

    name = "libarchive"

    def __init__(self, path: Path):
        """Open the archive and read its listing.

        Args:
            path: Archive to open

        Raises:
            ArchiveOpenError: If libarchive cannot read the archive as a zip
        """
        super().__init__(path)
        try:
            with libarchive.file_reader(str(path), format_name="zip") as archive:
                self._entries = [
                    ArchiveEntry(
                        index=index,
                        name=entry.pathname,
                        size=entry.size or 0,
                        is_dir=entry.isdir,
                    )
                    for index, entry in enumerate(archive)
                ]
        except libarchive.ArchiveError as e:
            raise open_error(path, OpenFailure.NOT_A_ZIP) from e
        except MemoryError as e:
            raise open_error(path, OpenFailure.OUT_OF_MEMORY) from e
        except OSError as e:
            raise open_error(path, OpenFailure.READ_ERROR) from e

    def entries(self) -> list[ArchiveEntry]:
        return list(self._entries)

    def iter_blocks(self, entry: ArchiveEntry) -> Iterator[bytes]:
        try:
            with libarchive.file_reader(str(self.path), format_name="zip") as archive:
                for index, archive_entry in enumerate(archive):
                    if index == entry.index:
                        yield from archive_entry.get_blocks()
                        return
        except libarchive.ArchiveError as e:
            raise open_error(self.path, OpenFailure.READ_ERROR) from e

    def close(self) -> None:
        self._entries = []
