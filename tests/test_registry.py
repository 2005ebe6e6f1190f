"""Tests for the reader registry and the zip reader."""

import errno
import zipfile
import zlib
from pathlib import Path

import pytest

from addon_extractor.errors import ArchiveOpenError, OpenFailure
from addon_extractor.readers.base import ArchiveEntry, ArchiveReader, open_error
from addon_extractor.readers.zip import ZipReader, failure_for
from addon_extractor.registry import ReaderRegistry


class FakeReader(ArchiveReader):
    """Reader that opens anything and lists nothing."""

    name = "fake"

    def entries(self) -> list[ArchiveEntry]:
        return []

    def iter_blocks(self, entry: ArchiveEntry):
        yield b""

    def close(self) -> None:
        pass


def _failing(reason: OpenFailure):
    def _factory(path: Path) -> ArchiveReader:
        raise open_error(path, reason)

    return _factory


class TestReaderRegistry:
    """Test primary/fallback opening."""

    def test_builtin_readers_registered(self) -> None:
        """Test that the zip reader is always discovered."""
        assert "zip" in ReaderRegistry.list_readers()

    def test_falls_back_to_secondary(self, monkeypatch, tmp_path: Path) -> None:
        """Test that the second reader is used when the first fails."""
        monkeypatch.setattr(
            ReaderRegistry, "_factories", {"primary": _failing(OpenFailure.INCONSISTENT), "secondary": FakeReader}
        )

        reader = ReaderRegistry.open(tmp_path / "a.zip", order=("primary", "secondary"))

        assert isinstance(reader, FakeReader)

    def test_reports_primary_reason(self, monkeypatch, tmp_path: Path) -> None:
        """Test that the primary reader's reason wins when every reader fails."""
        monkeypatch.setattr(
            ReaderRegistry,
            "_factories",
            {"primary": _failing(OpenFailure.NOT_A_ZIP), "secondary": _failing(OpenFailure.READ_ERROR)},
        )

        with pytest.raises(ArchiveOpenError) as excinfo:
            ReaderRegistry.open(tmp_path / "a.zip", order=("primary", "secondary"))

        assert excinfo.value.reason is OpenFailure.NOT_A_ZIP
        assert "ER_NOZIP" in str(excinfo.value)

    def test_skips_unregistered_readers(self, monkeypatch, tmp_path: Path) -> None:
        """Test that names without a factory are ignored."""
        monkeypatch.setattr(ReaderRegistry, "_factories", {"secondary": FakeReader})

        reader = ReaderRegistry.open(tmp_path / "a.zip", order=("missing", "secondary"))

        assert isinstance(reader, FakeReader)

    def test_no_readers_available(self, monkeypatch, tmp_path: Path) -> None:
        """Test the unknown failure when no reader could even be tried."""
        monkeypatch.setattr(ReaderRegistry, "_factories", {})

        with pytest.raises(ArchiveOpenError) as excinfo:
            ReaderRegistry.open(tmp_path / "a.zip")

        assert excinfo.value.reason is OpenFailure.UNKNOWN

    def test_register_and_unregister(self, monkeypatch) -> None:
        """Test factory registration."""
        monkeypatch.setattr(ReaderRegistry, "_factories", {})

        ReaderRegistry.register_factory("fake", FakeReader)
        assert ReaderRegistry.list_readers() == ["fake"]

        ReaderRegistry.unregister_factory("fake")
        ReaderRegistry.unregister_factory("fake")
        assert ReaderRegistry.list_readers() == []


class TestZipReader:
    """Test the zipfile-backed reader."""

    def test_lists_entries_in_archive_order(self, make_zip) -> None:
        """Test entry listing, sizes and directory flags."""
        archive = make_zip("a.zip", [("b/", b""), ("b/z.txt", "12345"), ("a.txt", "1")])

        with ZipReader(archive) as reader:
            entries = reader.entries()

        assert [(e.index, e.name, e.size, e.is_dir) for e in entries] == [
            (0, "b/", 0, True),
            (1, "b/z.txt", 5, False),
            (2, "a.txt", 1, False),
        ]

    def test_streams_contents(self, make_zip) -> None:
        """Test that entry contents are streamed intact."""
        archive = make_zip("a.zip", [("data.bin", b"x" * 200_000)])

        with ZipReader(archive) as reader:
            data = b"".join(reader.iter_blocks(reader.entries()[0]))

        assert data == b"x" * 200_000

    def test_not_a_zip(self, tmp_path: Path) -> None:
        """Test that a non-archive is reported as not a zip."""
        path = tmp_path / "a.zip"
        path.write_bytes(b"plain text")

        with pytest.raises(ArchiveOpenError) as excinfo:
            ZipReader(path)

        assert excinfo.value.reason is OpenFailure.NOT_A_ZIP

    def test_directory(self, tmp_path: Path) -> None:
        """Test that a directory cannot be opened."""
        with pytest.raises(ArchiveOpenError) as excinfo:
            ZipReader(tmp_path)

        assert excinfo.value.reason is OpenFailure.CANNOT_OPEN


class TestFailureFor:
    """Test exception to failure code mapping."""

    @pytest.mark.parametrize(
        "exc,expected",
        [
            (zipfile.BadZipFile("File is not a zip file"), OpenFailure.NOT_A_ZIP),
            (zipfile.BadZipFile("Bad magic number for central directory"), OpenFailure.INCONSISTENT),
            (zipfile.LargeZipFile("Zipfile size would require ZIP64 extensions"), OpenFailure.INVALID),
            (FileNotFoundError(errno.ENOENT, "missing"), OpenFailure.NOT_FOUND),
            (FileExistsError(errno.EEXIST, "exists"), OpenFailure.ALREADY_EXISTS),
            (PermissionError(errno.EACCES, "denied"), OpenFailure.CANNOT_OPEN),
            (MemoryError(), OpenFailure.OUT_OF_MEMORY),
            (zlib.error("invalid stored block lengths"), OpenFailure.READ_ERROR),
            (OSError(errno.ESPIPE, "Illegal seek"), OpenFailure.SEEK_ERROR),
            (OSError(errno.EIO, "I/O error"), OpenFailure.READ_ERROR),
            (EOFError(), OpenFailure.INVALID),
            (RuntimeError("File is encrypted, password required for extraction"), OpenFailure.INVALID),
            (NotImplementedError("That compression method is not supported"), OpenFailure.READ_ERROR),
            (TypeError("boom"), OpenFailure.UNKNOWN),
        ],
    )
    def test_mapping(self, exc: BaseException, expected: OpenFailure) -> None:
        """Test each known exception type."""
        assert failure_for(exc) is expected
