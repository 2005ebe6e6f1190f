"""Archive scanning and metadata file extraction.

This module walks the entries of an addon archive, picks out the files
that can declare addon metadata and extracts them to a scratch folder,
with security features like traversal rejection and size ceilings.
"""

import html
import logging
import re
import shutil
import tempfile
from pathlib import Path

from .config import MANIFEST_PATTERN, ExtractorConfig
from .core.types import ScanEntry
from .errors import ArchiveLimitError, MalformedArchiveError, OpenFailure
from .readers.base import ArchiveEntry, ArchiveReader, open_error

logger = logging.getLogger(__name__)

# Parent-directory segment in either separator style
TRAVERSAL_RE = re.compile(r"\.\.[\\/]")


def remove_folder(path: Path) -> None:
    """Recursively delete a folder. Does nothing if it is already gone.

    Args:
        path: Folder to delete
    """
    if path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()


def validate_path_safety(path: Path, base_dir: Path) -> None:
    """Validate that a path stays within the base directory.

    This prevents path traversal attacks.

    Args:
        path: Path to validate
        base_dir: Base directory that path must be within

    Raises:
        ValueError: If path escapes the base directory
    """
    resolved_path = path.resolve()
    resolved_base = base_dir.resolve()

    if not resolved_path.is_relative_to(resolved_base):
        raise ValueError(f"Path {path} escapes base directory {base_dir}")


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a metadata file pattern into a suffix-anchored regex.

    Example:
        "/class.*.php" matches "/myplugin/class.myplugin.php" but not
        "/myplugin/class.x/y.php".

    Args:
        pattern: Pattern where "*" matches anything except "/"

    Returns:
        Compiled regex with the matched suffix in group 1
    """
    body = re.escape(pattern).replace(r"\*", "[^/]*")
    return re.compile(f"({body})$")


def match_entry(
    name: str, patterns: list[tuple[str, re.Pattern[str]]]
) -> tuple[str, str, str] | None:
    """Find the first pattern that matches an entry at an acceptable depth.

    Args:
        name: Rooted entry name (leading "/")
        patterns: (pattern, compiled regex) pairs in priority order

    Returns:
        Tuple of (pattern, matched text, base folder), or None if nothing
        matches within one folder of the archive root
    """
    for pattern, regex in patterns:
        match = regex.search(name)
        if not match:
            continue

        matched = match.group(1)
        base = name[: -len(matched)].strip("/")
        if "/" in base:
            # Nested too deep to be an addon's own metadata
            continue

        return pattern, matched, base

    return None


class ScratchDirectory:
    """Private extraction folder for a single inspection.

    The folder is only created when the first entry is extracted and is
    always removed on exit. Each instance gets a unique folder, so
    inspections of archives with the same name never collide.

    Example:
        >>> with ScratchDirectory(Path('/uploads/myplugin.zip')) as scratch:
        ...     target = scratch.ensure() / 'myplugin' / 'addon.json'
    """

    def __init__(self, archive_path: Path, root: Path | None = None):
        """Initialize the scratch folder.

        Args:
            archive_path: Archive being inspected; its stem prefixes the folder
            root: Parent for the folder (defaults to the archive's folder)
        """
        self.archive_path = archive_path
        self.root = root if root is not None else archive_path.parent
        self.path: Path | None = None

    def ensure(self) -> Path:
        """Create the folder if needed and return it.

        Raises:
            ArchiveOpenError: If the folder cannot be created
        """
        if self.path is None:
            try:
                self.root.mkdir(parents=True, exist_ok=True)
                self.path = Path(tempfile.mkdtemp(prefix=f"{self.archive_path.stem}-", dir=self.root))
            except OSError as e:
                logger.warning("Could not create a scratch folder in %s: %s", self.root, e)
                raise open_error(self.archive_path, OpenFailure.CANNOT_OPEN) from e
            logger.debug("Created scratch folder %s", self.path)
        return self.path

    def cleanup(self) -> None:
        """Remove the folder and everything extracted into it."""
        if self.path is not None:
            remove_folder(self.path)
            logger.debug("Removed scratch folder %s", self.path)
            self.path = None

    def __enter__(self) -> "ScratchDirectory":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup()


def check_entry_names(entries: list[ArchiveEntry]) -> None:
    """Reject archives with entries that try to climb out of the archive.

    Args:
        entries: Every entry in the archive

    Raises:
        MalformedArchiveError: If any entry name contains "../" or "..\\"
    """
    for entry in entries:
        if TRAVERSAL_RE.search(entry.name):
            raise MalformedArchiveError(f"Invalid path in zip file: {html.escape(entry.name)}")


def extract_entry(
    reader: ArchiveReader, entry: ArchiveEntry, destination: Path, config: ExtractorConfig, budget: int
) -> tuple[Path, int]:
    """Extract a single entry below a destination folder.

    Bytes are counted as they are written rather than trusted from the
    archive headers.

    Args:
        reader: Open archive reader
        entry: Entry to extract
        destination: Folder the entry is extracted under
        config: Size ceilings
        budget: Bytes still allowed for this inspection

    Returns:
        Tuple of (extracted file path, bytes written)

    Raises:
        MalformedArchiveError: If the target escapes the destination
        ArchiveLimitError: If a size ceiling is exceeded
        ArchiveOpenError: If the entry cannot be read or written to disk
    """
    target = destination / entry.name.lstrip("/").rstrip("/")

    try:
        validate_path_safety(target, destination)
    except ValueError as e:
        raise MalformedArchiveError(f"Invalid path in zip file: {html.escape(entry.name)}") from e

    limit = min(config.max_entry_bytes, budget)
    if entry.size > limit:
        raise ArchiveLimitError(f"{entry.name} is too large to inspect ({entry.size} bytes).")

    written = 0
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as f:
            for block in reader.iter_blocks(entry):
                written += len(block)
                if written > limit:
                    raise ArchiveLimitError(f"{entry.name} is too large to inspect.")
                f.write(block)
    except OSError as e:
        logger.warning("Could not extract %s to %s: %s", entry.name, target, e)
        raise open_error(reader.path, OpenFailure.CANNOT_OPEN) from e

    return target, written


def scan_archive(
    reader: ArchiveReader, scratch: ScratchDirectory, config: ExtractorConfig
) -> list[ScanEntry]:
    """Find and extract the metadata files in an archive.

    The reader is closed before this function returns, whatever happens.

    Args:
        reader: Open archive reader
        scratch: Folder to extract matches into
        config: Patterns and resource ceilings

    Returns:
        One ScanEntry per matching file, in archive listing order. A
        manifest match ends the scan and is returned on its own.

    Raises:
        MalformedArchiveError: If an entry name contains a traversal sequence
        ArchiveLimitError: If the archive exceeds a resource ceiling
        ArchiveOpenError: If a metadata file cannot be extracted
    """
    patterns = [(pattern, compile_pattern(pattern)) for pattern in config.patterns]
    results: list[ScanEntry] = []

    with reader:
        entries = reader.entries()
        check_entry_names(entries)

        if len(entries) > config.max_entries:
            raise ArchiveLimitError(
                f"The archive lists {len(entries)} entries; at most {config.max_entries} are allowed."
            )

        budget = config.max_extracted_bytes
        for entry in entries:
            if entry.is_dir:
                continue

            name = "/" + entry.name.lstrip("/")
            found = match_entry(name, patterns)
            if found is None:
                continue

            pattern, matched, base = found
            path, written = extract_entry(reader, entry, scratch.ensure(), config, budget)
            budget -= written

            scan_entry = ScanEntry(
                Name=matched,
                Pattern=pattern,
                Path=str(path),
                Base=base,
                ArchivePath=entry.name,
            )
            logger.debug("Found %s in %s (base %r)", matched, reader.path, base)

            if pattern == MANIFEST_PATTERN:
                # Only one manifest is meaningful per archive
                return [scan_entry]

            results.append(scan_entry)

    return results
