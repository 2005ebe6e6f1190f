"""Runtime settings for addon inspection."""

from dataclasses import dataclass
from pathlib import Path

# Metadata files we look for, in priority order. Each entry is a
# suffix-anchored glob where "*" matches within a single path segment.
INFO_PATTERNS: tuple[str, ...] = (
    "/settings/about.php",  # application
    "/default.php",  # plugin
    "/class.*.php",
    "/class.*.plugin.php",  # plugin
    "/about.php",  # theme
    "/definitions.php",  # locale
    "/environment.php",  # core platform
    "vanilla2export.php",  # porter
    "/addon.json",
)

MANIFEST_PATTERN = "/addon.json"
CORE_PATTERN = "/environment.php"
PORTER_PATTERN = "vanilla2export.php"


@dataclass(frozen=True)
class ExtractorConfig:
    """Settings shared by every inspection.

    Attributes:
        uploads_root: Folder uploads are saved under; used to derive ``File``
        scratch_root: Where scratch folders are created (defaults to the
            archive's own folder)
        reader_order: Archive readers to try, primary first
        max_entries: Maximum number of entries an archive may list
        max_entry_bytes: Maximum size of a single extracted metadata file
        max_extracted_bytes: Maximum total bytes extracted per inspection
        forced_license: License stamped onto every general addon
        patterns: Metadata file patterns, in priority order
    """

    uploads_root: Path | None = None
    scratch_root: Path | None = None
    reader_order: tuple[str, ...] = ("zip", "libarchive")
    max_entries: int = 10_000
    max_entry_bytes: int = 16 * 1024 * 1024
    max_extracted_bytes: int = 64 * 1024 * 1024
    forced_license: str = "MIT"
    patterns: tuple[str, ...] = INFO_PATTERNS
