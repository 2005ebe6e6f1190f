"""Metadata extraction for the various declaration files.

This module dispatches an extracted metadata file to the parser for its
format: the addon.json manifest, a legacy info array, or the version
constant of one of the core bundles.
"""

from pathlib import Path

from ..config import CORE_PATTERN, MANIFEST_PATTERN, PORTER_PATTERN
from .info_array import parse_core_version, parse_info_array
from .manifest import convert_addon_json
from .types import AddonInfo, ScanEntry

# Patterns that identify the core bundles rather than a general addon
CORE_PATTERNS = {CORE_PATTERN, PORTER_PATTERN}


def is_core_entry(entry: ScanEntry) -> bool:
    """Whether an entry is one of the core bundle markers."""
    return entry["Pattern"] in CORE_PATTERNS


def extract_core_version(entry: ScanEntry) -> str | None:
    """Read the platform version from a core bundle marker.

    Args:
        entry: A core marker entry

    Returns:
        The declared version, or None if the file declares none
    """
    return parse_core_version(Path(entry["Path"]))


def extract_info(entry: ScanEntry, default_key: str = "") -> AddonInfo | None:
    """Parse the addon metadata declared by an entry.

    Args:
        entry: The scanned metadata file
        default_key: Key for a manifest at the archive root

    Returns:
        ``{addon-key: fields}`` with a ``Variable`` tag, or None if the
        file declares no usable metadata
    """
    path = Path(entry["Path"])

    if entry["Pattern"] == MANIFEST_PATTERN:
        return convert_addon_json(path, entry["ArchivePath"], default_key)

    # Core markers declare a version constant, not an info array
    if is_core_entry(entry):
        return None

    return parse_info_array(path)
