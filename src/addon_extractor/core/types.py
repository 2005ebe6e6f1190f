"""Type definitions for addon records.

This module defines TypedDict classes that mirror the JSON schema structure
defined in schemas/addon-record.schema.json.
"""

from enum import IntEnum
from typing import Any, TypedDict


class AddonType(IntEnum):
    """Addon classification, stored as ``AddonTypeID``."""

    PLUGIN = 1
    THEME = 2
    LOCALE = 4
    APPLICATION = 5
    GENERAL = 6
    CORE = 10


# Parser ``Variable`` tag -> classification. Anything else is GENERAL.
VARIABLE_TYPES: dict[str, AddonType] = {
    "ApplicationInfo": AddonType.APPLICATION,
    "LocaleInfo": AddonType.LOCALE,
    "PluginInfo": AddonType.PLUGIN,
    "ThemeInfo": AddonType.THEME,
}


class ScanEntry(TypedDict):
    """A metadata file found inside an archive."""

    Name: str  # Matched text, e.g. "/addon.json" or "/class.foo.plugin.php"
    Pattern: str  # The pattern that matched
    Path: str  # Where the entry was extracted to
    Base: str  # Top-level folder name ("" for the archive root)
    ArchivePath: str  # Entry name inside the archive


# Parser output: {addon-key: {field: value, ..., "Variable": "PluginInfo"}}
AddonInfo = dict[str, dict[str, Any]]


class AddonRecord(TypedDict, total=False):
    """Canonical addon record, ready to be persisted.

    Declared metadata fields beyond the ones listed here pass through
    unchanged from the addon's own declaration.
    """

    AddonKey: str  # Equals the top-level folder name, except for themes
    AddonTypeID: int  # An AddonType value
    Name: str
    Description: str
    Version: str
    License: str
    Variable: str  # Parser tag, e.g. "PluginInfo"
    Requirements: str  # JSON-encoded {Applications, Plugins, Themes, Addons}
    Path: str  # Original archive path
    File: str  # Path relative to the uploads root, when under it
    MD5: str  # Hex digest of the archive
    FileSize: int  # Archive size in bytes
    Checked: bool  # Always True once the record is built
