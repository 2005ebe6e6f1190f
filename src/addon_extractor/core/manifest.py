"""addon.json manifest conversion.

Manifests use camelCase keys; the rest of the pipeline works on the
CapitalCase keys of the legacy info arrays, so manifests are converted
into the same shape the legacy parser produces.
"""

import json
import logging
import re
from pathlib import Path, PurePosixPath
from typing import Any

from .types import AddonInfo
from .validator import validate_addon_manifest_with_error_details

logger = logging.getLogger(__name__)

VALID_TYPES = ("application", "plugin", "theme", "locale", "addon")

# Addons that load before plugins are applications
PRIORITY_PLUGIN = 100

# Trailing acronyms kept upper case, e.g. "addonId" -> "AddonID"
_ACRONYMS = ("ID", "URL")
_WORD_SPLIT_RE = re.compile(r"[_\-\s]+")


class CapitalCaseScheme:
    """Converts key names such as "oldType" or "mobile_friendly" to CapitalCase."""

    def convert(self, name: str) -> str:
        """Convert a single key.

        Args:
            name: camelCase, snake_case or kebab-case key

        Returns:
            The CapitalCase key
        """
        parts = [part for part in _WORD_SPLIT_RE.split(name) if part]
        result = "".join(part[0].upper() + part[1:] for part in parts)

        for acronym in _ACRONYMS:
            word = acronym[0] + acronym[1:].lower()
            if result.endswith(word) and result != word:
                result = result[: -len(word)] + acronym

        return result

    def convert_keys(self, data: dict[str, Any]) -> dict[str, Any]:
        """Convert the top-level keys of a mapping. Values are left alone."""
        return {self.convert(key): value for key, value in data.items()}


def derive_slug(archive_path: str, default: str = "") -> str:
    """Work out the addon key from where its manifest sits in the archive.

    Example:
        "myplugin/addon.json" -> "myplugin"

    Args:
        archive_path: Name of the manifest entry inside the archive
        default: Key to use when the manifest sits at the archive root

    Returns:
        The enclosing folder name, trimmed
    """
    parent = PurePosixPath("/" + archive_path.lstrip("/")).parent
    slug = parent.name.strip()
    return slug or default


def resolve_type(info: dict[str, Any]) -> str:
    """Decide which kind of addon a manifest declares.

    Precedence: an explicit valid ``Type``, then a valid legacy
    ``OldType``, then ``application`` when ``Priority`` is below the
    plugin priority, otherwise ``plugin``.

    Args:
        info: Manifest with CapitalCase keys

    Returns:
        One of VALID_TYPES
    """
    for field in ("Type", "OldType"):
        value = info.get(field)
        if isinstance(value, str) and value.lower() in VALID_TYPES:
            return value.lower()

    priority = info.get("Priority")
    if priority is not None and not isinstance(priority, bool):
        try:
            if float(priority) < PRIORITY_PLUGIN:
                return "application"
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric priority %r", priority)

    return "plugin"


def convert_addon_json(path: Path, archive_path: str, default_key: str = "") -> AddonInfo | None:
    """Coerce an extracted addon.json into an addon info mapping.

    Args:
        path: The extracted manifest file
        archive_path: The manifest's entry name inside the archive
        default_key: Key to use when the manifest sits at the archive root

    Returns:
        ``{slug: info}`` with a ``Variable`` tag such as "PluginInfo", or
        None if the manifest cannot be decoded or fails the schema
    """
    try:
        with path.open("r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Could not decode %s: %s", archive_path, e)
        return None

    if not data or not isinstance(data, dict):
        logger.warning("%s does not contain a JSON object", archive_path)
        return None

    info = CapitalCaseScheme().convert_keys(data)

    is_valid, error_msg = validate_addon_manifest_with_error_details(info)
    if not is_valid:
        logger.warning("%s failed validation: %s", archive_path, error_msg)
        return None

    addon_type = resolve_type(info)
    info["Variable"] = addon_type.capitalize() + "Info"

    slug = derive_slug(archive_path, default_key)
    return {slug: info}
