"""Addon record construction and classification.

Turns a validated metadata candidate (or a recognised core bundle) into
the canonical record and attaches the attributes computed from the
archive itself.
"""

import hashlib
import json
from pathlib import Path
from typing import Any

from ..config import CORE_PATTERN, PORTER_PATTERN, ExtractorConfig
from .types import VARIABLE_TYPES, AddonInfo, AddonRecord, AddonType, ScanEntry

_HASH_CHUNK_SIZE = 8192  # 8 KiB chunks for streaming hash calculation.

# Declared requirement field -> Requirements category
REQUIREMENT_FIELDS = {
    "RequiredApplications": "Applications",
    "RequiredPlugins": "Plugins",
    "RequiredThemes": "Themes",
    "Require": "Addons",
}

CORE_LICENSE = "GPLv2"

# Fixed identities of the two core bundles
CORE_ADDONS: dict[str, dict[str, str]] = {
    CORE_PATTERN: {
        "AddonKey": "vanilla",
        "Name": "Vanilla",
        "Description": (
            "Vanilla is an open-source, standards-compliant, multi-lingual, fully extensible "
            "discussion forum for the web. Anyone who has web-space that meets the requirements "
            "can download and use Vanilla for free!"
        ),
    },
    PORTER_PATTERN: {
        "AddonKey": "porter",
        "Name": "Vanilla Porter",
        "Description": (
            "Drop this script in your existing site and navigate to it in your web browser to "
            "export your existing forum data to the Vanilla 2 import format."
        ),
    },
}


def classify(variable: Any) -> AddonType:
    """Map a parser ``Variable`` tag onto an addon type.

    Example:
        "ApplicationInfo" -> AddonType.APPLICATION, "AddonInfo" -> AddonType.GENERAL
    """
    return VARIABLE_TYPES.get(variable, AddonType.GENERAL)


def build_core_addon(entry: ScanEntry, version: str) -> AddonRecord:
    """Build the fixed record for a recognised core bundle.

    Args:
        entry: The core marker entry
        version: Version read from the marker

    Returns:
        A CORE record carrying the bundle's fixed identity
    """
    identity = CORE_ADDONS[entry["Pattern"]]
    return AddonRecord(
        AddonKey=identity["AddonKey"],
        AddonTypeID=AddonType.CORE,
        Name=identity["Name"],
        Description=identity["Description"],
        Version=version,
        License=CORE_LICENSE,
        Path=entry["Path"],
    )


def build_addon(info: AddonInfo, config: ExtractorConfig) -> AddonRecord:
    """Build a record from a validated metadata candidate.

    Args:
        info: Parser output in ``{addon-key: fields}`` form
        config: Supplies the license stamped onto every addon

    Returns:
        The addon record, classified by its ``Variable`` tag
    """
    key, fields = next(iter(info.items()))

    addon: dict[str, Any] = {"AddonKey": key, "AddonTypeID": ""}
    addon.update(fields)
    addon["AddonKey"] = key
    if not addon.get("Name"):
        addon["Name"] = key
    addon["License"] = config.forced_license
    addon["AddonTypeID"] = classify(fields.get("Variable"))

    return addon  # type: ignore[return-value]


def extract_requirements(addon: dict[str, Any]) -> dict[str, Any]:
    """Collect the requirements an addon declares.

    Only array values (lists or mappings) are kept; anything else an
    addon puts in a requirement field is dropped.

    Args:
        addon: The addon record or declared fields

    Returns:
        Mapping of category (Applications, Plugins, Themes, Addons) to items
    """
    return {
        category: addon[field]
        for field, category in REQUIREMENT_FIELDS.items()
        if isinstance(addon.get(field), (list, dict))
    }


def encode_requirements(requirements: dict[str, Any]) -> str:
    """Serialize requirements for storage."""
    return json.dumps(requirements, sort_keys=True, separators=(",", ":"))


def decode_requirements(blob: str) -> dict[str, Any]:
    """Inverse of encode_requirements."""
    return json.loads(blob) if blob else {}


def file_md5(path: Path) -> str:
    """Calculate the MD5 of a file using chunked streaming."""
    hasher = hashlib.md5()
    with path.open("rb") as f:
        while chunk := f.read(_HASH_CHUNK_SIZE):
            hasher.update(chunk)
    return hasher.hexdigest()


def relative_upload_path(path: Path, uploads_root: Path | None) -> str | None:
    """Path of an upload relative to the uploads root.

    Args:
        path: The uploaded archive
        uploads_root: Root folder uploads are saved under

    Returns:
        The relative path in POSIX form, or None if the archive is not
        below the uploads root
    """
    if uploads_root is None:
        return None

    resolved = path.resolve()
    root = uploads_root.resolve()
    if resolved == root or not resolved.is_relative_to(root):
        return None

    return resolved.relative_to(root).as_posix()


def finalize_addon(addon: AddonRecord, archive_path: Path, config: ExtractorConfig) -> AddonRecord:
    """Attach requirements and the archive's own attributes to a record.

    Args:
        addon: Record from build_addon or build_core_addon
        archive_path: The inspected archive
        config: Supplies the uploads root

    Returns:
        The completed record (the same dict, updated in place)
    """
    addon["Requirements"] = encode_requirements(extract_requirements(addon))  # type: ignore[arg-type]
    addon["Checked"] = True
    addon["Path"] = str(archive_path)

    relative = relative_upload_path(archive_path, config.uploads_root)
    if relative is not None:
        addon["File"] = relative

    if archive_path.is_file():
        addon["MD5"] = file_md5(archive_path)
        addon["FileSize"] = archive_path.stat().st_size

    return addon
