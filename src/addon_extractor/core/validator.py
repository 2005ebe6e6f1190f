"""Validation of addon manifests and records.

This module loads the formal JSON Schemas shipped with the package and
implements the addon checks run on every metadata candidate.
"""

import json
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import ValidationError

from .locale import translate
from .types import AddonInfo, AddonRecord, ScanEntry

# Schemas ship inside the package:
# src/addon_extractor/core/validator.py -> src/addon_extractor/schemas/
SCHEMA_DIR = Path(__file__).parent.parent / "schemas"
MANIFEST_SCHEMA = "addon.schema.json"
RECORD_SCHEMA = "addon-record.schema.json"

REQUIRED_FIELDS = ("Description", "Version", "License")

_schemas: dict[str, dict[str, Any]] = {}


def load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema from the package's schema folder.

    Args:
        name: Schema file name

    Returns:
        Dictionary containing the JSON Schema.

    Raises:
        FileNotFoundError: If schema file doesn't exist
        json.JSONDecodeError: If schema is invalid JSON
    """
    if name not in _schemas:
        schema_path = SCHEMA_DIR / name
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with schema_path.open("r", encoding="utf-8") as f:
            _schemas[name] = json.load(f)

    return _schemas[name]


def _error_details(e: ValidationError) -> str:
    error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
    error_msg = f"Validation error at {error_path}: {e.message}"

    # Add context if available
    if e.instance:
        error_msg += f"\nInvalid value: {e.instance}"

    return error_msg


def _validate_with_error_details(instance: Any, schema_name: str) -> tuple[bool, str | None]:
    try:
        jsonschema.validate(instance=instance, schema=load_schema(schema_name))
        return True, None
    except ValidationError as e:
        return False, _error_details(e)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        return False, f"Schema error: {e}"


def validate_addon_manifest(info: dict[str, Any]) -> None:
    """Validate a CapitalCase addon.json mapping against its schema.

    Args:
        info: Manifest with CapitalCase keys

    Raises:
        ValidationError: If the manifest doesn't conform to the schema
    """
    jsonschema.validate(instance=info, schema=load_schema(MANIFEST_SCHEMA))


def validate_addon_manifest_with_error_details(info: dict[str, Any]) -> tuple[bool, str | None]:
    """Validate a manifest and return (is_valid, error_message)."""
    return _validate_with_error_details(info, MANIFEST_SCHEMA)


def validate_addon_record(record: AddonRecord) -> None:
    """Validate a finished addon record against the record schema.

    Args:
        record: The record returned by the extractor

    Raises:
        ValidationError: If the record doesn't conform to the schema
        FileNotFoundError: If schema file is missing
        json.JSONDecodeError: If schema is invalid
    """
    jsonschema.validate(instance=record, schema=load_schema(RECORD_SCHEMA))


def validate_addon_record_with_error_details(record: AddonRecord) -> tuple[bool, str | None]:
    """Validate a record and return detailed error information.

    This is a convenience wrapper that catches validation errors and
    returns user-friendly error messages.

    Args:
        record: The record returned by the extractor

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    return _validate_with_error_details(record, RECORD_SCHEMA)


def _is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


def check_required_fields(info: dict[str, Any]) -> list[str]:
    """Check the fields every addon must declare.

    Args:
        info: The addon's fields

    Returns:
        One "X is required." message per missing field
    """
    template = translate("ValidateRequired")
    return [
        template.replace("%s", translate(field), 1)
        for field in REQUIRED_FIELDS
        if _is_blank(info.get(field))
    ]


def check_addon(info: AddonInfo | None, entry: ScanEntry) -> list[str]:
    """Check a parsed metadata candidate.

    Args:
        info: Parser output in ``{addon-key: fields}`` form, or None if
            the candidate could not be parsed
        entry: Where the candidate came from

    Returns:
        The problems found, or an empty list if the candidate is a valid addon
    """
    if not info or not isinstance(info, dict):
        return [translate("Could not parse addon info array.")]

    key, fields = next(iter(info.items()))
    if not isinstance(fields, dict):
        return [translate("Could not parse addon info array.")]

    results = check_required_fields(fields)

    # Themes may live in a folder named differently from their key
    base = entry.get("Base")
    if base is not None and base.casefold() != str(key).casefold() and fields.get("Variable") != "ThemeInfo":
        results.append(translate("AddonKeyMismatch").replace("%s", entry["Name"], 1))

    return results
