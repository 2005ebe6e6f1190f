"""Core utilities for addon inspection.

This package contains the metadata parsers, schema validation, type
definitions and record classification used by the extraction pipeline.
"""

from .classifier import build_addon, build_core_addon, decode_requirements, encode_requirements, finalize_addon
from .info_array import parse_core_version, parse_info_array
from .manifest import CapitalCaseScheme, convert_addon_json
from .metadata import extract_info
from .types import AddonInfo, AddonRecord, AddonType, ScanEntry
from .validator import check_addon, validate_addon_record, validate_addon_record_with_error_details

__all__ = [
    "AddonInfo",
    "AddonRecord",
    "AddonType",
    "CapitalCaseScheme",
    "ScanEntry",
    "build_addon",
    "build_core_addon",
    "check_addon",
    "convert_addon_json",
    "decode_requirements",
    "encode_requirements",
    "extract_info",
    "finalize_addon",
    "parse_core_version",
    "parse_info_array",
    "validate_addon_record",
    "validate_addon_record_with_error_details",
]
