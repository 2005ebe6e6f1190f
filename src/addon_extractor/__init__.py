"""Addon Extractor.

This package inspects uploaded addon archives (applications, plugins,
themes, locales and the core bundles), finds the metadata they declare
and turns it into a validated, classified addon record ready to persist.
"""

# Core library interface
from .config import INFO_PATTERNS, ExtractorConfig
from .pipeline import AddonExtractor, InspectionResult, analyze_addon
from .registry import ReaderRegistry

# Core utilities
from .core import AddonRecord, AddonType, ScanEntry, decode_requirements, encode_requirements
from .core import validate_addon_record, validate_addon_record_with_error_details
from .core.locale import set_translations, translate

# Errors
from .errors import (
    ArchiveLimitError,
    ArchiveOpenError,
    ExtractorError,
    MalformedArchiveError,
    NotFoundError,
    OpenFailure,
    ValidationError,
)

__version__ = "0.1.0"

# Auto-discover and register all archive readers
ReaderRegistry.discover_readers()

__all__ = [
    # Primary library interface
    "AddonExtractor",
    "ExtractorConfig",
    "InspectionResult",
    "ReaderRegistry",
    "analyze_addon",
    "INFO_PATTERNS",
    # Core utilities
    "AddonRecord",
    "AddonType",
    "ScanEntry",
    "decode_requirements",
    "encode_requirements",
    "set_translations",
    "translate",
    "validate_addon_record",
    "validate_addon_record_with_error_details",
    # Errors
    "ArchiveLimitError",
    "ArchiveOpenError",
    "ExtractorError",
    "MalformedArchiveError",
    "NotFoundError",
    "OpenFailure",
    "ValidationError",
]
