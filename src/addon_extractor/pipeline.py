"""Addon inspection pipeline.

This module provides the main interface for inspecting an uploaded addon
archive: open it, scan it for metadata files, parse and validate the
candidates in order, and build the record for the first one that passes.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import ExtractorConfig
from .core.classifier import build_addon, build_core_addon, finalize_addon
from .core.locale import translate
from .core.metadata import extract_core_version, extract_info, is_core_entry
from .core.types import AddonRecord, ScanEntry
from .core.validator import check_addon
from .errors import ExtractorError, MalformedArchiveError, NotFoundError, ValidationError
from .registry import ReaderRegistry
from .scanner import ScratchDirectory, scan_archive

logger = logging.getLogger(__name__)


@dataclass
class InspectionResult:
    """Outcome of inspecting one archive.

    Exactly one of ``addon`` and ``error`` is set.

    Attributes:
        addon: The addon record, when one was found
        error: Why no addon record could be produced
    """

    addon: AddonRecord | None = None
    error: ExtractorError | None = None

    @property
    def ok(self) -> bool:
        """Whether an addon record was produced."""
        return self.addon is not None

    def unwrap(self) -> AddonRecord:
        """Return the record or raise the error."""
        if self.addon is None:
            raise self.error or ValidationError([], translate("NoAddonFound"))
        return self.addon


class AddonExtractor:
    """Main interface for addon inspection.

    Example:
        >>> extractor = AddonExtractor(ExtractorConfig(uploads_root=Path('/uploads')))
        >>> result = extractor.inspect(Path('/uploads/addons/myplugin.zip'))
        >>> if result.ok:
        ...     print(result.addon['AddonKey'])
    """

    def __init__(self, config: ExtractorConfig | None = None):
        """Initialize the extractor.

        Args:
            config: Settings; defaults to ExtractorConfig()
        """
        self.config = config or ExtractorConfig()

    def inspect(self, path: Path) -> InspectionResult:
        """Inspect an archive and return the addon it contains.

        Every failure is returned in the result except a malformed
        archive, which is always raised.

        Args:
            path: The uploaded archive

        Returns:
            InspectionResult with either the addon record or the error

        Raises:
            MalformedArchiveError: If an entry name contains a traversal sequence
        """
        path = Path(path)
        if not path.exists():
            return InspectionResult(error=NotFoundError(f"{path} not found.", 404))

        try:
            with ScratchDirectory(path, self.config.scratch_root) as scratch:
                reader = ReaderRegistry.open(path, self.config.reader_order)
                entries = scan_archive(reader, scratch, self.config)
                return self._evaluate(path, entries)
        except MalformedArchiveError:
            raise
        except ExtractorError as e:
            logger.info("Could not inspect %s: %s", path, e)
            return InspectionResult(error=e)

    def analyze(self, path: Path, throw_error: bool = True) -> AddonRecord | None:
        """Inspect an archive, raising or returning None on failure.

        Args:
            path: The uploaded archive
            throw_error: Raise typed errors when True; return None when False

        Returns:
            The addon record, or None when nothing was found and
            ``throw_error`` is False

        Raises:
            ExtractorError: When ``throw_error`` is True and no addon was found
            MalformedArchiveError: Always, for archives with traversal entries
        """
        result = self.inspect(path)
        if result.ok or throw_error:
            return result.unwrap()
        return None

    def _evaluate(self, path: Path, entries: list[ScanEntry]) -> InspectionResult:
        """Try each candidate in listing order and build the first that passes."""
        addon: AddonRecord | None = None
        messages: list[str] = []

        for entry in entries:
            if is_core_entry(entry):
                version = extract_core_version(entry)
                if not version:
                    logger.debug("No core version in %s, skipping", entry["ArchivePath"])
                    continue
                addon = build_core_addon(entry, version)
                break

            info = extract_info(entry, default_key=path.stem)
            messages = check_addon(info, entry)
            if messages:
                logger.debug("Rejected %s: %s", entry["ArchivePath"], "; ".join(messages))
                continue

            addon = build_addon(info, self.config)  # type: ignore[arg-type]
            break

        if addon is None:
            return InspectionResult(error=ValidationError(messages, translate("NoAddonFound")))

        addon = finalize_addon(addon, path, self.config)
        logger.info("Found addon %s (type %s) in %s", addon["AddonKey"], addon["AddonTypeID"], path)
        return InspectionResult(addon=addon)


def analyze_addon(
    path: Path, throw_error: bool = True, config: ExtractorConfig | None = None
) -> AddonRecord | None:
    """Check an addon archive and extract the addon information out of it.

    Args:
        path: The uploaded archive
        throw_error: Raise typed errors when True; return None when False
        config: Optional settings

    Returns:
        The addon record, or None if nothing was found and ``throw_error``
        is False
    """
    return AddonExtractor(config).analyze(path, throw_error=throw_error)
