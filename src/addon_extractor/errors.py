"""Error types raised while inspecting addon archives.

Every error carries an HTTP-style status so the upload handler can hand
it straight back to the client.
"""

from enum import Enum


class OpenFailure(str, Enum):
    """Reason codes for an archive that could not be opened."""

    ALREADY_EXISTS = "ER_EXISTS"
    INCONSISTENT = "ER_INCONS"
    INVALID = "ER_INVAL"
    OUT_OF_MEMORY = "ER_MEMORY"
    NOT_FOUND = "ER_NOENT"
    NOT_A_ZIP = "ER_NOZIP"
    CANNOT_OPEN = "ER_OPEN"
    READ_ERROR = "ER_READ"
    SEEK_ERROR = "ER_SEEK"
    UNKNOWN = "Unknown Error"


class ExtractorError(Exception):
    """Base class for addon inspection failures.

    Attributes:
        status: HTTP-style status code (404 or 400)
        code: Short machine-readable error code
    """

    status = 400
    code = "EXTRACTOR_ERROR"

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        if status is not None:
            self.status = status


class NotFoundError(ExtractorError):
    """The archive path does not exist."""

    status = 404
    code = "NOT_FOUND"


class ArchiveOpenError(ExtractorError):
    """No available reader could open the archive."""

    code = "ARCHIVE_OPEN_ERROR"

    def __init__(self, message: str, reason: OpenFailure = OpenFailure.UNKNOWN) -> None:
        super().__init__(message)
        self.reason = reason


class ArchiveLimitError(ExtractorError):
    """The archive exceeds one of the configured resource ceilings."""

    code = "ARCHIVE_LIMIT_EXCEEDED"


class MalformedArchiveError(ExtractorError):
    """An entry name tries to escape the extraction directory.

    Never suppressed, not even when errors are otherwise swallowed.
    """

    code = "MALFORMED_ARCHIVE"


class ValidationError(ExtractorError):
    """No metadata candidate in the archive passed validation."""

    code = "VALIDATION_ERROR"

    def __init__(self, messages: list[str], fallback: str = "") -> None:
        self.messages = list(messages)
        super().__init__("\n".join(self.messages) or fallback)
