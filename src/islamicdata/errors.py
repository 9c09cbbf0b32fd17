"""Error taxonomy for content access.

Every public accessor on ``ContentClient`` either returns a document or
raises exactly one ``ContentError`` subclass. ``code`` is stable and safe to
branch on; ``message`` and ``suggestion`` are for humans.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    FETCH_FAILED = "FETCH_FAILED"
    UNAVAILABLE = "UNAVAILABLE"
    SCHEMA_ERROR = "SCHEMA_ERROR"


class ContentError(Exception):
    """Root of all errors raised by islamicdata."""

    code: ErrorCode = ErrorCode.UNAVAILABLE
    recoverable: bool = False

    def __init__(self, message: str, *, suggestion: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code.value,
            "message": self.message,
            "suggestion": self.suggestion,
            "recoverable": self.recoverable,
        }


class InvalidArgumentError(ContentError):
    """Caller-supplied identifier outside its valid domain. Raised before any I/O."""

    code = ErrorCode.INVALID_ARGUMENT


class NotFoundError(ContentError):
    """The server answered but the requested resource or sub-record is absent."""

    code = ErrorCode.NOT_FOUND


class FetchFailedError(ContentError):
    """Non-200 response, non-JSON body, or transport-level failure."""

    code = ErrorCode.FETCH_FAILED
    recoverable = True

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        suggestion: str = "",
    ) -> None:
        super().__init__(message, suggestion=suggestion)
        self.url = url
        self.status_code = status_code


class UnavailableError(ContentError):
    """The network failed and no cached copy exists."""

    code = ErrorCode.UNAVAILABLE
    recoverable = True


class SchemaError(ContentError):
    """A document did not match the expected shape for its resource class."""

    code = ErrorCode.SCHEMA_ERROR
