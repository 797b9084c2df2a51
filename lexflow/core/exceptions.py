"""Custom exception hierarchy for the LexFlow data layer.

Every deliberate error inherits from LexflowError, giving callers a single
base class to catch. Subclasses carry domain-specific context (status_code
for HTTP failures, details dict for debugging).
"""

from __future__ import annotations

from typing import Any


class LexflowError(Exception):
    """Base exception for all LexFlow errors."""

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)


class BackendError(LexflowError):
    """Raised when the remote table service rejects or fails a request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code


class StorageError(LexflowError):
    """Raised when the local durable store cannot be read or written."""


class UnknownFieldError(LexflowError):
    """Raised when a partial update names a field the entity does not have."""


class CalendarError(LexflowError):
    """Raised when a Google Calendar request fails."""


class CalendarAuthError(CalendarError):
    """Raised when Google Calendar reports the cached credential is no longer valid."""


class CalendarNotConnectedError(CalendarError):
    """Raised when a calendar call is attempted without a valid credential."""


class CalendarNotConfiguredError(CalendarError):
    """Raised when connecting without a configured OAuth client id."""


class DocumentContentError(LexflowError):
    """Raised when exporting a document that has no stored content."""
