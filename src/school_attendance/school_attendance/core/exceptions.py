from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class EditWindowError(ValidationError):
    """Raised when a date is mutated outside its edit window."""


class NothingToSaveError(ValidationError):
    """Raised when a save is requested with no records to submit."""


class SaveInProgressError(ValidationError):
    """Raised when a save is requested while another one is still running."""


class RemoteError(DomainError):
    """Raised when the attendance backend rejects or fails a request."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
