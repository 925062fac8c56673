"""Custom exception classes."""
from typing import Dict, Optional


class FestivalAdminError(Exception):
    """Base class for dashboard errors."""
    pass


class ValidationError(FestivalAdminError):
    """Raised when a draft fails validation."""

    def __init__(self, field_errors: Dict[str, str], message: Optional[str] = None):
        self.field_errors = dict(field_errors)
        if message is None:
            message = "; ".join(f"{name}: {text}" for name, text in self.field_errors.items())
        super().__init__(message or "Validation failed")


class ScheduleError(ValueError):
    """Raised when a programme ends before it starts."""
    pass


class InvalidTransitionError(FestivalAdminError):
    """Raised when a mutation coordinator is driven through an illegal transition."""
    pass


class ApiError(FestivalAdminError):
    """Raised when a call to the festival API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(ApiError):
    """Raised when the API cannot be reached."""
    pass


class ServerError(ApiError):
    """Raised on 5xx responses or unreadable response bodies."""
    pass


class NotFoundError(ApiError):
    """Raised when the requested entity doesn't exist."""
    pass


class ImageUploadError(ApiError):
    """Raised when the image upload endpoint does not answer with 200."""
    pass


class RemoteValidationError(ApiError, ValidationError):
    """Raised when the API rejects a payload with a 4xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 field_errors: Optional[Dict[str, str]] = None):
        ValidationError.__init__(self, field_errors or {}, message)
        self.status_code = status_code
