"""Exceptions raised by the client, converted to user-facing messages at the workflow boundary."""

from typing import Optional


class ResumeTailorError(Exception):
    """
    Base class for all client errors.

    Attributes:
        message: User-facing error description
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthError(ResumeTailorError):
    """Login failed, or the backend returned no token."""


class NetworkError(ResumeTailorError):
    """
    Exception raised when a backend call fails at the transport level or
    returns a non-success status.

    Attributes:
        message: Backend-provided message when present, otherwise a generic one
        status_code: HTTP status code (None for transport failures)
        endpoint: Endpoint that was called
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
    ):
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

    @property
    def is_unauthorized(self) -> bool:
        """True when the backend rejected the bearer token."""
        return self.status_code == 401


class FolderPermissionError(ResumeTailorError):
    """Write access to a remembered folder was denied."""


class CancellationError(ResumeTailorError):
    """The user dismissed a folder picker or save dialog."""


class ValidationError(ResumeTailorError):
    """A submission failed local validation (no profile selected)."""


class PreferenceStoreError(ResumeTailorError):
    """
    Exception raised when a folder preference cannot be read or written.

    Attributes:
        message: Error description
        key: Settings key involved
        original_error: Underlying storage or decoding error
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.key = key
        self.original_error = original_error
        super().__init__(message)


class HandleInvalidError(ResumeTailorError):
    """A directory or file handle no longer refers to a usable location."""
