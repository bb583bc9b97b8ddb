from __future__ import annotations

from typing import Any, Dict, Optional


class FilesystemException(Exception):
    """Base class for storage disk failures."""
    pass


class CloudinaryError(FilesystemException):
    """An error reported by the Cloudinary API."""

    def __init__(self, message: str = "", http_code: Optional[int] = None, response: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.http_code = http_code
        self.response = response or {}


class NotFound(CloudinaryError):
    """The requested resource or folder does not exist upstream."""
    pass


class BadRequest(CloudinaryError):
    """The API rejected the request parameters."""
    pass


class RateLimited(CloudinaryError):
    """The account exceeded its Admin API rate limit."""
    pass


class ApiError(CloudinaryError):
    """Any other API failure."""
    pass


class UnableToMoveFile(FilesystemException):
    """Raised by move() when the source could not be moved."""

    def __init__(self, source: str, destination: str, reason: str = "") -> None:
        self.source = source
        self.destination = destination
        self.reason = reason

        message = f"Unable to move file from {source} to {destination}"
        if reason:
            message += f": {reason}"
        super().__init__(message)

    @classmethod
    def from_location_to(cls, source: str, destination: str, previous: Optional[BaseException] = None) -> UnableToMoveFile:
        """Build the exception, keeping the upstream error as its cause."""
        exception = cls(source, destination, str(previous) if previous else "")
        exception.__cause__ = previous
        return exception
