"""Custom exceptions for export-pr."""

from export_pr.utils import get_logger
from typing import Optional

logger = get_logger(__name__)


class ExportPRError(Exception):
    """Base exception for export-pr."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details

        logger.debug(f"Exception raised: {message}")
        if details:
            logger.debug(f"Exception details: {details}")


class ConfigurationError(ExportPRError):
    """Raised for bad command-line or settings input."""
    pass


class DataError(ExportPRError):
    """Raised when a provider response cannot be interpreted."""
    pass


class APIError(ExportPRError):
    """Raised when API calls fail."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: str = None):
        super().__init__(message, details)
        self.status_code = status_code


class NotFoundError(APIError):
    """Raised when a repository is not found."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message, status_code=404, details=details)


class AccessPermissionError(APIError):
    """Raised when authentication fails or access is denied."""
    pass


def error_for_status(message: str, status_code: Optional[int], details: str = None) -> APIError:
    """
    Pick the APIError subclass matching an HTTP status.

    Args:
        message: Error message
        status_code: HTTP status returned by the platform, if any
        details: Extra information for debug logging

    Returns:
        APIError instance (not raised)
    """
    if status_code == 404:
        return NotFoundError(message, details=details)
    if status_code in (401, 403):
        return AccessPermissionError(message, status_code=status_code, details=details)
    return APIError(message, status_code=status_code, details=details)
