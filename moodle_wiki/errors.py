"""
Moodle Wiki - Core Error Types

Defines the exception hierarchy for the wiki data-access layer.
All exceptions raised by this package inherit from MoodleWikiError.

Errors reported by a site transport (network, permission, web-service
exceptions) are NOT wrapped: they propagate to the caller unchanged.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes for structured error responses."""

    # Input validation errors
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    MISSING_PARAMETER = "MISSING_PARAMETER"

    # Lookup errors
    NOT_FOUND = "NOT_FOUND"
    SITE_NOT_FOUND = "SITE_NOT_FOUND"

    # Cache errors
    CACHE_FAILURE = "CACHE_FAILURE"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class MoodleWikiError(Exception):
    """Base exception for all Moodle Wiki errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(MoodleWikiError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class CacheError(MoodleWikiError):
    """Base exception for cache-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class CacheOperationError(CacheError):
    """Raised when a cache invalidation cannot be carried out."""

    pass


class NotFoundError(MoodleWikiError):
    """
    Raised when a read succeeded but the expected payload is missing.

    Covers both an absent response field and a lookup filter that matched
    no entity.
    """

    def __init__(self, resource: str, identifier: Any):
        message = f"{resource} not found: {identifier}"
        super().__init__(message, {"resource": resource, "id": identifier}, status_code=404)
        self.resource = resource
        self.identifier = identifier


class InvalidArgumentError(MoodleWikiError):
    """Raised when a required identifier argument is absent."""

    def __init__(self, argument: str, value: Any = None):
        message = f"Invalid value for argument '{argument}': {value!r}"
        super().__init__(message, {"argument": argument, "value": value}, status_code=400)
        self.argument = argument


class SiteNotFoundError(MoodleWikiError):
    """Raised when a site id cannot be resolved."""

    def __init__(self, site_id: str | None):
        message = f"Site not found: {site_id}" if site_id else "No current site"
        super().__init__(message, {"site_id": site_id}, status_code=404)
        self.site_id = site_id


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract the appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Matching ErrorCode, INTERNAL_ERROR for anything unknown
    """
    if isinstance(error, SiteNotFoundError):
        return ErrorCode.SITE_NOT_FOUND

    if isinstance(error, NotFoundError):
        return ErrorCode.NOT_FOUND

    if isinstance(error, InvalidArgumentError):
        return ErrorCode.INVALID_ARGUMENT

    if isinstance(error, CacheError):
        return ErrorCode.CACHE_FAILURE

    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR

    return ErrorCode.INTERNAL_ERROR
