"""
Shared error handling for the Anime & Media API.

Every exception here maps to exactly one HTTP status and is rendered as an
error envelope by the service exception handlers.
"""

from typing import Dict, Any, Optional


class MediaApiException(Exception):
    """Base exception for Anime & Media API services."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None,
                 status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(MediaApiException):
    """Missing or malformed request input."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class NotFoundError(MediaApiException):
    """Unmatched route."""

    status_code = 404

    def __init__(self, message: str = "API endpoint not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class RateLimitError(MediaApiException):
    """Rate limiting errors."""

    status_code = 429

    def __init__(self, message: str = "Too many requests, please try again later.",
                 retry_after_ms: int = 0, details: Optional[Dict[str, Any]] = None):
        self.retry_after_ms = retry_after_ms
        super().__init__("RATE_LIMIT_ERROR", message, details)


class UpstreamError(MediaApiException):
    """Failure talking to a third-party data source."""

    status_code = 500

    def __init__(self, message: str = "Request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("UPSTREAM_ERROR", message, details)


class InternalError(MediaApiException):
    """Unexpected failure inside handler logic."""

    status_code = 500

    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        super().__init__("INTERNAL_ERROR", message, details)
