"""
Custom exceptions for the veterinary hospital finder.

Every failure raised by the gateway, the location providers and the
favorites storage derives from ``VetMapException``. The search coordinator
catches them at the call site and turns ``message`` into a user-visible
notification.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Device location errors
    PERMISSION_DENIED = "PERMISSION_DENIED"
    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"

    # Remote mapping API errors
    NETWORK_ERROR = "NETWORK_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"

    # Local storage errors
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"

    # Guards
    EMPTY_QUERY = "EMPTY_QUERY"


class VetMapException(Exception):
    """Base exception for the veterinary hospital finder."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class PermissionDeniedError(VetMapException):
    """Raised when the user refuses the location permission."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Location permission denied; allow location access to find nearby hospitals",
            error_code=ErrorCode.PERMISSION_DENIED,
            details=details,
        )


class LocationUnavailableError(VetMapException):
    """Raised when no device fix can be obtained."""

    def __init__(self, message: str = "Current location is unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.LOCATION_UNAVAILABLE,
            details=details,
        )


class NetworkError(VetMapException):
    """Raised on transport failures, timeouts and non-2xx HTTP responses."""

    def __init__(
        self,
        message: str = "Network error while contacting the map service",
        http_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if http_status is not None:
            details["http_status"] = http_status
        super().__init__(
            message=message,
            error_code=ErrorCode.NETWORK_ERROR,
            details=details,
        )
        self.http_status = http_status


class ProviderError(VetMapException):
    """Raised when the provider answers with a non-success status."""

    def __init__(
        self,
        status: str,
        message: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.PROVIDER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        details["status"] = status
        super().__init__(
            message=message or f"Map service returned status {status}",
            error_code=error_code,
            details=details,
        )
        self.status = status


class MalformedResponseError(ProviderError):
    """Raised when a response body is not JSON or misses required fields."""

    def __init__(self, endpoint: str, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details["endpoint"] = endpoint
        super().__init__(
            status="INVALID_RESPONSE",
            message=f"Map service sent an unreadable {endpoint} response",
            error_code=ErrorCode.INVALID_RESPONSE,
            details=details,
        )


class PersistenceError(VetMapException):
    """Raised when the favorites storage cannot be read or written."""

    def __init__(self, message: str = "Could not save favorites", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.PERSISTENCE_ERROR,
            details=details,
        )


class EmptyQueryError(VetMapException):
    """
    Guard raised for queries that trim to nothing.
    Callers treat it as a no-op, never as a user-facing failure.
    """

    def __init__(self):
        super().__init__(
            message="Search query is empty",
            error_code=ErrorCode.EMPTY_QUERY,
        )
