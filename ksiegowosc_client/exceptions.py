"""
Custom exceptions for the 360ksiegowosc API client.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from .constants import ERROR_UNKNOWN


class KsiegowoscClientError(Exception):
    """Base exception for client errors."""
    pass


class APIError(KsiegowoscClientError):
    """
    Failed call to the remote service.

    The kind of failure is carried by ``code`` rather than by subclass:
    ``unknown_error`` (service-side failure), ``unknown_response`` (success
    status with a body that is not JSON) or a code echoed by the service.

    Attributes:
        message: Human readable message
        code: Machine error code
        status: HTTP status code, 0 if not applicable
        cause: Underlying exception, if any
        context: Diagnostic data (url, raw response text)
    """

    def __init__(self, message: str, code: str = ERROR_UNKNOWN, status: int = 0,
                 cause: Optional[BaseException] = None,
                 context: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status or 0
        self.cause = cause
        self.context = MappingProxyType(dict(context or {}))
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self):
        return (f"{type(self).__name__}({self.message!r}, code={self.code!r}, "
                f"status={self.status})")


class JSONParseError(KsiegowoscClientError, ValueError):
    """Raised when a response body is not valid JSON."""
    pass


class RequestCancelledError(KsiegowoscClientError):
    """Raised when a call is aborted through its cancellation token."""
    pass


class ConfigurationError(KsiegowoscClientError):
    """Raised when client configuration is invalid."""
    pass


class TransportError(KsiegowoscClientError):
    """Raised when the HTTP request itself fails."""
    pass
