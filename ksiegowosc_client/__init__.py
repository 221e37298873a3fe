"""
360ksiegowosc API client

A Python client for the 360ksiegowosc accounting service (Merit Aktiva
compatible API): signs requests with HMAC-SHA256 and normalizes the
service's responses into parsed JSON or APIError.

Example usage:
    from ksiegowosc_client import Ksiegowosc360Client

    with Ksiegowosc360Client("api-id", "api-key") as client:
        taxes = client.get_taxes()
"""

from .cancellation import CancellationToken
from .client import Ksiegowosc360Client
from .exceptions import (
    KsiegowoscClientError,
    APIError,
    JSONParseError,
    RequestCancelledError,
    ConfigurationError,
    TransportError
)
from .constants import (
    PARAM_API_ID,
    PARAM_TIMESTAMP,
    PARAM_SIGNATURE,
    DEFAULT_BASE_URL,
    DEFAULT_CONFIG,
    ERROR_UNKNOWN,
    ERROR_UNKNOWN_RESPONSE
)
from .response import normalize_response, parse_json, parse_response
from .signing import Credentials, get_datestamp, get_timestamp, sign

__version__ = "1.0.0"
__all__ = [
    "Ksiegowosc360Client",
    "CancellationToken",
    "Credentials",
    "KsiegowoscClientError",
    "APIError",
    "JSONParseError",
    "RequestCancelledError",
    "ConfigurationError",
    "TransportError",
    "PARAM_API_ID",
    "PARAM_TIMESTAMP",
    "PARAM_SIGNATURE",
    "DEFAULT_BASE_URL",
    "DEFAULT_CONFIG",
    "ERROR_UNKNOWN",
    "ERROR_UNKNOWN_RESPONSE",
    "normalize_response",
    "parse_json",
    "parse_response",
    "get_timestamp",
    "get_datestamp",
    "sign"
]
