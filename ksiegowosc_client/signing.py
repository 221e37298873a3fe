"""
Request signing for the 360ksiegowosc API.

Every call carries ``ApiId``, ``timestamp`` and ``signature`` query
parameters, where the signature is::

    base64(HMAC-SHA256(api_key, api_id + timestamp + body))
"""

import base64
import datetime
import hashlib
import hmac
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .constants import PARAM_API_ID, PARAM_TIMESTAMP, PARAM_SIGNATURE


@dataclass(frozen=True)
class Credentials:
    """API identity and secret key. The key never appears in repr()."""

    api_id: str
    api_key: str = field(repr=False)


def get_timestamp(d: Optional[datetime.datetime] = None) -> str:
    """
    Format a local time as ``YYYYMMDDHHmmss``.

    Args:
        d: Naive local datetime, defaults to now

    Returns:
        14 digit timestamp
    """
    if d is None:
        d = datetime.datetime.now()
    return (f"{d.year:04d}{d.month:02d}{d.day:02d}"
            f"{d.hour:02d}{d.minute:02d}{d.second:02d}")


def get_datestamp(d: Optional[datetime.datetime] = None) -> str:
    """Format a local date as ``YYYYMMDD``."""
    if d is None:
        d = datetime.datetime.now()
    return f"{d.year:04d}{d.month:02d}{d.day:02d}"


def compute_signature(api_id: str, api_key: str, timestamp: str, body: str) -> str:
    """Base64 encoded HMAC-SHA256 of api_id + timestamp + body."""
    message = api_id + timestamp + body
    mac = hmac.new(
        api_key.encode('utf-8'),
        message.encode('utf-8'),
        hashlib.sha256
    )
    return base64.b64encode(mac.digest()).decode('ascii')


def sign(api_id: str, api_key: str, timestamp: str, body: str) -> Tuple[str, Dict[str, str]]:
    """
    Sign a request body.

    An empty key is accepted; the service decides how to reject it.

    Args:
        api_id: Public API identifier
        api_key: Secret key
        timestamp: Value from get_timestamp() taken at send time
        body: Exact request body that will be transmitted

    Returns:
        Tuple of (signature, query parameters)
    """
    signature = compute_signature(api_id, api_key, timestamp, body)
    params = {
        PARAM_API_ID: api_id,
        PARAM_TIMESTAMP: timestamp,
        PARAM_SIGNATURE: signature,
    }
    return signature, params


def build_auth_query(credentials: Credentials, body: str,
                     timestamp: Optional[str] = None) -> Dict[str, str]:
    """Query parameters for one call, signed with a fresh timestamp."""
    if timestamp is None:
        timestamp = get_timestamp()
    _, params = sign(credentials.api_id, credentials.api_key, timestamp, body)
    return params
