"""
Response normalization.

The service is inconsistent about errors: it may answer 200 with an error
shaped JSON body, or a non-2xx status with a plain text message. Outcomes
are therefore classified on both parseability and status.
"""

import json
import logging
from typing import Any

import requests

from .constants import ERROR_UNKNOWN, ERROR_UNKNOWN_RESPONSE, MAX_ERROR_TEXT
from .exceptions import APIError, JSONParseError

logger = logging.getLogger(__name__)


def parse_json(text: str) -> Any:
    """
    Parse a response body.

    An empty body is returned as is, so endpoints that answer with nothing
    yield "" instead of None.

    Raises:
        TypeError: If text is not a string
        JSONParseError: If text is not valid JSON
    """
    if not isinstance(text, str):
        raise TypeError(f"`text` needs to be a string, but it's type of {type(text).__name__}")

    if not text:
        return text

    try:
        return json.loads(text)
    except ValueError as e:
        content = text[:MAX_ERROR_TEXT]
        raise JSONParseError(
            f"Could not parse JSON with err: {e}, origin text: {content}"
        ) from e


def normalize_response(text: str, ok: bool, status: int, url: str) -> Any:
    """
    Turn a raw response into its parsed value or raise APIError.

    Args:
        text: Response body
        ok: Whether the HTTP status is a success status
        status: HTTP status code
        url: Requested URL

    Returns:
        Parsed JSON value

    Raises:
        APIError: For every unsuccessful outcome
        TypeError: If text is not a string
    """
    try:
        data = parse_json(text)
    except JSONParseError as e:
        if not ok:
            logger.warning("Request to %s failed with status %s", url, status)
            raise APIError(
                text,
                code=ERROR_UNKNOWN,
                status=status,
                context={'text': text, 'url': url}
            )

        logger.warning("Unsupported response from %s (status %s)", url, status)
        raise APIError(
            "Unsupported response",
            code=ERROR_UNKNOWN_RESPONSE,
            status=status,
            cause=e,
            context={'text': text[:MAX_ERROR_TEXT], 'url': url}
        )

    if not ok:
        message = "Unknown error"
        code = ERROR_UNKNOWN

        if isinstance(data, dict):
            if isinstance(data.get('msg'), str):
                message = data['msg']
            if isinstance(data.get('Message'), str):
                message = data['Message'].strip()
            if data.get('code'):
                code = _code_string(data['code'])

        logger.warning("Request to %s failed with status %s: %s (%s)", url, status, message, code)
        raise APIError(
            message,
            code=code,
            status=status,
            context={'url': url, 'raw': text}
        )

    return data


def _code_string(code: Any) -> str:
    """Spell a non-string error code the way JavaScript's String() does."""
    if isinstance(code, str):
        return code
    if isinstance(code, bool):
        return 'true' if code else 'false'
    if isinstance(code, float) and code.is_integer():
        return str(int(code))
    if isinstance(code, (int, float)):
        return str(code)
    return json.dumps(code, separators=(',', ':'), ensure_ascii=False)


def is_ok_status(status: int) -> bool:
    return 200 <= status < 300


def decode_body(response: requests.Response) -> str:
    """
    Decode a response body as UTF-8, dropping a leading byte order mark.

    requests would otherwise guess the charset.
    """
    if not response.content:
        return ""
    return response.content.decode('utf-8-sig', errors='replace')


def parse_response(response: requests.Response) -> Any:
    """Normalize a requests.Response."""
    text = decode_body(response)
    return normalize_response(text, is_ok_status(response.status_code),
                              response.status_code, response.url)
