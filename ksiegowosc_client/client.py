"""
360ksiegowosc API client.

Every endpoint is a signed JSON POST. Responses go through
normalize_response(), so a call either returns parsed JSON or raises
APIError.
"""

import json
import logging
import os
import threading
from concurrent.futures import Future
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests

from .cancellation import CancellationToken
from .constants import (
    DEFAULT_CONFIG,
    ENV_API_ID,
    ENV_API_KEY,
    ENV_BASE_URL,
    MAX_LOG_TEXT,
    PARAM_SIGNATURE,
    PATH_GET_BANKS,
    PATH_GET_CUSTOMERS,
    PATH_GET_INVOICES,
    PATH_GET_TAXES,
    PATH_SEND_CUSTOMER,
    PATH_SEND_INVOICE,
)
from .exceptions import ConfigurationError, RequestCancelledError, TransportError
from .models import (
    Bank,
    CreateCustomerPayload,
    CreateCustomerResult,
    CreateInvoicePayload,
    CreateInvoiceResult,
    Customer,
    GetInvoicesPayload,
    Invoice,
    Tax,
)
from .response import decode_body, is_ok_status, normalize_response
from .signing import Credentials, build_auth_query
from .transport import AbortHandle, abort_scope, abortable_session

logger = logging.getLogger(__name__)


class Ksiegowosc360Client:
    """
    Client for the 360ksiegowosc (Merit Aktiva compatible) API.

    Credentials are held for the lifetime of the client and never sent;
    each call is signed with a fresh timestamp.
    """

    def __init__(self, api_id: str, api_key: str, **config):
        """
        Initialize client.

        Args:
            api_id: Public API identifier
            api_key: Secret key used for signing
            **config: Configuration options (base_url, timeout)
        """
        self.credentials = Credentials(api_id, api_key)

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        self._validate_config()

        self.base_url = self.config['base_url'].rstrip('/')

        self.session = requests.Session()

    @classmethod
    def from_env(cls, environ=None, **config) -> "Ksiegowosc360Client":
        """
        Create a client from KSIEGOWOSC_API_ID / KSIEGOWOSC_API_KEY.

        KSIEGOWOSC_BASE_URL overrides the default base URL when set.

        Raises:
            ConfigurationError: If the credentials are not set
        """
        environ = os.environ if environ is None else environ
        api_id = environ.get(ENV_API_ID, "")
        api_key = environ.get(ENV_API_KEY, "")
        if not api_id or not api_key:
            raise ConfigurationError(f"{ENV_API_ID} and {ENV_API_KEY} must be set")

        if environ.get(ENV_BASE_URL):
            config.setdefault('base_url', environ[ENV_BASE_URL])
        return cls(api_id, api_key, **config)

    def _validate_config(self):
        """Validate client configuration."""
        if not self.config['base_url']:
            raise ConfigurationError("base_url cannot be empty")

        timeout = self.config['timeout']
        if timeout is not None and timeout <= 0:
            raise ConfigurationError("timeout must be positive or None")

    @property
    def api_id(self) -> str:
        return self.credentials.api_id

    # Endpoints

    def get_invoices(self, payload: Optional[GetInvoicesPayload] = None,
                     cancel_token: Optional[CancellationToken] = None) -> List[Invoice]:
        """List sales invoices, optionally filtered by period and paid state."""
        return self.request(PATH_GET_INVOICES, payload, cancel_token)

    def create_invoice(self, payload: CreateInvoicePayload,
                       cancel_token: Optional[CancellationToken] = None) -> CreateInvoiceResult:
        """
        Create a sales invoice.

        See https://api.merit.ee/connecting-robots/reference-manual/sales-invoices/create-sales-invoice/
        """
        return self.request(PATH_SEND_INVOICE, payload, cancel_token)

    def get_customers(self, payload: Optional[Dict[str, Any]] = None,
                      cancel_token: Optional[CancellationToken] = None) -> List[Customer]:
        return self.request(PATH_GET_CUSTOMERS, payload, cancel_token)

    def create_customer(self, payload: CreateCustomerPayload,
                        cancel_token: Optional[CancellationToken] = None) -> CreateCustomerResult:
        return self.request(PATH_SEND_CUSTOMER, payload, cancel_token)

    def get_taxes(self, payload: Optional[Dict[str, Any]] = None,
                  cancel_token: Optional[CancellationToken] = None) -> List[Tax]:
        """List tax rates. Invoice rows reference these by Id."""
        return self.request(PATH_GET_TAXES, payload, cancel_token)

    def get_banks(self, payload: Optional[Dict[str, Any]] = None,
                  cancel_token: Optional[CancellationToken] = None) -> List[Bank]:
        return self.request(PATH_GET_BANKS, payload, cancel_token)

    # Request pipeline

    def _prepare_request_body(self, payload=None) -> str:
        """Serialize payload to the exact JSON text that is signed and sent."""
        if payload is None:
            payload = {}
        return json.dumps(payload, separators=(',', ':'), ensure_ascii=False)

    def _build_request(self, path: str, body: str) -> requests.PreparedRequest:
        """Sign body and build the POST request for path."""
        url = urljoin(self.base_url + '/', path.lstrip('/'))

        # Signed at send time, never reused
        params = build_auth_query(self.credentials, body)

        request = requests.Request(
            'POST',
            url,
            params=params,
            data=body.encode('utf-8'),
            headers={'Content-Type': 'application/json'},
        )
        return self.session.prepare_request(request)

    def request(self, path: str, payload=None,
                cancel_token: Optional[CancellationToken] = None) -> Any:
        """
        Make a signed POST request and return the parsed response.

        Args:
            path: Endpoint path relative to base_url
            payload: JSON serializable payload, {} when None
            cancel_token: Optional token aborting the call

        Returns:
            Parsed JSON body ("" for an empty successful body)

        Raises:
            APIError: If the service reports a failure or sends garbage
            RequestCancelledError: If cancel_token fires before completion
            TransportError: If the HTTP request fails
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        body = self._prepare_request_body(payload)
        prepared = self._build_request(path, body)

        logger.debug("REQUEST  POST %s", _redact(prepared.url))

        if cancel_token is None:
            response = self._send(prepared)
        else:
            response = self._send_cancellable(prepared, cancel_token)

        text = decode_body(response)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "RESPONSE POST %s status=%s body=%s",
                _redact(prepared.url),
                response.status_code,
                text[:MAX_LOG_TEXT],
            )

        return normalize_response(text, is_ok_status(response.status_code),
                                  response.status_code, response.url)

    def _send(self, prepared: requests.PreparedRequest,
              session: Optional[requests.Session] = None) -> requests.Response:
        session = session or self.session
        try:
            return session.send(prepared, timeout=self.config['timeout'])
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

    def _send_cancellable(self, prepared: requests.PreparedRequest,
                          cancel_token: CancellationToken) -> requests.Response:
        """
        Send on a dedicated thread and wait for either the response or the token.

        The call uses its own session, so aborting it never touches pooled
        connections of other calls. On cancellation the connection's socket
        is shut down, which unblocks the thread, and the call raises at once.
        """
        handle = AbortHandle()
        future: Future = Future()
        done = threading.Event()
        future.add_done_callback(lambda _: done.set())

        def run():
            future.set_running_or_notify_cancel()
            session = abortable_session()
            try:
                with abort_scope(handle):
                    response = self._send(prepared, session)
            except Exception as e:
                future.set_exception(e)
            else:
                future.set_result(response)
            finally:
                handle.close()
                session.close()

        def on_cancel():
            handle.abort()
            done.set()

        unregister = cancel_token.add_callback(on_cancel)
        try:
            if not cancel_token.is_cancelled:
                threading.Thread(target=run, name='ksiegowosc-request', daemon=True).start()
            done.wait()
        finally:
            unregister()

        if cancel_token.is_cancelled:
            future.add_done_callback(_close_abandoned)
            logger.info("Request to %s cancelled", _redact(prepared.url))
            raise RequestCancelledError(cancel_token.reason or "Request cancelled")

        return future.result()

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __repr__(self):
        return f"Ksiegowosc360Client(api_id={self.api_id!r}, base_url={self.base_url!r})"


def _close_abandoned(future: Future):
    """Close the response of a cancelled call once the transport yields it."""
    if future.cancelled() or future.exception() is not None:
        return
    future.result().close()


def _redact(url: str) -> str:
    """Strip the signature from a URL before logging."""
    marker = f"&{PARAM_SIGNATURE}="
    index = url.find(marker)
    return url if index < 0 else url[:index] + marker + "***"
