"""
Abortable HTTP transport.

requests cannot interrupt a call blocked on the network from another
thread. AbortableHTTPAdapter uses connection classes that register
themselves with the AbortHandle active on the sending thread, and
AbortHandle.abort() shuts their sockets down, which wakes the blocked
connect, send or recv with a connection error.
"""

import logging
import socket
import threading
from contextlib import contextmanager

import requests
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

logger = logging.getLogger(__name__)

_local = threading.local()


class AbortHandle:
    """Connections used by one call, shut down together on abort()."""

    def __init__(self):
        self._lock = threading.Lock()
        self._connections = []
        self.aborted = False
        self.closed = False

    def attach(self, conn):
        with self._lock:
            if self.closed:
                return
            if conn not in self._connections:
                self._connections.append(conn)
            aborted = self.aborted
        if aborted:
            _shutdown(conn)

    def abort(self):
        with self._lock:
            if self.closed or self.aborted:
                return
            self.aborted = True
            connections = list(self._connections)
        for conn in connections:
            _shutdown(conn)

    def close(self):
        """Forget the connections; later abort() calls are no-ops."""
        with self._lock:
            self.closed = True
            self._connections = []


@contextmanager
def abort_scope(handle: AbortHandle):
    """Attach connections opened on this thread to handle."""
    previous = getattr(_local, 'handle', None)
    _local.handle = handle
    try:
        yield handle
    finally:
        _local.handle = previous


def _attach(conn):
    handle = getattr(_local, 'handle', None)
    if handle is not None:
        handle.attach(conn)


def _shutdown(conn):
    sock = getattr(conn, 'sock', None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        # already closed by the peer or by urllib3
        logger.debug("Socket shutdown failed: %s", e)


class _AbortableConnectionMixin:

    def connect(self):
        super().connect()
        _attach(self)

    def request(self, *args, **kwargs):
        _attach(self)
        return super().request(*args, **kwargs)


class _AbortableHTTPConnection(_AbortableConnectionMixin, HTTPConnection):
    pass


class _AbortableHTTPSConnection(_AbortableConnectionMixin, HTTPSConnection):
    pass


class _AbortableHTTPConnectionPool(HTTPConnectionPool):
    ConnectionCls = _AbortableHTTPConnection


class _AbortableHTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = _AbortableHTTPSConnection


class AbortableHTTPAdapter(HTTPAdapter):
    """HTTPAdapter whose connections can be shut down through an AbortHandle."""

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = {
            'http': _AbortableHTTPConnectionPool,
            'https': _AbortableHTTPSConnectionPool,
        }


def abortable_session() -> requests.Session:
    """Session with abortable adapters mounted for http and https."""
    session = requests.Session()
    adapter = AbortableHTTPAdapter()
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session
