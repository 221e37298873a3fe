"""
Tests for the abortable transport.
"""

import socket
import threading
import time
from unittest.mock import Mock

import pytest

from ksiegowosc_client import Ksiegowosc360Client, CancellationToken, RequestCancelledError
from ksiegowosc_client.transport import (
    AbortHandle,
    AbortableHTTPAdapter,
    abort_scope,
    abortable_session,
    _attach
)


def wait_for(condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not condition() and time.monotonic() < deadline:
        time.sleep(0.01)
    return condition()


def request_threads():
    return [t for t in threading.enumerate() if t.name == 'ksiegowosc-request' and t.is_alive()]


class TestAbortHandle:
    """Test connection tracking and shutdown."""

    @pytest.fixture
    def conn(self):
        conn = Mock()
        conn.sock = Mock()
        return conn

    def test_abort_shuts_down_attached_sockets(self, conn):
        handle = AbortHandle()
        handle.attach(conn)

        handle.abort()

        conn.sock.shutdown.assert_called_once_with(socket.SHUT_RDWR)
        assert handle.aborted is True

    def test_attach_after_abort_shuts_down(self, conn):
        handle = AbortHandle()
        handle.abort()

        handle.attach(conn)

        conn.sock.shutdown.assert_called_once_with(socket.SHUT_RDWR)

    def test_abort_without_socket(self):
        conn = Mock()
        conn.sock = None
        handle = AbortHandle()
        handle.attach(conn)

        handle.abort()  # Should not raise

    def test_shutdown_error_ignored(self, conn):
        conn.sock.shutdown.side_effect = OSError("not connected")
        handle = AbortHandle()
        handle.attach(conn)

        handle.abort()  # Should not raise

    def test_closed_handle_does_not_abort(self, conn):
        handle = AbortHandle()
        handle.attach(conn)

        handle.close()
        handle.abort()

        conn.sock.shutdown.assert_not_called()

    def test_abort_scope(self, conn):
        handle = AbortHandle()

        _attach(conn)  # no scope, ignored
        with abort_scope(handle):
            _attach(conn)
        _attach(Mock())

        handle.abort()

        conn.sock.shutdown.assert_called_once_with(socket.SHUT_RDWR)

    def test_abortable_session_adapters(self):
        session = abortable_session()

        assert isinstance(session.get_adapter("http://example.com"), AbortableHTTPAdapter)
        assert isinstance(session.get_adapter("https://example.com"), AbortableHTTPAdapter)
        session.close()


class TestCancelAgainstSilentServer:
    """Cancellation against a server that accepts and never answers."""

    @pytest.fixture
    def silent_server(self):
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.bind(("127.0.0.1", 0))
        server.listen(8)
        server.settimeout(0.1)
        accepted = []
        stop = threading.Event()

        def serve():
            while not stop.is_set():
                try:
                    conn, _ = server.accept()
                except socket.timeout:
                    continue
                except OSError:
                    break
                accepted.append(conn)

        thread = threading.Thread(target=serve, daemon=True)
        thread.start()
        yield server.getsockname()[1], accepted
        stop.set()
        thread.join(2)
        server.close()
        for conn in accepted:
            conn.close()

    @pytest.fixture
    def client(self, silent_server):
        port, _ = silent_server
        client = Ksiegowosc360Client("id", "key", base_url=f"http://127.0.0.1:{port}/api")
        yield client
        client.close()

    def cancel_after(self, delay):
        token = CancellationToken()
        timer = threading.Timer(delay, token.cancel, args=("user aborted",))
        timer.daemon = True
        timer.start()
        return token

    def test_cancel_releases_transport_thread(self, client, silent_server):
        _, accepted = silent_server

        with pytest.raises(RequestCancelledError, match="user aborted"):
            client.get_taxes(cancel_token=self.cancel_after(0.3))

        assert wait_for(lambda: len(accepted) == 1)
        assert wait_for(lambda: not request_threads())

    def test_cancelled_call_does_not_block_next(self, client, silent_server):
        _, accepted = silent_server

        with pytest.raises(RequestCancelledError):
            client.get_taxes(cancel_token=self.cancel_after(0.3))
        assert wait_for(lambda: len(accepted) == 1)

        with pytest.raises(RequestCancelledError):
            client.get_banks(cancel_token=self.cancel_after(0.3))

        assert wait_for(lambda: len(accepted) == 2)
        assert wait_for(lambda: not request_threads())
