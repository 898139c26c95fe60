"""Tests for the socket transport against a local server."""

from __future__ import annotations

import socket
import threading
from typing import Callable, Iterator

import pytest

from simplefetch.core.errors import ConnectError, TLSError, TransferError
from simplefetch.core.transport import SocketTransport


class _OneShotServer:
    """Accepts a single connection on localhost and hands it to ``handler``."""

    def __init__(self, handler: Callable[[socket.socket], None]) -> None:
        self.received = b""
        self._handler = handler
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(1)
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "_OneShotServer":
        self._thread.start()
        return self

    def _serve(self) -> None:
        conn, _ = self._listener.accept()
        with conn:
            self._handler(conn)

    def close(self) -> None:
        self._thread.join(timeout=5)
        self._listener.close()


def _read_request(conn: socket.socket) -> bytes:
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = conn.recv(1024)
        if not chunk:
            break
        data += chunk
    return data


@pytest.fixture
def serve() -> Iterator[Callable[[Callable[[socket.socket], None]], _OneShotServer]]:
    servers: list[_OneShotServer] = []

    def _start(handler: Callable[[socket.socket], None]) -> _OneShotServer:
        server = _OneShotServer(handler).start()
        servers.append(server)
        return server

    yield _start
    for server in servers:
        server.close()


def test_reads_until_peer_closes(serve) -> None:
    captured: dict[str, bytes] = {}

    def handler(conn: socket.socket) -> None:
        captured["request"] = _read_request(conn)
        conn.sendall(b"HTTP/1.1 200 OK\r\nContent-Length: 2\r\n\r\n")
        conn.sendall(b"ok and then some trailing bytes")

    server = serve(handler)
    request = b"GET / HTTP/1.1\r\nHost: localhost\r\nConnection: close\r\n\r\n"

    response = SocketTransport(timeout=5).round_trip("127.0.0.1", server.port, "http", request)

    assert response == (
        b"HTTP/1.1 200 OK\r\nContent-Length: 2\r\n\r\nok and then some trailing bytes"
    )
    assert captured["request"] == request


def test_connection_refused_is_connect_error() -> None:
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()

    with pytest.raises(ConnectError):
        SocketTransport(timeout=5).round_trip("127.0.0.1", port, "http", b"GET / HTTP/1.1\r\n\r\n")


def test_unresolvable_host_is_connect_error() -> None:
    with pytest.raises(ConnectError):
        SocketTransport(timeout=5).round_trip("host.invalid", 80, "http", b"")


def test_plaintext_peer_fails_tls_handshake(serve) -> None:
    def handler(conn: socket.socket) -> None:
        conn.recv(1024)
        conn.sendall(b"HTTP/1.1 400 Bad Request\r\n\r\nnot tls")

    server = serve(handler)

    with pytest.raises(TLSError):
        SocketTransport(timeout=5).round_trip("127.0.0.1", server.port, "https", b"")


def test_timeout_during_read_is_transfer_error(serve) -> None:
    release = threading.Event()

    def handler(conn: socket.socket) -> None:
        _read_request(conn)
        release.wait(timeout=5)

    server = serve(handler)
    try:
        with pytest.raises(TransferError):
            SocketTransport(timeout=0.2).round_trip(
                "127.0.0.1", server.port, "http", b"GET / HTTP/1.1\r\n\r\n"
            )
    finally:
        release.set()


def test_default_timeout_is_unbounded() -> None:
    assert SocketTransport().timeout is None
