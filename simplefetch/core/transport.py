"""Blocking socket transport, plaintext or TLS."""

from __future__ import annotations

import socket
import ssl
from typing import Protocol

from ..utils.logging import get_logger
from .errors import ConnectError, TLSError, TransferError

LOGGER = get_logger(__name__)
RECV_SIZE = 4096


class Transport(Protocol):
    def round_trip(self, host: str, port: int, scheme: str, payload: bytes) -> bytes: ...


class SocketTransport:
    """Write one request, then read until the peer closes the connection.

    ``timeout`` is ``None`` by default, so an unresponsive peer blocks the
    calling thread indefinitely.
    """

    def __init__(self, *, timeout: float | None = None, verify_tls: bool = True) -> None:
        self._timeout = timeout
        self._verify_tls = verify_tls

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def round_trip(self, host: str, port: int, scheme: str, payload: bytes) -> bytes:
        target = f"{scheme}://{host}:{port}"
        sock = self._connect(host, port, target)
        try:
            if scheme == "https":
                sock = self._wrap_tls(sock, host, target)
            try:
                sock.sendall(payload)
                return self._read_all(sock)
            except OSError as exc:
                raise TransferError(target, exc) from exc
        finally:
            sock.close()

    def _connect(self, host: str, port: int, target: str) -> socket.socket:
        try:
            return socket.create_connection((host, port), timeout=self._timeout)
        except (OSError, UnicodeError) as exc:
            raise ConnectError(target, exc) from exc

    def _wrap_tls(self, sock: socket.socket, host: str, target: str) -> ssl.SSLSocket:
        context = ssl.create_default_context()
        if not self._verify_tls:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        try:
            return context.wrap_socket(sock, server_hostname=host)
        except OSError as exc:
            # ssl.SSLError is an OSError, as are resets and timeouts mid-handshake.
            raise TLSError(target, exc) from exc

    def _read_all(self, sock: socket.socket) -> bytes:
        chunks: list[bytes] = []
        while True:
            try:
                chunk = sock.recv(RECV_SIZE)
            except (ssl.SSLZeroReturnError, ssl.SSLEOFError):
                # Peer ended the TLS session, with or without close_notify.
                break
            if not chunk:
                break
            chunks.append(chunk)
        data = b"".join(chunks)
        LOGGER.debug("Received %d bytes", len(data), extra={"event": "transport.read"})
        return data


__all__ = ["RECV_SIZE", "SocketTransport", "Transport"]
