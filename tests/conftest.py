"""Shared fakes for request engine tests."""

from __future__ import annotations

import threading
from typing import Callable

import pytest

from simplefetch.core.errors import ConnectError


class MemoryCache:
    def __init__(self) -> None:
        self.entries: dict[str, bytes] = {}
        self.reads: list[str] = []

    def get(self, url: str) -> bytes | None:
        self.reads.append(url)
        return self.entries.get(url)

    def put(self, url: str, data: bytes) -> None:
        self.entries[url] = data


class CapturingSink:
    def __init__(self) -> None:
        self.writes: list[bytes] = []
        self._lock = threading.Lock()

    def write(self, data: bytes) -> None:
        with self._lock:
            self.writes.append(data)

    @property
    def data(self) -> bytes:
        return b"".join(self.writes)


class ScriptedTransport:
    """Answers round trips from a table keyed by ``(scheme, host, path)``."""

    def __init__(
        self,
        responses: dict[tuple[str, str, str], bytes] | None = None,
        *,
        on_call: Callable[[str, int, str, bytes], None] | None = None,
    ) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, int, str, bytes]] = []
        self._on_call = on_call
        self._lock = threading.Lock()

    def round_trip(self, host: str, port: int, scheme: str, payload: bytes) -> bytes:
        with self._lock:
            self.calls.append((host, port, scheme, payload))
        if self._on_call is not None:
            self._on_call(host, port, scheme, payload)
        path = payload.split(b" ", 2)[1].decode("utf-8")
        try:
            return self.responses[(scheme, host, path)]
        except KeyError:
            raise ConnectError(f"{scheme}://{host}:{port}", OSError("no route to host")) from None


def canned(status: int, *, headers: dict[str, str] | None = None, body: bytes = b"") -> bytes:
    reason = {200: "OK", 301: "Moved Permanently", 302: "Found", 404: "Not Found"}.get(status, "X")
    lines = [f"HTTP/1.1 {status} {reason}"]
    lines.extend(f"{name}: {value}" for name, value in (headers or {}).items())
    return ("\r\n".join(lines) + "\r\n\r\n").encode("iso-8859-1") + body


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def sink() -> CapturingSink:
    return CapturingSink()
