"""Response cache keyed by the literal request URL."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Protocol

from ..utils.file_helper import write_bytes
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


def cache_key(url: str) -> str:
    return hashlib.md5(url.encode("utf-8"), usedforsecurity=False).hexdigest()


class ResponseCache(Protocol):
    def get(self, url: str) -> bytes | None: ...

    def put(self, url: str, data: bytes) -> None: ...


class FileCache:
    """One file per URL hash under a fixed directory.

    Entries never expire. Writers are not coordinated: two runs storing the
    same URL race and the last one wins, and a reader can observe a file that
    is still being written.
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, url: str) -> Path:
        return self._root / cache_key(url)

    def get(self, url: str) -> bytes | None:
        path = self.path_for(url)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def put(self, url: str, data: bytes) -> None:
        path = self.path_for(url)
        try:
            write_bytes(path, data)
        except OSError as exc:
            LOGGER.warning(
                "Failed to write cache entry %s: %s",
                path,
                exc,
                extra={"event": "cache.write_failed", "url": url},
            )


__all__ = ["FileCache", "ResponseCache", "cache_key"]
