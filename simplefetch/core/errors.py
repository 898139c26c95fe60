"""Errors raised by the request engine."""

from __future__ import annotations


class FetchError(Exception):
    """Base class for failures local to one logical request."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class InvalidURL(FetchError, ValueError):
    """Raised when a URL is not ``http(s)://host[/path]``."""

    def __init__(self, url: str) -> None:
        super().__init__(
            url, f"Invalid URL format: {url!r}. Supported protocols: http, https."
        )


class ConnectError(FetchError):
    """Raised when DNS resolution or the TCP connect fails."""

    def __init__(self, url: str, original: Exception) -> None:
        self.original = original
        super().__init__(url, f"Connection to {url} failed: {original}")


class TLSError(FetchError):
    """Raised when the TLS handshake fails."""

    def __init__(self, url: str, original: Exception) -> None:
        self.original = original
        super().__init__(url, f"TLS handshake with {url} failed: {original}")


class TransferError(FetchError):
    """Raised when reading or writing fails on an established connection."""

    def __init__(self, url: str, original: Exception) -> None:
        self.original = original
        super().__init__(url, f"I/O error while talking to {url}: {original}")


__all__ = ["FetchError", "InvalidURL", "ConnectError", "TLSError", "TransferError"]
