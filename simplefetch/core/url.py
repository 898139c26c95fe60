"""URL decomposition for the raw-socket client."""

from __future__ import annotations

import re
import urllib.parse
from dataclasses import dataclass

from .errors import InvalidURL

DEFAULT_PORTS = {"http": 80, "https": 443}

_URL_PATTERN = re.compile(r"^(http|https)://([^/]+)(/.*)?$", re.DOTALL)


@dataclass(frozen=True, slots=True)
class ParsedURL:
    scheme: str
    host: str
    port: int
    path: str = "/"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"


def parse_url(url: str) -> ParsedURL:
    """Split ``scheme://host[/path]`` into its parts.

    The port always follows the scheme; a ``host:port`` authority is kept
    verbatim as the host.
    """

    match = _URL_PATTERN.match(url)
    if match is None:
        raise InvalidURL(url)
    scheme, host, path = match.group(1), match.group(2), match.group(3)
    return ParsedURL(scheme=scheme, host=host, port=DEFAULT_PORTS[scheme], path=path or "/")


def resolve_location(base: str, location: str) -> str:
    """Return the absolute target of a ``Location`` header."""

    if location.startswith(("http://", "https://")):
        return location
    return urllib.parse.urljoin(base, location)


__all__ = ["DEFAULT_PORTS", "ParsedURL", "parse_url", "resolve_location"]
