"""HTTP/1.1 request construction."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .url import ParsedURL

DEFAULT_USER_AGENT = "SimpleFetch/1.0"
JSON_CONTENT_TYPE = "application/json"

_FORM_TOKEN = r"[a-zA-Z0-9_%+-]+"
_FORM_PATTERN = re.compile(rf"^{_FORM_TOKEN}={_FORM_TOKEN}(&{_FORM_TOKEN}={_FORM_TOKEN})*$")


@dataclass(slots=True)
class HttpRequestSpec:
    method: str
    url: ParsedURL
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def to_bytes(self) -> bytes:
        lines = [f"{self.method} {self.url.path} HTTP/1.1"]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        head = ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")
        return head + (self.body or b"")


def form_to_json(data: str) -> str:
    """Render ``k=v&k2=v2`` as a flat JSON object, keys and values verbatim."""

    pairs = []
    for item in data.split("&"):
        key, value = item.split("=", 1)
        pairs.append(f'"{key}":"{value}"')
    return "{" + ",".join(pairs) + "}"


def prepare_post_body(data: str | None) -> tuple[bytes, str]:
    """Turn the ``-d`` argument into a request body and its content type."""

    if data is None:
        return b"", JSON_CONTENT_TYPE
    if _FORM_PATTERN.match(data):
        return form_to_json(data).encode("utf-8"), JSON_CONTENT_TYPE
    candidate = Path(data)
    try:
        if candidate.is_file():
            return candidate.read_bytes(), JSON_CONTENT_TYPE
    except (OSError, ValueError):
        # Not usable as a path (too long, embedded NUL); treat as literal JSON.
        pass
    return data.encode("utf-8"), JSON_CONTENT_TYPE


def request_spec(
    method: str,
    url: ParsedURL,
    extra_headers: Mapping[str, str] | None = None,
    body: bytes | None = None,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    content_type: str | None = None,
) -> HttpRequestSpec:
    method = method.upper()
    headers: dict[str, str] = {
        "Host": url.host,
        "User-Agent": user_agent,
        "Connection": "close",
    }
    if method == "POST":
        payload = body or b""
        headers["Content-Type"] = content_type or JSON_CONTENT_TYPE
        headers["Content-Length"] = str(len(payload))
    for name, value in (extra_headers or {}).items():
        if name.lower() in {key.lower() for key in headers}:
            continue
        headers[str(name)] = str(value)
    return HttpRequestSpec(method=method, url=url, headers=headers, body=body)


def build_request(
    method: str,
    url: ParsedURL,
    extra_headers: Mapping[str, str] | None = None,
    body: bytes | None = None,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    content_type: str | None = None,
) -> bytes:
    spec = request_spec(
        method,
        url,
        extra_headers,
        body,
        user_agent=user_agent,
        content_type=content_type,
    )
    return spec.to_bytes()


__all__ = [
    "DEFAULT_USER_AGENT",
    "HttpRequestSpec",
    "build_request",
    "form_to_json",
    "prepare_post_body",
    "request_spec",
]
