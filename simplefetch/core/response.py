"""Narrow parser for buffered HTTP/1.x responses."""

from __future__ import annotations

import re
from dataclasses import dataclass

HEADER_TERMINATOR = b"\r\n\r\n"

_STATUS_PATTERN = re.compile(r"^HTTP/1\.\d (\d{3})")
_LOCATION_PATTERN = re.compile(r"^location:[ \t]*(.*?)\s*$", re.IGNORECASE | re.MULTILINE)


@dataclass(frozen=True, slots=True)
class RawResponse:
    raw: bytes
    header_block: str
    body: bytes
    status_code: int | None = None
    location: str | None = None

    @property
    def header_bytes(self) -> bytes:
        return self.header_block.encode("iso-8859-1")

    @property
    def is_redirect(self) -> bool:
        return self.status_code is not None and 300 <= self.status_code <= 399


def split_response(raw: bytes) -> tuple[bytes, bytes]:
    index = raw.find(HEADER_TERMINATOR)
    if index == -1:
        return raw, b""
    return raw[:index], raw[index + len(HEADER_TERMINATOR) :]


def parse_response(raw: bytes) -> RawResponse:
    head, body = split_response(raw)
    header_block = head.decode("iso-8859-1")
    first_line = header_block.split("\r\n", 1)[0]

    status_match = _STATUS_PATTERN.match(first_line)
    status_code = int(status_match.group(1)) if status_match else None

    location_match = _LOCATION_PATTERN.search(header_block)
    location = location_match.group(1) if location_match else None

    return RawResponse(
        raw=raw,
        header_block=header_block,
        body=body,
        status_code=status_code,
        location=location or None,
    )


__all__ = ["HEADER_TERMINATOR", "RawResponse", "parse_response", "split_response"]
