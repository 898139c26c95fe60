"""Filesystem helpers."""

from __future__ import annotations

from pathlib import Path


def ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def read_lines(path: Path, *, encoding: str = "utf-8") -> list[str]:
    """Return the non-blank lines of ``path`` with surrounding whitespace removed."""

    with path.open("r", encoding=encoding) as fp:
        return [line.strip() for line in fp if line.strip()]


def write_bytes(path: Path, data: bytes) -> None:
    ensure_parent(path)
    with path.open("wb") as fp:
        fp.write(data)
