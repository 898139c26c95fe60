"""Destinations for response bytes."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO, Protocol

from ..utils.file_helper import write_bytes


class OutputSink(Protocol):
    def write(self, data: bytes) -> None: ...


class StreamSink:
    """Writes to a binary stream, standard output by default.

    Concurrent runs share the stream, so their output may interleave.
    """

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self._stream = stream

    def write(self, data: bytes) -> None:
        stream = self._stream if self._stream is not None else sys.stdout.buffer
        stream.write(data)
        stream.flush()


class FileSink:
    """Replaces the contents of ``path`` on every write."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, data: bytes) -> None:
        write_bytes(self._path, data)


def sink_for(output_path: Path | None) -> OutputSink:
    if output_path is None:
        return StreamSink()
    return FileSink(output_path)


__all__ = ["FileSink", "OutputSink", "StreamSink", "sink_for"]
