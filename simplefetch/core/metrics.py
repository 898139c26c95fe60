"""System resource samples and request timings for the metrics log."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..utils.logging import METRICS_LOGGER, get_logger

MEMINFO_PATH = Path("/proc/meminfo")
DEFAULT_LOW_MEMORY_MB = 50


@dataclass(frozen=True, slots=True)
class SystemSample:
    free_memory_mb: int | None
    cpu_load: float | None

    def describe(self) -> str:
        memory = f"{self.free_memory_mb}MB" if self.free_memory_mb is not None else "n/a"
        load = f"{self.cpu_load:.2f}" if self.cpu_load is not None else "n/a"
        return f"Free Memory: {memory}, CPU Load: {load}"


def read_free_memory_mb(meminfo: Path = MEMINFO_PATH) -> int | None:
    try:
        with meminfo.open("r", encoding="ascii") as fp:
            for line in fp:
                if line.startswith("MemFree:"):
                    # Reported in kB.
                    return int(line.split()[1]) // 1024
    except (OSError, ValueError, IndexError):
        return None
    return None


def read_cpu_load() -> float | None:
    try:
        return os.getloadavg()[0]
    except (AttributeError, OSError):
        return None


def take_sample(meminfo: Path = MEMINFO_PATH) -> SystemSample:
    return SystemSample(free_memory_mb=read_free_memory_mb(meminfo), cpu_load=read_cpu_load())


class MetricsRecorder:
    """Append-only metrics lines, routed through the ``simplefetch.metrics`` logger."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        low_memory_mb: int = DEFAULT_LOW_MEMORY_MB,
        meminfo: Path = MEMINFO_PATH,
    ) -> None:
        self._logger = logger or get_logger(METRICS_LOGGER)
        self._low_memory_mb = low_memory_mb
        self._meminfo = meminfo

    def sample_system(self) -> SystemSample:
        sample = take_sample(self._meminfo)
        self._logger.info(sample.describe())
        if sample.free_memory_mb is not None and sample.free_memory_mb < self._low_memory_mb:
            self._logger.warning(
                "[WARNING] Low memory detected: %sMB available.", sample.free_memory_mb
            )
        return sample

    def record_timing(self, url: str, seconds: float) -> None:
        self._logger.info("Request to %s took %.6fs", url, seconds)


__all__ = [
    "DEFAULT_LOW_MEMORY_MB",
    "MetricsRecorder",
    "SystemSample",
    "read_cpu_load",
    "read_free_memory_mb",
    "take_sample",
]
