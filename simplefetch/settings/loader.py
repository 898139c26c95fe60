"""Helpers for loading configuration."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover - Python < 3.11
    import tomli as tomllib

DEFAULT_CONFIG_NAME = "simplefetch.toml"
CONFIG_ENV_VAR = "SIMPLEFETCH_CONFIG"


@dataclass(slots=True)
class HttpSettings:
    user_agent: str = "SimpleFetch/1.0"
    max_redirects: int = 5
    timeout: float | None = None
    verify_tls: bool = True


@dataclass(slots=True)
class PathSettings:
    cache_dir: Path
    request_log: Path
    metrics_log: Path


@dataclass(slots=True)
class LogSettings:
    max_log_size: int = 10240
    structured: bool = False
    debug: bool = False


@dataclass(slots=True)
class DispatchSettings:
    max_workers: int | None = None


@dataclass(slots=True)
class MetricsSettings:
    low_memory_mb: int = 50


@dataclass(slots=True)
class AppConfig:
    http: HttpSettings
    paths: PathSettings
    logging: LogSettings
    dispatch: DispatchSettings
    metrics: MetricsSettings
    source: Path | None = None


def _base_dir() -> Path:
    return Path.cwd()


def _to_path(value: str | None, *, fallback: Path) -> Path:
    if not value:
        return fallback
    candidate = Path(value).expanduser()
    return candidate if candidate.is_absolute() else _base_dir() / candidate


def _config_path(explicit: str | os.PathLike[str] | None = None) -> tuple[Path, bool]:
    """Return the config path and whether it was requested explicitly."""

    if explicit:
        candidate, required = Path(explicit), True
    else:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        if env_value:
            candidate, required = Path(env_value), True
        else:
            candidate, required = Path(DEFAULT_CONFIG_NAME), False
    path = candidate if candidate.is_absolute() else _base_dir() / candidate
    return path, required


def _load_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _ensure_directories(paths: Iterable[Path]) -> None:
    for directory in paths:
        directory.mkdir(parents=True, exist_ok=True)


def _positive_or_none(value: Any, cast: type) -> Any:
    if value is None:
        return None
    converted = cast(value)
    return converted if converted > 0 else None


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path, required = _config_path(config_path)
    data = _load_toml(path, required=required)

    http_section = data.get("http", {})
    paths_section = data.get("paths", {})
    logging_section = data.get("logging", {})
    dispatch_section = data.get("dispatch", {})
    metrics_section = data.get("metrics", {})

    base = _base_dir()
    cache_dir = _to_path(paths_section.get("cache_dir"), fallback=base / "cache")
    request_log = _to_path(paths_section.get("request_log"), fallback=base / "simplefetch.log")
    metrics_log = _to_path(paths_section.get("metrics_log"), fallback=base / "metrics.log")

    _ensure_directories((cache_dir, request_log.parent, metrics_log.parent))

    max_redirects = int(http_section.get("max_redirects", 5))
    if max_redirects < 0:
        raise ValueError(f"http.max_redirects must not be negative, got {max_redirects}")

    http_settings = HttpSettings(
        user_agent=str(http_section.get("user_agent", "SimpleFetch/1.0")),
        max_redirects=max_redirects,
        timeout=_positive_or_none(http_section.get("timeout"), float),
        verify_tls=bool(http_section.get("verify_tls", True)),
    )

    log_settings = LogSettings(
        max_log_size=int(logging_section.get("max_log_size", 10240)),
        structured=bool(logging_section.get("structured", False)),
        debug=bool(logging_section.get("debug", False)),
    )

    return AppConfig(
        http=http_settings,
        paths=PathSettings(
            cache_dir=cache_dir,
            request_log=request_log,
            metrics_log=metrics_log,
        ),
        logging=log_settings,
        dispatch=DispatchSettings(
            max_workers=_positive_or_none(dispatch_section.get("max_workers"), int),
        ),
        metrics=MetricsSettings(
            low_memory_mb=int(metrics_section.get("low_memory_mb", 50)),
        ),
        source=path if path.exists() else None,
    )


__all__ = [
    "AppConfig",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_NAME",
    "DispatchSettings",
    "HttpSettings",
    "LogSettings",
    "MetricsSettings",
    "PathSettings",
    "load_config",
]
