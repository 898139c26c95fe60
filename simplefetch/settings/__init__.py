"""Settings package exports."""

from .loader import (
    AppConfig,
    DispatchSettings,
    HttpSettings,
    LogSettings,
    MetricsSettings,
    PathSettings,
    load_config,
)

__all__ = [
    "AppConfig",
    "DispatchSettings",
    "HttpSettings",
    "LogSettings",
    "MetricsSettings",
    "PathSettings",
    "load_config",
]
