"""Configuration loading for junitwatch."""

from __future__ import annotations

from junitwatch.config.loader import ConfigError, get_default_config, load_config
from junitwatch.config.models import (
    JunitWatchConfig,
    OutputConfig,
    ReaderConfig,
    RunConfig,
)

__all__ = [
    "ConfigError",
    "JunitWatchConfig",
    "OutputConfig",
    "ReaderConfig",
    "RunConfig",
    "get_default_config",
    "load_config",
]
