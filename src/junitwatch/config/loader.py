"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.junitwatch.yml)
- Global config ($JUNITWATCH_HOME/config.yml, default ~/.junitwatch)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from junitwatch.config.models import (
    JunitWatchConfig,
    OutputConfig,
    ReaderConfig,
    RunConfig,
)
from junitwatch.config.validation import ConfigValidationWarning, validate_config
from junitwatch.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".junitwatch.yml", ".junitwatch.yaml", "junitwatch.yml", "junitwatch.yaml"]
GLOBAL_CONFIG_NAME = "config.yml"

# Default directory name under user home, and its override
DEFAULT_HOME_DIR_NAME = ".junitwatch"
JUNITWATCH_HOME_ENV = "JUNITWATCH_HOME"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def get_junitwatch_home() -> Path:
    """Get the junitwatch home directory.

    Resolution order:
    1. JUNITWATCH_HOME environment variable (if set)
    2. ~/.junitwatch (default)
    """
    env_home = os.environ.get(JUNITWATCH_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> JunitWatchConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.junitwatch.yml)
    3. Global config ($JUNITWATCH_HOME/config.yml)
    4. Built-in defaults

    Args:
        project_root: Directory searched for .junitwatch.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.

    Returns:
        Merged JunitWatchConfig instance.

    Raises:
        ConfigError: If specified config file doesn't exist or has parse errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path is not None:
        try:
            global_dict = _load_validated(global_path)
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (ConfigError, yaml.YAMLError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = merge_configs(merged, _load_or_raise(cli_config_path))
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom config from {cli_config_path}")
    else:
        project_path = find_project_config(project_root)
        if project_path is not None:
            merged = merge_configs(merged, _load_or_raise(project_path))
            sources.append(f"project:{project_path}")
            LOGGER.debug(f"Loaded project config from {project_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _load_or_raise(path: Path) -> Dict[str, Any]:
    try:
        return _load_validated(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}") from e


def _load_validated(path: Path) -> Dict[str, Any]:
    data = load_yaml_file(path)
    warnings = validate_config(data, source=str(path))
    return drop_invalid_keys(data, warnings)


def find_project_config(project_root: Path) -> Optional[Path]:
    """Return the first of PROJECT_CONFIG_NAMES present in ``project_root``."""
    candidates = (project_root / name for name in PROJECT_CONFIG_NAMES)
    return next((path for path in candidates if path.is_file()), None)


def find_global_config() -> Optional[Path]:
    """Return $JUNITWATCH_HOME/config.yml if it exists."""
    path = get_junitwatch_home() / GLOBAL_CONFIG_NAME
    return path if path.is_file() else None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Parse a config file and expand environment references in it.

    An empty file yields an empty dict.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        ConfigError: If the document is not a mapping.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a YAML mapping, got {type(data).__name__}")
    return expand_env_vars(data)


def expand_env_vars(data: Dict[str, Any]) -> Dict[str, Any]:
    """Expand ``${VAR}`` and ``${VAR:-default}`` in section values.

    Config files hold one level of sections with scalar values; only
    strings are expanded and the result is a new dict.
    """
    expanded: Dict[str, Any] = {}
    for section, values in data.items():
        if isinstance(values, dict):
            expanded[section] = {key: _expand_value(value) for key, value in values.items()}
        else:
            expanded[section] = _expand_value(values)
    return expanded


def _expand_value(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return ENV_VAR_PATTERN.sub(_lookup_env_var, value)


def _lookup_env_var(match: "re.Match[str]") -> str:
    name, default = match.group(1), match.group(2)
    if name in os.environ:
        return os.environ[name]
    if default is None:
        LOGGER.warning(f"${{{name}}} is not set; substituting an empty string")
        return ""
    return default


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay one config dict on another, section by section.

    Keys of a section present in both are taken from ``overlay``; other
    keys of that section are kept. Neither input is modified.
    """
    merged = {section: _copy_section(values) for section, values in base.items()}
    for section, values in overlay.items():
        current = merged.get(section)
        if isinstance(current, dict) and isinstance(values, dict):
            current.update(values)
        else:
            merged[section] = _copy_section(values)
    return merged


def _copy_section(values: Any) -> Any:
    return dict(values) if isinstance(values, dict) else values


def drop_invalid_keys(
    data: Dict[str, Any],
    warnings: Iterable[ConfigValidationWarning],
) -> Dict[str, Any]:
    """Remove the keys validation complained about so defaults apply.

    Args:
        data: Config dictionary.
        warnings: Warnings from validate_config().

    Returns:
        A copy of ``data`` without the offending keys.
    """
    result = {section: _copy_section(values) for section, values in data.items()}
    for warning in warnings:
        if not warning.key:
            continue
        section, _, key = warning.key.partition(".")
        if not key:
            result.pop(section, None)
        elif isinstance(result.get(section), dict):
            result[section].pop(key, None)
    return result


def dict_to_config(data: Dict[str, Any]) -> JunitWatchConfig:
    """Convert validated dict to typed JunitWatchConfig.

    Args:
        data: Configuration dictionary.

    Returns:
        Typed JunitWatchConfig instance.
    """
    reader_data = data.get("reader") or {}
    reader_defaults = ReaderConfig()
    reader = ReaderConfig(
        poll_interval=float(reader_data.get("poll_interval", reader_defaults.poll_interval)),
        chunk_size=int(reader_data.get("chunk_size", reader_defaults.chunk_size)),
        max_io_retries=int(reader_data.get("max_io_retries", reader_defaults.max_io_retries)),
    )

    run_data = data.get("run") or {}
    timeout = run_data.get("timeout")
    run = RunConfig(
        trust_exit_status=bool(run_data.get("trust_exit_status", True)),
        timeout=float(timeout) if timeout is not None else None,
    )

    output_data = data.get("output") or {}
    output = OutputConfig(
        format=output_data.get("format", "summary"),
    )

    return JunitWatchConfig(reader=reader, run=run, output=output)


def get_default_config() -> JunitWatchConfig:
    """Get default configuration."""
    return JunitWatchConfig()
