"""Configuration validation for junitwatch.

Validates known configuration keys and value types, and warns on unknown
keys. Never raises; problems are returned and logged as warnings.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set, Tuple, Type, Union

from junitwatch.config.models import VALID_OUTPUT_FORMATS
from junitwatch.core.logging import get_logger

LOGGER = get_logger(__name__)

Number = (int, float)

# Expected types per section key
SECTION_SCHEMAS: Dict[str, Dict[str, Union[Type[Any], Tuple[Type[Any], ...]]]] = {
    "reader": {
        "poll_interval": Number,
        "chunk_size": int,
        "max_io_retries": int,
    },
    "run": {
        "trust_exit_status": bool,
        "timeout": Number + (type(None),),
    },
    "output": {
        "format": str,
    },
}

VALID_TOP_LEVEL_KEYS: Set[str] = set(SECTION_SCHEMAS)


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    for key, value in data.items():
        if key not in VALID_TOP_LEVEL_KEYS:
            warnings.append(_unknown_key(key, VALID_TOP_LEVEL_KEYS, source))
            continue
        if not isinstance(value, dict):
            warnings.append(
                ConfigValidationWarning(
                    message=f"'{key}' must be a mapping, got {type(value).__name__}",
                    source=source,
                    key=key,
                )
            )
            continue
        warnings.extend(_validate_section(key, value, source))

    for warning in warnings:
        text = f"{warning.source}: {warning.message}"
        if warning.suggestion:
            text += f" (did you mean '{warning.suggestion}'?)"
        LOGGER.warning(text)

    return warnings


def _validate_section(
    section: str,
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    schema = SECTION_SCHEMAS[section]
    warnings: List[ConfigValidationWarning] = []

    for key, value in data.items():
        qualified = f"{section}.{key}"
        if key not in schema:
            warnings.append(_unknown_key(qualified, {f"{section}.{k}" for k in schema}, source))
            continue
        expected = schema[key]
        # bool is an int subclass; only accept it where bool is expected
        if (isinstance(value, bool) and expected is not bool) or not isinstance(value, expected):
            warnings.append(
                ConfigValidationWarning(
                    message=f"'{qualified}' has invalid type {type(value).__name__}",
                    source=source,
                    key=qualified,
                )
            )
            continue
        problem = _check_value(qualified, value)
        if problem:
            warnings.append(ConfigValidationWarning(message=problem, source=source, key=qualified))

    return warnings


def _check_value(key: str, value: Any) -> Optional[str]:
    if key in ("reader.poll_interval", "reader.chunk_size") and value <= 0:
        return f"'{key}' must be positive, got {value}"
    if key == "reader.max_io_retries" and value < 0:
        return f"'{key}' must not be negative, got {value}"
    if key == "run.timeout" and value is not None and value <= 0:
        return f"'{key}' must be positive, got {value}"
    if key == "output.format" and value not in VALID_OUTPUT_FORMATS:
        return (
            f"'{key}' must be one of {', '.join(sorted(VALID_OUTPUT_FORMATS))}, "
            f"got '{value}'"
        )
    return None


def _unknown_key(key: str, valid: Set[str], source: str) -> ConfigValidationWarning:
    matches = get_close_matches(key, sorted(valid), n=1, cutoff=0.6)
    return ConfigValidationWarning(
        message=f"Unknown config key '{key}'",
        source=source,
        key=key,
        suggestion=matches[0] if matches else None,
    )
