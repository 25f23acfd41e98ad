"""Configuration data models for junitwatch.

Defines typed configuration classes that represent .junitwatch.yml structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from junitwatch.reader.junit_xml import ReaderSettings

# Valid values for output.format
VALID_OUTPUT_FORMATS = {"summary", "json"}


@dataclass
class ReaderConfig:
    """How the report file is tailed."""

    poll_interval: float = 0.05  # Seconds between read retries
    chunk_size: int = 8192  # Bytes per read
    max_io_retries: int = 3  # Read retries allowed after the run was stopped

    def to_settings(self) -> ReaderSettings:
        return ReaderSettings(
            poll_interval=self.poll_interval,
            chunk_size=self.chunk_size,
            max_io_retries=self.max_io_retries,
        )


@dataclass
class RunConfig:
    """Run-level behavior.

    `trust_exit_status` can be turned off for process layers that always
    report exit code 0; an unreadable report then remains the only signal
    of a crashed runner.
    """

    trust_exit_status: bool = True
    timeout: Optional[float] = None  # Seconds; None waits for the report to close


@dataclass
class OutputConfig:
    """Output formatting configuration."""

    format: str = "summary"


@dataclass
class JunitWatchConfig:
    """Complete junitwatch configuration.

    Example .junitwatch.yml:
        reader:
          poll_interval: 0.1
        run:
          timeout: 600
        output:
          format: json
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    run: RunConfig = field(default_factory=RunConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Metadata (not from YAML, set by loader)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        return list(self._config_sources)
