"""Reporters rendering the outcome of a run."""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from junitwatch.reporters.base import FailureEntry, ReporterPlugin, RunReport, RunStatus
from junitwatch.reporters.json_reporter import JSONReporter
from junitwatch.reporters.summary_reporter import SummaryReporter

REPORTERS: Dict[str, Type[ReporterPlugin]] = {
    "json": JSONReporter,
    "summary": SummaryReporter,
}


def get_reporter(name: str) -> Optional[ReporterPlugin]:
    """Get an instantiated reporter by name, or None if unknown."""
    reporter_class = REPORTERS.get(name)
    if reporter_class is None:
        return None
    return reporter_class()


def list_available_reporters() -> List[str]:
    """List names of all available reporters."""
    return sorted(REPORTERS)


__all__ = [
    "FailureEntry",
    "JSONReporter",
    "ReporterPlugin",
    "RunReport",
    "RunStatus",
    "SummaryReporter",
    "get_reporter",
    "list_available_reporters",
]
