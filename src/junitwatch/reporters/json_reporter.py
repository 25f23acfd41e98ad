"""JSON reporter."""

from __future__ import annotations

import json
from typing import IO

from junitwatch.reporters.base import ReporterPlugin, RunReport


class JSONReporter(ReporterPlugin):
    """Renders the run report as a JSON document."""

    def __init__(self, indent: int = 2) -> None:
        self._indent = indent

    @property
    def name(self) -> str:
        return "json"

    def report(self, report: RunReport, output: IO[str]) -> None:
        json.dump(report.to_dict(), output, indent=self._indent)
        output.write("\n")
