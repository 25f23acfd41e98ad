"""Plain text summary reporter."""

from __future__ import annotations

from typing import IO, List

from junitwatch.reporters.base import FailureEntry, ReporterPlugin, RunReport, RunStatus

_STATUS_LINES = {
    RunStatus.PASSED: "OK",
    RunStatus.FAILED: "FAILURES",
    RunStatus.ABORTED: "ABORTED (the test runner did not finish normally)",
}


class SummaryReporter(ReporterPlugin):
    """Human readable run summary with failure details."""

    @property
    def name(self) -> str:
        return "summary"

    def report(self, report: RunReport, output: IO[str]) -> None:
        lines = self._format_summary(report)
        output.write("\n".join(lines))
        output.write("\n")

    def _format_summary(self, report: RunReport) -> List[str]:
        lines = [f"Result: {_STATUS_LINES[report.status]}"]

        if report.total is not None:
            lines.append(f"Tests: {report.completed}/{report.total} completed")
        else:
            lines.append(f"Tests: {report.completed} completed")
        lines.append(
            f"Passed: {report.passed}  Failed: {report.failed}  Errors: {report.errored}"
        )
        lines.append(f"Time: {report.elapsed_time:.2f}s")

        if report.failures:
            lines.append("")
            lines.append("Failures:")
            for index, entry in enumerate(report.failures, start=1):
                lines.extend(self._format_failure(index, entry))

        if report.missing_targets:
            lines.append("")
            lines.append("Targets without results:")
            lines.extend(f"  {target}" for target in report.missing_targets)

        return lines

    def _format_failure(self, index: int, entry: FailureEntry) -> List[str]:
        header = f"  {index}) {entry.name} [{entry.status}]"
        lines = [header]
        if entry.file:
            location = entry.file if entry.line is None else f"{entry.file}:{entry.line}"
            lines.append(f"     at {location}")
        if entry.message:
            lines.append(f"     {entry.message}")
        if entry.content and entry.content != entry.message:
            lines.extend(f"     | {line}" for line in entry.content.splitlines())
        return lines
