"""Tests for junitwatch.reporters.summary_reporter."""

from __future__ import annotations

import io

from junitwatch.reporters import SummaryReporter, get_reporter
from junitwatch.reporters.base import FailureEntry, RunReport, RunStatus


def _render(report: RunReport) -> str:
    output = io.StringIO()
    SummaryReporter().report(report, output)
    return output.getvalue()


class TestSummaryReporter:
    """Tests for SummaryReporter."""

    def test_name(self) -> None:
        assert SummaryReporter().name == "summary"
        assert isinstance(get_reporter("summary"), SummaryReporter)

    def test_passed_run(self) -> None:
        text = _render(RunReport(status=RunStatus.PASSED, total=2, completed=2, passed=2, elapsed_time=1.234))
        assert text == (
            "Result: OK\n"
            "Tests: 2/2 completed\n"
            "Passed: 2  Failed: 0  Errors: 0\n"
            "Time: 1.23s\n"
        )

    def test_unknown_total(self) -> None:
        text = _render(RunReport(status=RunStatus.ABORTED))
        assert text.splitlines()[0] == "Result: ABORTED (the test runner did not finish normally)"
        assert "Tests: 0 completed" in text

    def test_failures_and_missing_targets(self) -> None:
        report = RunReport(
            status=RunStatus.FAILED,
            total=2,
            completed=2,
            passed=1,
            failed=1,
            failures=[
                FailureEntry(
                    name="CalcTest::testDivide",
                    kind="case",
                    status="failed",
                    file="/t/CalcTest.php",
                    line=33,
                    message="expected 2 but was 3",
                    content="expected 2 but was 3\nat CalcTest.php:33",
                ),
                FailureEntry(name="Fixture", kind="suite", status="failed", message="setUp failed", content="setUp failed"),
            ],
            missing_targets=["ParserTest"],
        )

        lines = _render(report).splitlines()

        assert lines[0] == "Result: FAILURES"
        start = lines.index("Failures:")
        assert lines[start + 1:start + 8] == [
            "  1) CalcTest::testDivide [failed]",
            "     at /t/CalcTest.php:33",
            "     expected 2 but was 3",
            "     | expected 2 but was 3",
            "     | at CalcTest.php:33",
            "  2) Fixture [failed]",
            "     setUp failed",
        ]
        assert lines[-2:] == ["Targets without results:", "  ParserTest"]
