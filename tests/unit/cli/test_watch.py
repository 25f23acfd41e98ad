"""Tests for the watch command."""

from __future__ import annotations

import io
import json
from argparse import Namespace
from pathlib import Path

from junitwatch.cli import main
from junitwatch.cli.commands import WatchCommand
from junitwatch.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_RUN_ABORTED,
    EXIT_SUCCESS,
    EXIT_TEST_FAILURES,
)
from junitwatch.cli.runner import cli_args_to_config_overrides
from junitwatch.config import get_default_config
from tests.conftest import FAILING_XML, PASSING_XML


class TestWatchCommand:
    """Tests for `junitwatch watch`."""

    def test_passing_report(self, tmp_path: Path, capsys) -> None:
        report = tmp_path / "junit.xml"
        report.write_text(PASSING_XML)

        assert main(["watch", str(report)]) == EXIT_SUCCESS

        captured = capsys.readouterr()
        assert captured.out.startswith("Result: OK\n")
        assert "Tests: 2/2 completed" in captured.out
        assert "CalculatorTest::testAdd" in captured.err

    def test_failing_report_as_json(self, tmp_path: Path, capsys) -> None:
        report = tmp_path / "junit.xml"
        report.write_text(FAILING_XML)

        assert main(["watch", str(report), "--format", "json", "--no-progress"]) == EXIT_TEST_FAILURES

        captured = capsys.readouterr()
        data = json.loads(captured.out)
        assert data["status"] == "failed"
        assert data["failures"][0]["name"] == "CalculatorTest::testDivide"
        assert "PASS" not in captured.err

    def test_incomplete_report_times_out_as_aborted(self, tmp_path: Path, capsys) -> None:
        report = tmp_path / "junit.xml"
        report.write_text('<testsuite name="CalculatorTest" tests="2"><testcase name="testAdd"/>')

        code = main(["--quiet", "watch", str(report), "--timeout", "0.2", "--poll-interval", "0.01"])

        assert code == EXIT_RUN_ABORTED
        out = capsys.readouterr().out
        assert out.startswith("Result: ABORTED")
        assert "Tests: 1/2 completed" in out

    def test_missing_report_times_out_as_aborted(self, tmp_path: Path, capsys) -> None:
        code = main(["--quiet", "watch", str(tmp_path / "never.xml"), "--timeout", "0.1"])
        assert code == EXIT_RUN_ABORTED

    def test_missing_targets_are_listed(self, tmp_path: Path, capsys) -> None:
        report = tmp_path / "junit.xml"
        report.write_text(PASSING_XML)

        code = main(
            ["--quiet", "watch", str(report), "--target", "CalculatorTest", "--target", "ParserTest"]
        )

        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out.rstrip().endswith("Targets without results:\n  ParserTest")

    def test_directory_is_invalid_usage(self, tmp_path: Path, capsys) -> None:
        assert main(["--quiet", "watch", str(tmp_path)]) == EXIT_INVALID_USAGE

    def test_missing_config_file_is_invalid_usage(self, tmp_path: Path, capsys) -> None:
        report = tmp_path / "junit.xml"
        report.write_text(PASSING_XML)
        code = main(["watch", str(report), "--config", str(tmp_path / "missing.yml")])
        assert code == EXIT_INVALID_USAGE

    def test_project_config_selects_format(self, tmp_path: Path, capsys) -> None:
        (tmp_path / ".junitwatch.yml").write_text("output:\n  format: json\n")
        report = tmp_path / "junit.xml"
        report.write_text(PASSING_XML)

        assert main(["--quiet", "watch", str(report)]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["status"] == "passed"

    def test_unknown_format_in_config(self, tmp_path: Path) -> None:
        config = get_default_config()
        config.output.format = "xml"
        command = WatchCommand(output=io.StringIO(), progress_output=io.StringIO())
        args = Namespace(report=tmp_path / "junit.xml", target=[], quiet=True, no_progress=False)

        assert command.execute(args, config) == EXIT_INVALID_USAGE

    def test_explicit_output_streams(self, tmp_path: Path) -> None:
        report = tmp_path / "junit.xml"
        report.write_text(FAILING_XML)
        output = io.StringIO()
        progress = io.StringIO()
        command = WatchCommand(output=output, progress_output=progress)
        args = Namespace(report=report, target=[], quiet=False, no_progress=False)

        assert command.execute(args) == EXIT_TEST_FAILURES
        assert output.getvalue().startswith("Result: FAILURES")
        assert "expected 2 but was 3" in progress.getvalue()
        assert "Test run finished" in progress.getvalue()
        assert command.name == "watch"


class TestCliOverrides:
    """Tests for cli_args_to_config_overrides."""

    def test_only_given_flags(self) -> None:
        args = Namespace(poll_interval=None, timeout=5.0, format=None)
        assert cli_args_to_config_overrides(args) == {"run": {"timeout": 5.0}}

    def test_all_flags(self) -> None:
        args = Namespace(poll_interval=0.5, timeout=None, format="json")
        assert cli_args_to_config_overrides(args) == {
            "reader": {"poll_interval": 0.5},
            "output": {"format": "json"},
        }

    def test_no_flags(self) -> None:
        assert cli_args_to_config_overrides(Namespace()) == {}
