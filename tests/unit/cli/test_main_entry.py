"""Tests for the junitwatch.cli entry point."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from unittest.mock import patch

from junitwatch import __version__
from junitwatch.cli import EXIT_INVALID_USAGE, EXIT_SUCCESS, main


class TestMainEntry:
    """Tests for main() and global options."""

    @patch("junitwatch.cli.CLIRunner")
    def test_main_creates_runner(self, mock_runner_cls) -> None:
        """Verify main() creates CLIRunner and calls run."""
        mock_runner = mock_runner_cls.return_value
        mock_runner.run.return_value = 0

        assert main() == 0
        mock_runner.run.assert_called_once_with(None)

    @patch("junitwatch.cli.CLIRunner")
    def test_main_passes_argv(self, mock_runner_cls) -> None:
        mock_runner = mock_runner_cls.return_value
        mock_runner.run.return_value = 2

        assert main(["watch", "junit.xml"]) == 2
        mock_runner.run.assert_called_once_with(["watch", "junit.xml"])

    def test_no_command_prints_help(self, capsys) -> None:
        assert main([]) == EXIT_SUCCESS
        assert "usage: junitwatch" in capsys.readouterr().out

    def test_help(self, capsys) -> None:
        assert main(["--help"]) == EXIT_SUCCESS
        assert "watch" in capsys.readouterr().out

    def test_version(self, capsys) -> None:
        with patch("junitwatch.cli.runner.version", side_effect=PackageNotFoundError):
            assert main(["--version"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == __version__

    def test_unknown_option_is_invalid_usage(self, capsys) -> None:
        assert main(["--bogus"]) == EXIT_INVALID_USAGE

    def test_watch_requires_report(self, capsys) -> None:
        assert main(["watch"]) == EXIT_INVALID_USAGE

    def test_negative_timeout_is_invalid_usage(self, capsys) -> None:
        assert main(["watch", "junit.xml", "--timeout", "-1"]) == EXIT_INVALID_USAGE
        assert "must be positive" in capsys.readouterr().err
