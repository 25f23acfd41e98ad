"""Watch command implementation.

Follow a report file written by a test runner that something else
launched, then print the final report.
"""

from __future__ import annotations

import sys
import time
from argparse import Namespace
from typing import IO, Optional

from junitwatch.cli.commands import Command
from junitwatch.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_RUN_ABORTED,
    EXIT_SUCCESS,
    EXIT_TEST_FAILURES,
)
from junitwatch.config import JunitWatchConfig, get_default_config
from junitwatch.core.launch import Launch
from junitwatch.core.lifecycle import TestLifecycle
from junitwatch.core.listeners import ConsoleResultListener, NullResultListener, ResultListener
from junitwatch.core.logging import get_logger
from junitwatch.core.models import TestingTargets
from junitwatch.reporters import RunReport, RunStatus, get_reporter

LOGGER = get_logger(__name__)

_EXIT_CODES = {
    RunStatus.PASSED: EXIT_SUCCESS,
    RunStatus.FAILED: EXIT_TEST_FAILURES,
    RunStatus.ABORTED: EXIT_RUN_ABORTED,
}


class WatchCommand(Command):
    """Follows a streaming report until it is complete."""

    def __init__(self, output: Optional[IO[str]] = None, progress_output: Optional[IO[str]] = None):
        """Initialize WatchCommand.

        Args:
            output: Stream for the final report (default: stdout).
            progress_output: Stream for live progress lines (default: stderr).
        """
        self._output = output
        self._progress_output = progress_output

    @property
    def name(self) -> str:
        """Command identifier."""
        return "watch"

    def execute(self, args: Namespace, config: "JunitWatchConfig | None" = None) -> int:
        """Execute the watch command.

        Args:
            args: Parsed command-line arguments.
            config: junitwatch configuration.

        Returns:
            Exit code derived from the run status.
        """
        config = config or get_default_config()

        reporter = get_reporter(config.output.format)
        if reporter is None:
            LOGGER.error(f"Unknown output format '{config.output.format}'")
            return EXIT_INVALID_USAGE

        if args.report.is_dir():
            LOGGER.error(f"Report path is a directory: {args.report}")
            return EXIT_INVALID_USAGE

        launch = Launch(
            junit_xml_file=args.report,
            testing_targets=TestingTargets(getattr(args, "target", None) or []),
        )
        lifecycle = TestLifecycle(
            settings=config.reader.to_settings(),
            trust_exit_status=config.run.trust_exit_status,
        )
        lifecycle.start(launch, self._make_listener(args))

        try:
            self._wait(lifecycle, config.run.timeout, config.reader.poll_interval)
        except KeyboardInterrupt:
            LOGGER.warning("Interrupted; reporting the results read so far")
        finally:
            lifecycle.end()

        report = RunReport.from_lifecycle(lifecycle)
        reporter.report(report, self._output or sys.stdout)
        return _EXIT_CODES[report.status]

    def _make_listener(self, args: Namespace) -> ResultListener:
        if getattr(args, "quiet", False):
            return NullResultListener()
        return ConsoleResultListener(
            output=self._progress_output or sys.stderr,
            show_cases=not getattr(args, "no_progress", False),
        )

    def _wait(
        self,
        lifecycle: TestLifecycle,
        timeout: Optional[float],
        poll_interval: float,
    ) -> None:
        """Poll the lifecycle until the report closes or the timeout fires."""
        deadline = time.monotonic() + timeout if timeout else None
        while not lifecycle.is_stream_closed():
            if deadline is not None and time.monotonic() >= deadline:
                LOGGER.warning(f"Timed out after {timeout:g}s waiting for the report to complete")
                return
            time.sleep(poll_interval)
