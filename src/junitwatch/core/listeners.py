"""Result listener abstraction for live run display.

The lifecycle forwards every applied event to one listener, on the
thread that polls the lifecycle (never on the reader thread):
- Console: Print progress with Rich formatting
- Callback: Forward to arbitrary callables (UI integrations)
- Null: No-op
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.markup import escape

from junitwatch.core.models import (
    FailureDetail,
    Result,
    ResultStatus,
    TestCaseResult,
    TestSuiteResult,
)


class ResultListener(ABC):
    """Abstract base class for result listeners."""

    @abstractmethod
    def start_test_suite(self, suite: TestSuiteResult) -> None:
        """Called when a suite element opens."""

    @abstractmethod
    def end_test_suite(self, suite: TestSuiteResult) -> None:
        """Called when a suite element closes."""

    @abstractmethod
    def start_test_case(self, case: TestCaseResult) -> None:
        """Called when a case element opens."""

    @abstractmethod
    def end_test_case(self, case: TestCaseResult) -> None:
        """Called when a case element closes, after its time was stamped."""

    @abstractmethod
    def start_failure(self, result: Result, failure: FailureDetail) -> None:
        """Called when a failure or error element opens inside ``result``."""

    @abstractmethod
    def end_run(self, has_errors: bool) -> None:
        """Called once when the lifecycle ends.

        Args:
            has_errors: Whether the run ended abnormally.
        """


class NullResultListener(ResultListener):
    """No-op listener used when nobody watches the run."""

    def start_test_suite(self, suite: TestSuiteResult) -> None:
        pass

    def end_test_suite(self, suite: TestSuiteResult) -> None:
        pass

    def start_test_case(self, case: TestCaseResult) -> None:
        pass

    def end_test_case(self, case: TestCaseResult) -> None:
        pass

    def start_failure(self, result: Result, failure: FailureDetail) -> None:
        pass

    def end_run(self, has_errors: bool) -> None:
        pass


class CallbackResultListener(ResultListener):
    """Listener that invokes optional callbacks.

    Useful for UI integrations that want only a few notifications.
    """

    def __init__(
        self,
        on_case_end: Optional[Callable[[TestCaseResult], None]] = None,
        on_failure: Optional[Callable[[Result, FailureDetail], None]] = None,
        on_suite_start: Optional[Callable[[TestSuiteResult], None]] = None,
        on_end: Optional[Callable[[bool], None]] = None,
    ):
        """Initialize CallbackResultListener.

        Args:
            on_case_end: Callback when a case finishes.
            on_failure: Callback when a failure or error starts.
            on_suite_start: Callback when a suite starts.
            on_end: Callback when the run ends.
        """
        self._on_case_end = on_case_end
        self._on_failure = on_failure
        self._on_suite_start = on_suite_start
        self._on_end = on_end
        self._lock = threading.Lock()

    def start_test_suite(self, suite: TestSuiteResult) -> None:
        if self._on_suite_start:
            with self._lock:
                self._on_suite_start(suite)

    def end_test_suite(self, suite: TestSuiteResult) -> None:
        pass

    def start_test_case(self, case: TestCaseResult) -> None:
        pass

    def end_test_case(self, case: TestCaseResult) -> None:
        if self._on_case_end:
            with self._lock:
                self._on_case_end(case)

    def start_failure(self, result: Result, failure: FailureDetail) -> None:
        if self._on_failure:
            with self._lock:
                self._on_failure(result, failure)

    def end_run(self, has_errors: bool) -> None:
        if self._on_end:
            with self._lock:
                self._on_end(has_errors)


_STATUS_STYLES = {
    ResultStatus.PASSED: ("PASS", "green"),
    ResultStatus.FAILED: ("FAIL", "bold red"),
    ResultStatus.ERRORED: ("ERROR", "bold magenta"),
    ResultStatus.PENDING: ("....", "dim"),
}


class ConsoleResultListener(ResultListener):
    """Thread-safe console listener.

    Prints one line per finished case and a marker per suite.
    """

    def __init__(
        self,
        output: TextIO = sys.stderr,
        show_cases: bool = True,
        force_terminal: Optional[bool] = None,
    ):
        """Initialize ConsoleResultListener.

        Args:
            output: Output stream to write to (default: stderr).
            show_cases: Whether to print a line per finished case.
            force_terminal: Force or disable terminal styling (default: detect).
        """
        self._show_cases = show_cases
        self._lock = threading.Lock()
        self._console = Console(file=output, force_terminal=force_terminal, highlight=False)

    def start_test_suite(self, suite: TestSuiteResult) -> None:
        if not suite.name:
            return
        with self._lock:
            self._console.print(f"[bold cyan]{escape(suite.name)}[/bold cyan]")

    def end_test_suite(self, suite: TestSuiteResult) -> None:
        pass

    def start_test_case(self, case: TestCaseResult) -> None:
        pass

    def end_test_case(self, case: TestCaseResult) -> None:
        if not self._show_cases:
            return
        label, style = _STATUS_STYLES[case.status]
        with self._lock:
            self._console.print(
                f"  [{style}]{label:<5}[/{style}] {escape(case.qualified_name)} "
                f"[dim]({case.time:.3f}s)[/dim]",
                markup=True,
            )

    def start_failure(self, result: Result, failure: FailureDetail) -> None:
        if not failure.message:
            return
        with self._lock:
            self._console.print(f"        [dim]{escape(failure.message)}[/dim]", markup=True)

    def end_run(self, has_errors: bool) -> None:
        with self._lock:
            if has_errors:
                self._console.print("[bold red]Test run aborted[/bold red]")
            else:
                self._console.print("[bold cyan]Test run finished[/bold cyan]")
