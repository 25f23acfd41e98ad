"""Orchestration of one streamed test run.

TestLifecycle owns the background reader of a run and turns its events
into Progress, Failures and first-access bookkeeping. Pollers (a UI or
the CLI) call the accessors repeatedly; each accessor first applies the
events that arrived since the previous call, on the poller's thread.
end() is the only synchronization point: once it returns, the state is
final.
"""

from __future__ import annotations

import queue
import threading
from enum import Enum
from typing import List, Optional, Set

from junitwatch.core.failures import Failures
from junitwatch.core.launch import Launch
from junitwatch.core.listeners import NullResultListener, ResultListener
from junitwatch.core.logging import get_logger
from junitwatch.core.models import TestCaseResult, TestingTargets, TestSuiteResult
from junitwatch.core.progress import Progress
from junitwatch.reader.events import (
    CaseEnded,
    CaseStarted,
    ErrorStarted,
    FailureStarted,
    ReaderEvent,
    StreamClosed,
    StreamFailed,
    StreamFailureKind,
    SuiteEnded,
    SuiteStarted,
)
from junitwatch.reader.junit_xml import JUnitXMLReader, ReaderSettings

LOGGER = get_logger(__name__)


class LifecycleState(str, Enum):
    """State of a TestLifecycle."""

    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


class LifecycleError(Exception):
    """A lifecycle method was called in the wrong state."""

    pass


class TestLifecycle:
    """One test run, from launch to final results.

    A lifecycle runs at most once; create a new instance per run and pass
    it (or its Launch) explicitly to whoever needs it.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        settings: Optional[ReaderSettings] = None,
        trust_exit_status: bool = True,
    ) -> None:
        """Initialize TestLifecycle.

        Args:
            settings: Reader polling settings.
            trust_exit_status: Whether a non-zero runner exit code marks the
                run as aborted. When the process layer cannot report exit
                codes reliably, an unreadable report is the only signal.
        """
        self._settings = settings or ReaderSettings()
        self._trust_exit_status = trust_exit_status
        self._state = LifecycleState.IDLE
        self._progress = Progress()
        self._failures = Failures()
        self._has_errors = False
        self._stream_closed = False
        self._launch: Optional[Launch] = None
        self._listener: ResultListener = NullResultListener()
        self._reader: Optional[JUnitXMLReader] = None
        self._events: "queue.Queue[ReaderEvent]" = queue.Queue()
        self._apply_lock = threading.RLock()
        self._processed_files: List[str] = []
        self._processed_file_set: Set[str] = set()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def launch(self) -> Optional[Launch]:
        return self._launch

    def start(self, launch: Launch, listener: Optional[ResultListener] = None) -> None:
        """Start reading the report of ``launch`` in the background.

        Args:
            launch: The launch whose report file should be read.
            listener: Receives every applied event on the polling thread.

        Raises:
            LifecycleError: If this lifecycle was already started.
        """
        if self._state is not LifecycleState.IDLE:
            raise LifecycleError(f"Test run already {self._state.value}")

        self._launch = launch
        if listener is not None:
            self._listener = listener
        self._reader = JUnitXMLReader(launch.junit_xml_file, self._events, self._settings)

        LOGGER.info(f"Reading test results from {launch.junit_xml_file}")
        self._progress.start()
        self._reader.start()
        self._state = LifecycleState.RUNNING

    def end(self) -> None:
        """Finish the run once the runner process has terminated.

        Stops the reader, waits for it and applies every remaining event.
        Calling end() again is a no-op.

        Raises:
            LifecycleError: If the run was never started.
        """
        if self._state is LifecycleState.ENDED:
            LOGGER.debug("Test run already ended")
            return
        if self._state is LifecycleState.IDLE:
            raise LifecycleError("Test run has not been started")

        assert self._reader is not None
        self._check_exit_status()
        self._reader.stop()
        try:
            self._reader.join()
        except KeyboardInterrupt:
            LOGGER.warning("Interrupted while waiting for the result reader to finish")

        try:
            self.process_events()
        finally:
            self._progress.end()
            self._state = LifecycleState.ENDED
        self._listener.end_run(self._has_errors)
        LOGGER.info(
            f"Test run ended: {self._progress.completed} completed, "
            f"{self._progress.failure_count} failed, errors={self._has_errors}"
        )

    def process_events(self) -> int:
        """Apply every event the reader has produced so far.

        Returns:
            Number of events applied.
        """
        applied = 0
        with self._apply_lock:
            while True:
                try:
                    event = self._events.get_nowait()
                except queue.Empty:
                    return applied
                self._apply(event)
                applied += 1

    def _apply(self, event: ReaderEvent) -> None:
        if isinstance(event, SuiteStarted):
            self._start_test_suite(event)
        elif isinstance(event, SuiteEnded):
            self._failures.close_result(event.suite)
            self._listener.end_test_suite(event.suite)
        elif isinstance(event, CaseStarted):
            self._failures.add_result(event.case)
            self._progress.start_test_case(event.timestamp)
            self._listener.start_test_case(event.case)
        elif isinstance(event, CaseEnded):
            self._end_test_case(event)
        elif isinstance(event, (FailureStarted, ErrorStarted)):
            self._failures.mark_current_result_as_failure()
            self._listener.start_failure(event.result, event.failure)
        elif isinstance(event, StreamFailed):
            self._stream_failed(event)
        elif isinstance(event, StreamClosed):
            self._stream_closed = True

    def _start_test_suite(self, event: SuiteStarted) -> None:
        suite = event.suite
        self._failures.add_result(suite)
        self._plan_suite(suite)
        self._listener.start_test_suite(suite)

    def _plan_suite(self, suite: TestSuiteResult) -> None:
        # The plan comes from the root; an unannotated root (e.g. <testsuites>)
        # announces its plan one top-level suite at a time.
        parent = suite.parent
        if parent is None:
            if suite.planned is not None:
                self._progress.initialize(suite.planned)
        elif parent.parent is None and parent.planned is None and suite.planned is not None:
            self._progress.extend_plan(suite.planned)

    def _end_test_case(self, event: CaseEnded) -> None:
        case = event.case
        case.time = self._progress.end_test_case(event.timestamp)
        self._progress.mark_as_completed()
        if case.is_failure:
            self._progress.mark_as_failed()
        self._failures.close_result(case)
        if self._is_first_access(case):
            self._mark_file_as_accessed(case)
        self._listener.end_test_case(case)

    def _stream_failed(self, event: StreamFailed) -> None:
        if event.kind is StreamFailureKind.CONFIGURATION:
            LOGGER.warning(f"Result reader is misconfigured: {event.message}")
        elif event.kind is StreamFailureKind.IO:
            LOGGER.warning(f"Could not read test results: {event.message}")
        else:
            # An unreadable report is how a crashed runner shows up.
            self._has_errors = True
            LOGGER.info(f"Test results are incomplete: {event.message}")

    def _check_exit_status(self) -> None:
        if not self._trust_exit_status or self._launch is None:
            return
        for process in self._launch.processes:
            try:
                exit_code = process.poll()
            except OSError as e:
                LOGGER.warning(f"Could not read runner exit status: {e}")
                exit_code = 0
            else:
                if exit_code is None:
                    continue
            if exit_code != 0:
                LOGGER.info(f"Test runner exited with code {exit_code}")
                self._has_errors = True
            break

    def get_progress(self) -> Progress:
        self.process_events()
        return self._progress

    def has_errors(self) -> bool:
        """Whether the run ended abnormally (as opposed to with failures)."""
        self.process_events()
        return self._has_errors

    def get_result(self) -> Optional[TestSuiteResult]:
        """Root suite of the report, or None until one has been parsed."""
        self.process_events()
        if self._reader is None:
            return None
        return self._reader.result

    def get_failures(self) -> Failures:
        self.process_events()
        return self._failures

    def has_failures(self) -> bool:
        self.process_events()
        return self._progress.has_failures()

    def is_progress_initialized(self) -> bool:
        self.process_events()
        return self._progress.is_initialized()

    def is_stream_closed(self) -> bool:
        """Whether the reader has finished (complete document or stop)."""
        self.process_events()
        return self._stream_closed

    def get_testing_targets(self) -> TestingTargets:
        if self._launch is None:
            return TestingTargets()
        return self._launch.testing_targets

    def validate_launch_identity(self, launch: object) -> bool:
        """Check that ``launch`` is the very launch this run was started with."""
        return self._launch is not None and self._launch is launch

    def is_file_first_accessed(self, case: TestCaseResult) -> bool:
        """Whether no finished case of this run has used ``case.file`` yet.

        Paths are compared as exact strings.
        """
        self.process_events()
        return self._is_first_access(case)

    @property
    def accessed_files(self) -> List[str]:
        """Source files of finished cases, in first-access order."""
        self.process_events()
        return list(self._processed_files)

    def _is_first_access(self, case: TestCaseResult) -> bool:
        return case.file is not None and case.file not in self._processed_file_set

    def _mark_file_as_accessed(self, case: TestCaseResult) -> None:
        assert case.file is not None
        self._processed_file_set.add(case.file)
        self._processed_files.append(case.file)
