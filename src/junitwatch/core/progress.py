"""Progress counters and stopwatches for a test run."""

from __future__ import annotations

import time
from typing import Optional

from junitwatch.core.logging import get_logger

LOGGER = get_logger(__name__)


class Progress:
    """Tracks planned, completed and failed cases plus elapsed time.

    Counters only ever grow. Once the plan size is known it is raised
    whenever more cases complete than were announced, so completed never
    exceeds total; the failure count is always capped at completed.
    """

    def __init__(self) -> None:
        self._total: Optional[int] = None
        self._completed = 0
        self._failures = 0
        self._started_at: Optional[float] = None
        self._ended_at: Optional[float] = None
        self._case_started_at: Optional[float] = None
        self._last_case_time = 0.0

    def start(self) -> None:
        """Start the run stopwatch."""
        self._started_at = time.monotonic()
        self._ended_at = None

    def end(self) -> None:
        """Stop the run stopwatch. Ending a run that never started is a no-op."""
        if self._started_at is None or self._ended_at is not None:
            return
        self._ended_at = time.monotonic()

    def initialize(self, total: int) -> None:
        """Set the plan size. Only the first call has an effect.

        Args:
            total: Number of cases the stream announced.
        """
        if self._total is not None:
            LOGGER.debug(f"Progress already initialized with {self._total} cases")
            return
        self._total = max(0, total)
        if self._completed > self._total:
            LOGGER.warning(
                f"Announced plan of {self._total} cases is smaller than "
                f"{self._completed} cases already completed"
            )
            self._total = self._completed

    def extend_plan(self, count: int) -> None:
        """Add cases announced after the plan size was set.

        Reports without a plan on their root announce one per top-level
        suite. Before initialize() this behaves like initialize().

        Args:
            count: Number of additional planned cases.
        """
        if self._total is None:
            self.initialize(count)
            return
        self._total += max(0, count)

    def is_initialized(self) -> bool:
        return self._total is not None

    def start_test_case(self, at: Optional[float] = None) -> None:
        """Open the per-case stopwatch.

        Args:
            at: Monotonic timestamp of the case start (default: now).
        """
        self._case_started_at = time.monotonic() if at is None else at

    def end_test_case(self, at: Optional[float] = None) -> float:
        """Close the per-case stopwatch.

        Args:
            at: Monotonic timestamp of the case end (default: now).

        Returns:
            Elapsed seconds for the case, 0.0 if no case was open.
        """
        ended_at = time.monotonic() if at is None else at
        if self._case_started_at is None:
            self._last_case_time = 0.0
        else:
            self._last_case_time = max(0.0, ended_at - self._case_started_at)
        self._case_started_at = None
        return self._last_case_time

    def mark_as_completed(self) -> None:
        self._completed += 1
        if self._total is not None and self._completed > self._total:
            LOGGER.warning(
                f"Case {self._completed} completed but only {self._total} were announced; "
                "raising the plan size"
            )
            self._total = self._completed

    def mark_as_failed(self) -> None:
        if self._failures >= self._completed:
            return
        self._failures += 1

    def has_failures(self) -> bool:
        return self._failures > 0

    @property
    def total(self) -> Optional[int]:
        """Planned case count, or None until initialized."""
        return self._total

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def failure_count(self) -> int:
        return self._failures

    @property
    def last_case_time(self) -> float:
        return self._last_case_time

    @property
    def is_running(self) -> bool:
        return self._started_at is not None and self._ended_at is None

    @property
    def elapsed_time(self) -> float:
        """Seconds since start(), frozen once end() was called."""
        if self._started_at is None:
            return 0.0
        ended_at = self._ended_at if self._ended_at is not None else time.monotonic()
        return ended_at - self._started_at

    @property
    def rate(self) -> float:
        """Percentage of planned cases completed (0.0 until initialized)."""
        if not self._total:
            return 0.0
        return self._completed * 100.0 / self._total
