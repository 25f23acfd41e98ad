"""Result model for a streamed test run.

A run produces a tree of suites and cases. The tree is built by the
reader thread while the report is still being written, so every object
here is created once and then only mutated forward (pending -> final).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Union


class ResultStatus(str, Enum):
    """Status of a single test case."""

    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"


class FailureKind(str, Enum):
    """Kind of failure element found in the report."""

    FAILURE = "failure"
    ERROR = "error"


@dataclass
class FailureDetail:
    """A ``<failure>`` or ``<error>`` element attached to a result."""

    kind: FailureKind
    type: Optional[str] = None
    message: Optional[str] = None
    file: Optional[str] = None
    line: Optional[int] = None
    content: str = ""  # Element text, set when the element closes


@dataclass(eq=False)
class TestCaseResult:
    """Result of one test case."""

    __test__ = False  # not a pytest test class

    name: str
    file: Optional[str] = None
    class_name: Optional[str] = None
    line: Optional[int] = None
    status: ResultStatus = ResultStatus.PENDING
    time: float = 0.0  # Measured elapsed seconds
    reported_time: Optional[float] = None  # The `time` attribute, if present
    failure: Optional[FailureDetail] = None
    parent: Optional["TestSuiteResult"] = field(default=None, repr=False)

    @property
    def is_failure(self) -> bool:
        """Whether the case failed or errored."""
        return self.status in (ResultStatus.FAILED, ResultStatus.ERRORED)

    @property
    def is_finished(self) -> bool:
        return self.status is not ResultStatus.PENDING

    @property
    def qualified_name(self) -> str:
        """``Class::name`` when the class is known, otherwise the name."""
        if self.class_name:
            return f"{self.class_name}::{self.name}"
        return self.name

    def mark_failed(self, failure: FailureDetail) -> None:
        """Record a failure or error. An error outranks a failure.

        Args:
            failure: Failure detail parsed from the report.
        """
        if failure.kind is FailureKind.ERROR:
            self.status = ResultStatus.ERRORED
            self.failure = failure
        elif self.status is not ResultStatus.ERRORED:
            self.status = ResultStatus.FAILED
            self.failure = failure

    def mark_finished(self) -> None:
        """Close the case; a case with no failure recorded has passed."""
        if self.status is ResultStatus.PENDING:
            self.status = ResultStatus.PASSED


@dataclass(eq=False)
class TestSuiteResult:
    """A named group of cases and nested suites."""

    __test__ = False

    name: str
    file: Optional[str] = None
    planned: Optional[int] = None  # The `tests` attribute, if present
    children: List["Result"] = field(default_factory=list)
    failure: Optional[FailureDetail] = None
    parent: Optional["TestSuiteResult"] = field(default=None, repr=False)

    def add_child(self, child: "Result") -> None:
        child.parent = self
        self.children.append(child)

    def mark_failed(self, failure: FailureDetail) -> None:
        """Record a suite-level failure (e.g. a failing fixture)."""
        if self.failure is None or failure.kind is FailureKind.ERROR:
            self.failure = failure

    @property
    def is_failure(self) -> bool:
        """Whether the suite itself or any case below it failed."""
        if self.failure is not None:
            return True
        return any(child.is_failure for child in list(self.children))

    def iter_cases(self) -> Iterator[TestCaseResult]:
        """Walk all cases below this suite in document order."""
        for child in list(self.children):
            if isinstance(child, TestSuiteResult):
                yield from child.iter_cases()
            else:
                yield child

    def iter_suites(self) -> Iterator["TestSuiteResult"]:
        """Walk all nested suites below this suite in document order."""
        for child in list(self.children):
            if isinstance(child, TestSuiteResult):
                yield child
                yield from child.iter_suites()

    def _count(self, *statuses: ResultStatus) -> int:
        return sum(1 for case in self.iter_cases() if case.status in statuses)

    @property
    def test_count(self) -> int:
        return sum(1 for _ in self.iter_cases())

    @property
    def passed_count(self) -> int:
        return self._count(ResultStatus.PASSED)

    @property
    def failure_count(self) -> int:
        return self._count(ResultStatus.FAILED)

    @property
    def error_count(self) -> int:
        return self._count(ResultStatus.ERRORED)

    @property
    def pending_count(self) -> int:
        return self._count(ResultStatus.PENDING)


Result = Union[TestCaseResult, TestSuiteResult]


class TestingTargets:
    """Ordered set of test identifiers a run claims to cover.

    Identifiers are matched against cases by file path, class name or
    ``Class::method``, using exact string comparison.
    """

    __test__ = False

    def __init__(self, targets: Optional[Iterable[str]] = None) -> None:
        self._targets: List[str] = []
        for target in targets or []:
            self.add(target)

    def add(self, target: str) -> None:
        if target not in self._targets:
            self._targets.append(target)

    @property
    def targets(self) -> List[str]:
        return list(self._targets)

    def __contains__(self, target: object) -> bool:
        return target in self._targets

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._targets))

    def __len__(self) -> int:
        return len(self._targets)

    def __bool__(self) -> bool:
        return bool(self._targets)

    def matches(self, case: TestCaseResult) -> bool:
        """Check whether a case belongs to this run's scope."""
        return any(
            identifier in self._targets
            for identifier in (case.file, case.class_name, case.qualified_name)
            if identifier
        )

    def find_missing(self, suite: Optional[TestSuiteResult]) -> List[str]:
        """Return targets that no case in ``suite`` accounts for.

        Args:
            suite: Root result of the run (may be None).

        Returns:
            Targets in insertion order.
        """
        seen = set()
        if suite is not None:
            for case in suite.iter_cases():
                seen.update(
                    identifier
                    for identifier in (case.file, case.class_name, case.qualified_name)
                    if identifier
                )
        return [target for target in self._targets if target not in seen]
