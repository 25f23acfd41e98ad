"""Base class for run reporters and the run report they render."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import IO, TYPE_CHECKING, Any, Dict, List, Optional

from junitwatch.core.models import Result, TestCaseResult, TestSuiteResult

if TYPE_CHECKING:
    from junitwatch.core.lifecycle import TestLifecycle


class RunStatus(str, Enum):
    """Overall outcome of a run."""

    PASSED = "passed"
    FAILED = "failed"  # Completed with ordinary failures
    ABORTED = "aborted"  # Runner crashed or the report is unreadable


@dataclass
class FailureEntry:
    """One failing result, flattened for output."""

    name: str
    kind: str  # "case" or "suite"
    status: str
    file: Optional[str] = None
    line: Optional[int] = None
    type: Optional[str] = None
    message: Optional[str] = None
    content: str = ""

    @classmethod
    def from_result(cls, result: Result) -> "FailureEntry":
        failure = result.failure
        if isinstance(result, TestCaseResult):
            name, kind, status = result.qualified_name, "case", result.status.value
        else:
            name, kind, status = result.name, "suite", "failed"
        return cls(
            name=name,
            kind=kind,
            status=status,
            file=(failure.file if failure and failure.file else result.file),
            line=(failure.line if failure and failure.line else getattr(result, "line", None)),
            type=failure.type if failure else None,
            message=failure.message if failure else None,
            content=failure.content if failure else "",
        )


@dataclass
class RunReport:
    """Snapshot of a run suitable for reporting."""

    status: RunStatus
    total: Optional[int] = None
    completed: int = 0
    passed: int = 0
    failed: int = 0
    errored: int = 0
    elapsed_time: float = 0.0
    report_file: Optional[str] = None
    suite_name: Optional[str] = None
    failures: List[FailureEntry] = field(default_factory=list)
    missing_targets: List[str] = field(default_factory=list)
    accessed_files: List[str] = field(default_factory=list)

    @classmethod
    def from_lifecycle(cls, lifecycle: "TestLifecycle") -> "RunReport":
        """Build a report from a (preferably ended) lifecycle."""
        progress = lifecycle.get_progress()
        result: Optional[TestSuiteResult] = lifecycle.get_result()
        has_errors = lifecycle.has_errors()

        if has_errors:
            status = RunStatus.ABORTED
        elif lifecycle.has_failures() or len(lifecycle.get_failures()) > 0:
            status = RunStatus.FAILED
        else:
            status = RunStatus.PASSED

        launch = lifecycle.launch
        return cls(
            status=status,
            total=progress.total,
            completed=progress.completed,
            passed=result.passed_count if result else 0,
            failed=result.failure_count if result else 0,
            errored=result.error_count if result else 0,
            elapsed_time=progress.elapsed_time,
            report_file=str(launch.junit_xml_file) if launch else None,
            suite_name=result.name if result else None,
            failures=[FailureEntry.from_result(r) for r in lifecycle.get_failures()],
            missing_targets=lifecycle.get_testing_targets().find_missing(result),
            accessed_files=lifecycle.accessed_files,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "total": self.total,
            "completed": self.completed,
            "passed": self.passed,
            "failed": self.failed,
            "errored": self.errored,
            "elapsed_time": round(self.elapsed_time, 3),
            "report_file": self.report_file,
            "suite_name": self.suite_name,
            "failures": [asdict(entry) for entry in self.failures],
            "missing_targets": list(self.missing_targets),
            "accessed_files": list(self.accessed_files),
        }


class ReporterPlugin(ABC):
    """Abstract base class for reporters.

    Reporters render a RunReport to an output stream.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Reporter identifier (e.g., 'json', 'summary')."""

    @abstractmethod
    def report(self, report: RunReport, output: IO[str]) -> None:
        """Write the formatted report.

        Args:
            report: Run report to render.
            output: Output stream to write to.
        """
