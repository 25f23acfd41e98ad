"""Launch handle shared between the process launcher and the lifecycle.

The launcher (an IDE integration or a script) starts the test runner
itself; junitwatch only needs to know where the report goes and which
processes belong to the run.
"""

from __future__ import annotations

import os
import tempfile
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from junitwatch.core.models import TestingTargets

PREPARE_SCRIPT_OPTION = "-p"
JUNIT_XML_FILE_PREFIX = "junitwatch-"


class ProcessLike(Protocol):
    """The part of ``subprocess.Popen`` the lifecycle relies on."""

    def poll(self) -> Optional[int]:
        """Return the exit code, or None while still running."""
        ...


def build_runner_command(
    runner: Union[str, Path],
    test_file: Union[str, Path],
    prepare_script: Optional[Union[str, Path]] = None,
    extra_args: Sequence[str] = (),
) -> List[str]:
    """Build the test runner command line.

    Convention: ``<runner> [extra args] [-p <prepare script>] <test file>``.

    Args:
        runner: Test runner executable.
        test_file: File or directory holding the tests to run.
        prepare_script: Optional bootstrap script loaded before the tests.
        extra_args: Additional runner options (e.g. the report option).

    Returns:
        Command as an argument list.
    """
    cmd = [str(runner), *extra_args]
    if prepare_script is not None:
        cmd.extend([PREPARE_SCRIPT_OPTION, str(prepare_script)])
    cmd.append(str(test_file))
    return cmd


def default_junit_xml_file(directory: Optional[Path] = None) -> Path:
    """Return a fresh report path that does not exist yet.

    Args:
        directory: Directory for the report (default: system temp dir).

    Returns:
        Path for the runner to write its report to.
    """
    base = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    return base / f"{JUNIT_XML_FILE_PREFIX}{os.getpid()}-{uuid.uuid4().hex}.xml"


@dataclass(eq=False)
class Launch:
    """One launch of the test runner.

    Compared by identity: a lifecycle accepts callbacks only for the very
    Launch object it was started with.
    """

    junit_xml_file: Path
    processes: List[ProcessLike] = field(default_factory=list)
    testing_targets: TestingTargets = field(default_factory=TestingTargets)
    command: List[str] = field(default_factory=list)

    def add_process(self, process: ProcessLike) -> None:
        self.processes.append(process)
