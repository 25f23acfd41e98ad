"""Follow a report written by a real child process."""

from __future__ import annotations

import subprocess
import sys
import textwrap
from pathlib import Path

from junitwatch.core.launch import Launch, build_runner_command
from junitwatch.core.lifecycle import TestLifecycle
from junitwatch.core.listeners import CallbackResultListener
from junitwatch.core.models import TestingTargets
from junitwatch.reader.junit_xml import ReaderSettings
from tests.conftest import wait_for

WRITER = textwrap.dedent(
    """
    import sys
    import time

    path, crash = sys.argv[1], sys.argv[2] == "crash"
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>\\n',
        '<testsuite name="SlowTest" tests="3" file="/t/SlowTest.php">\\n',
        '  <testcase name="testOne" class="SlowTest" file="/t/SlowTest.php" line="5"/>\\n',
        '  <testcase name="testTwo" class="SlowTest" file="/t/SlowTest.php" line="9">',
        '<failure message="boom">boom</failure></testcase>\\n',
        '  <testcase name="testThree" class="SlowTest" file="/t/SlowTest.php" line="14"/>\\n',
        '</testsuite>\\n',
    ]
    with open(path, "w") as f:
        for index, part in enumerate(parts):
            if crash and index == 4:
                f.write("<testcase name=")
                f.flush()
                sys.exit(255)
            f.write(part)
            f.flush()
            time.sleep(0.02)
    """
)


def _launch(tmp_path: Path, mode: str) -> Launch:
    writer = tmp_path / "writer.py"
    writer.write_text(WRITER)
    report = tmp_path / "junit.xml"
    command = build_runner_command(sys.executable, mode, extra_args=[str(writer), str(report)])
    # The writer takes the mode as its last argument.
    process = subprocess.Popen(command)
    return Launch(
        junit_xml_file=report,
        processes=[process],
        testing_targets=TestingTargets(["SlowTest"]),
        command=command,
    )


class TestStreamingRun:
    """Tests for a lifecycle following a live writer."""

    def test_completed_run(self, tmp_path: Path) -> None:
        launch = _launch(tmp_path, "ok")
        finished = []
        lifecycle = TestLifecycle(settings=ReaderSettings(poll_interval=0.01))
        lifecycle.start(launch, CallbackResultListener(on_case_end=lambda case: finished.append(case.name)))

        assert wait_for(lifecycle.is_stream_closed, timeout=10)
        launch.processes[0].wait(timeout=10)
        lifecycle.end()

        assert not lifecycle.has_errors()
        assert lifecycle.has_failures()
        assert finished == ["testOne", "testTwo", "testThree"]
        assert [r.name for r in lifecycle.get_failures()] == ["testTwo"]
        assert lifecycle.get_progress().completed == 3
        assert lifecycle.get_testing_targets().find_missing(lifecycle.get_result()) == []
        assert lifecycle.accessed_files == ["/t/SlowTest.php"]

    def test_crashed_run(self, tmp_path: Path) -> None:
        launch = _launch(tmp_path, "crash")
        lifecycle = TestLifecycle(settings=ReaderSettings(poll_interval=0.01), trust_exit_status=False)
        lifecycle.start(launch)

        launch.processes[0].wait(timeout=10)
        lifecycle.end()

        assert lifecycle.has_errors()
        assert lifecycle.get_progress().completed == 1
        assert lifecycle.get_progress().total == 3
        assert not lifecycle.has_failures()
