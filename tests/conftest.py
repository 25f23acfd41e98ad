"""Shared fixtures and report samples for junitwatch tests."""

from __future__ import annotations

import queue
import time
from pathlib import Path
from typing import Callable, List, Optional

import pytest

PASSING_XML = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="CalculatorTest" tests="2" file="/project/tests/CalculatorTest.php">
  <testcase name="testAdd" class="CalculatorTest" file="/project/tests/CalculatorTest.php" line="10" time="0.010"/>
  <testcase name="testSubtract" class="CalculatorTest" file="/project/tests/CalculatorTest.php" line="20" time="0.020"/>
</testsuite>
"""

FAILING_XML = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="CalculatorTest" tests="2" file="/project/tests/CalculatorTest.php">
  <testcase name="testAdd" class="CalculatorTest" file="/project/tests/CalculatorTest.php" line="10"/>
  <testcase name="testDivide" class="CalculatorTest" file="/project/tests/CalculatorTest.php" line="30">
    <failure type="AssertionError" message="expected 2 but was 3" file="/project/tests/CalculatorTest.php" line="33">AssertionError: expected 2 but was 3
at CalculatorTest.testDivide (CalculatorTest.php:33)</failure>
  </testcase>
</testsuite>
"""

NESTED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<testsuites>
  <testsuite name="AllTests" tests="4">
    <testsuite name="CalculatorTest" tests="2" file="/project/tests/CalculatorTest.php">
      <testcase name="testAdd" class="CalculatorTest" file="/project/tests/CalculatorTest.php" line="10"/>
      <testcase name="testDivide" class="CalculatorTest" file="/project/tests/CalculatorTest.php" line="30">
        <error type="DivisionByZeroError" message="Division by zero">DivisionByZeroError: Division by zero</error>
      </testcase>
    </testsuite>
    <testsuite name="ParserTest" tests="2" file="/project/tests/ParserTest.php">
      <testcase name="testParse" classname="ParserTest" file="/project/tests/ParserTest.php" line="8">
        <system-out>parsing</system-out>
      </testcase>
      <testcase name="testEmpty" classname="ParserTest" file="/project/tests/ParserTest.php" line="15">
        <failure type="AssertionError" message="not empty"/>
      </testcase>
    </testsuite>
  </testsuite>
</testsuites>
"""


def drain(events: "queue.Queue") -> List[object]:
    """Return every event currently in ``events``."""
    items = []
    while True:
        try:
            items.append(events.get_nowait())
        except queue.Empty:
            return items


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll ``predicate`` until it is true or ``timeout`` expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class FakeProcess:
    """Stand-in for subprocess.Popen exposing only poll()."""

    def __init__(self, exit_code: Optional[int] = 0) -> None:
        self.exit_code = exit_code

    def poll(self) -> Optional[int]:
        return self.exit_code


def append(path: Path, text: str) -> None:
    """Append ``text`` to ``path`` and flush it to disk."""
    with open(path, "ab") as f:
        f.write(text.encode("utf-8"))
        f.flush()


@pytest.fixture
def report_path(tmp_path: Path) -> Path:
    """Path of a report file that does not exist yet."""
    return tmp_path / "junit.xml"
