"""Incremental JUnit XML parser.

Turns bytes of a JUnit-style report, fed in arbitrary chunks, into
result events as soon as each element boundary becomes parseable.
Chunks may split the document anywhere, including inside a tag.

Recognized elements:
    <testsuites> / <testsuite>  name, file, tests
    <testcase>                  name, file, class|classname, line, time
    <failure> / <error>         type, message, file, line, text content
Everything else (properties, system-out, skipped, ...) is ignored.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Callable, List, Optional

from junitwatch.core.logging import get_logger
from junitwatch.core.models import (
    FailureDetail,
    FailureKind,
    Result,
    TestCaseResult,
    TestSuiteResult,
)
from junitwatch.reader.errors import MalformedResultError, ReaderConfigurationError
from junitwatch.reader.events import (
    CaseEnded,
    CaseStarted,
    ErrorStarted,
    FailureStarted,
    ResultEvent,
    SuiteEnded,
    SuiteStarted,
)

LOGGER = get_logger(__name__)

SUITE_TAGS = frozenset({"testsuites", "testsuite"})
CASE_TAG = "testcase"
FAILURE_TAGS = {
    "failure": FailureKind.FAILURE,
    "error": FailureKind.ERROR,
}


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _to_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class JUnitXMLStreamParser:
    """Push parser building a result tree and emitting events.

    Events are handed to ``emit`` in document order. A parse error is
    raised only after every event that precedes it has been emitted.
    """

    def __init__(self, emit: Callable[[ResultEvent], None]) -> None:
        """Initialize the parser.

        Args:
            emit: Called with each event, on the thread that feeds data.

        Raises:
            ReaderConfigurationError: If no XML parser is available.
        """
        try:
            self._parser: Optional[ET.XMLPullParser] = ET.XMLPullParser(
                events=("start", "end")
            )
        except ImportError as e:
            raise ReaderConfigurationError(f"XML parser is not available: {e}") from e
        self._emit = emit
        self._root: Optional[TestSuiteResult] = None
        self._suites: List[TestSuiteResult] = []
        self._case: Optional[TestCaseResult] = None
        self._failure: Optional[FailureDetail] = None
        self._depth = 0
        self._started = False
        self._complete = False
        self._bytes_fed = 0

    @property
    def result(self) -> Optional[TestSuiteResult]:
        """Root suite, available as soon as the root element has started."""
        return self._root

    @property
    def is_complete(self) -> bool:
        """Whether the root element has closed."""
        return self._complete

    @property
    def bytes_fed(self) -> int:
        return self._bytes_fed

    def feed(self, data: bytes) -> None:
        """Feed the next chunk of the document.

        Args:
            data: Raw bytes, split anywhere.

        Raises:
            MalformedResultError: If the data can never become well formed.
        """
        if self._complete or self._parser is None or not data:
            return
        self._bytes_fed += len(data)
        self._parser.feed(data)
        self._dispatch()

    def close(self) -> None:
        """Declare that no more data is coming.

        Raises:
            MalformedResultError: If the document is incomplete or not
                well formed.
        """
        if self._complete or self._parser is None:
            return
        parser, self._parser = self._parser, None
        try:
            parser.close()
        except ET.ParseError as e:
            raise MalformedResultError(
                f"Result document ended before it was complete "
                f"({self._bytes_fed} bytes read): {e}"
            ) from e
        for event, element in parser.read_events():
            self._handle(event, element)

    def _dispatch(self) -> None:
        assert self._parser is not None
        try:
            for event, element in self._parser.read_events():
                if self._complete:
                    continue
                self._handle(event, element)
        except ET.ParseError as e:
            if self._complete:
                LOGGER.debug(f"Ignoring data after the result document: {e}")
                return
            raise MalformedResultError(f"Result document is not well formed: {e}") from e

    def _handle(self, event: str, element: ET.Element) -> None:
        if event == "start":
            self._depth += 1
            self._started = True
            self._start_element(element)
        else:
            self._depth -= 1
            self._end_element(element)
            if self._started and self._depth == 0:
                self._complete = True

    def _start_element(self, element: ET.Element) -> None:
        tag = element.tag
        if tag in SUITE_TAGS:
            self._start_suite(element)
        elif tag == CASE_TAG:
            self._start_case(element)
        elif tag in FAILURE_TAGS:
            self._start_failure(element, FAILURE_TAGS[tag])

    def _end_element(self, element: ET.Element) -> None:
        tag = element.tag
        if tag in SUITE_TAGS:
            self._end_suite(element)
        elif tag == CASE_TAG:
            self._end_case(element)
        elif tag in FAILURE_TAGS:
            self._end_failure(element)

    def _start_suite(self, element: ET.Element) -> None:
        suite = TestSuiteResult(
            name=element.get("name", ""),
            file=element.get("file"),
            planned=_to_int(element.get("tests")),
        )
        if self._suites:
            self._suites[-1].add_child(suite)
        elif self._root is None:
            self._root = suite
        self._suites.append(suite)
        self._emit(SuiteStarted(suite))

    def _end_suite(self, element: ET.Element) -> None:
        if not self._suites:
            return
        suite = self._suites.pop()
        self._emit(SuiteEnded(suite))
        element.clear()

    def _start_case(self, element: ET.Element) -> None:
        case = TestCaseResult(
            name=element.get("name", ""),
            file=element.get("file"),
            class_name=element.get("class") or element.get("classname"),
            line=_to_int(element.get("line")),
        )
        if self._suites:
            self._suites[-1].add_child(case)
        self._case = case
        self._emit(CaseStarted(case))

    def _end_case(self, element: ET.Element) -> None:
        case = self._case
        if case is None:
            return
        case.reported_time = _to_float(element.get("time"))
        case.mark_finished()
        self._case = None
        self._emit(CaseEnded(case))
        element.clear()

    def _start_failure(self, element: ET.Element, kind: FailureKind) -> None:
        target: Optional[Result] = self._case
        if target is None and self._suites:
            target = self._suites[-1]
        if target is None:
            return
        failure = FailureDetail(
            kind=kind,
            type=element.get("type"),
            message=element.get("message"),
            file=element.get("file"),
            line=_to_int(element.get("line")),
        )
        target.mark_failed(failure)
        self._failure = failure
        if kind is FailureKind.ERROR:
            self._emit(ErrorStarted(target, failure))
        else:
            self._emit(FailureStarted(target, failure))

    def _end_failure(self, element: ET.Element) -> None:
        if self._failure is None:
            return
        self._failure.content = (element.text or "").strip()
        self._failure = None
