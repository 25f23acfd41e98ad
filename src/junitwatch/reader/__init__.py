"""Streaming JUnit XML reader.

JUnitXMLReader tails a report file on a background thread and delivers
typed events over a queue; JUnitXMLStreamParser does the incremental
parsing and can be fed directly.
"""

from __future__ import annotations

from junitwatch.reader.errors import (
    MalformedResultError,
    ReaderConfigurationError,
    ResultStreamError,
    ResultStreamIOError,
)
from junitwatch.reader.events import (
    CaseEnded,
    CaseStarted,
    ErrorStarted,
    FailureStarted,
    ReaderEvent,
    ResultEvent,
    StreamClosed,
    StreamFailed,
    StreamFailureKind,
    SuiteEnded,
    SuiteStarted,
)
from junitwatch.reader.junit_xml import JUnitXMLReader, ReaderSettings
from junitwatch.reader.parser import JUnitXMLStreamParser

__all__ = [
    "CaseEnded",
    "CaseStarted",
    "ErrorStarted",
    "FailureStarted",
    "JUnitXMLReader",
    "JUnitXMLStreamParser",
    "MalformedResultError",
    "ReaderConfigurationError",
    "ReaderEvent",
    "ReaderSettings",
    "ResultEvent",
    "ResultStreamError",
    "ResultStreamIOError",
    "StreamClosed",
    "StreamFailed",
    "StreamFailureKind",
    "SuiteEnded",
    "SuiteStarted",
]
