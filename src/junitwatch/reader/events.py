"""Typed events emitted by the streaming reader.

Events travel from the reader thread to the consumer over a queue and
are applied in the order they were produced.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from junitwatch.core.models import FailureDetail, Result, TestCaseResult, TestSuiteResult


def _now() -> float:
    return time.monotonic()


class StreamFailureKind(str, Enum):
    """Why the reader stopped early."""

    CONFIGURATION = "configuration"  # XML support unavailable
    MALFORMED = "malformed"  # Document not well formed once the writer finished
    IO = "io"  # Reading kept failing after stop
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class SuiteStarted:
    suite: TestSuiteResult
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class SuiteEnded:
    suite: TestSuiteResult
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class CaseStarted:
    case: TestCaseResult
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class CaseEnded:
    case: TestCaseResult
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class FailureStarted:
    """A ``<failure>`` element opened inside ``result``."""

    result: Result
    failure: FailureDetail
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class ErrorStarted:
    """An ``<error>`` element opened inside ``result``."""

    result: Result
    failure: FailureDetail
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class StreamFailed:
    """The reader gave up; emitted at most once, before StreamClosed."""

    kind: StreamFailureKind
    message: str
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class StreamClosed:
    """Last event of every reader run."""

    timestamp: float = field(default_factory=_now)


ResultEvent = Union[
    SuiteStarted,
    SuiteEnded,
    CaseStarted,
    CaseEnded,
    FailureStarted,
    ErrorStarted,
]

ReaderEvent = Union[ResultEvent, StreamFailed, StreamClosed]
