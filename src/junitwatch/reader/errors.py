"""Exceptions raised while reading a streamed result document."""

from __future__ import annotations


class ResultStreamError(Exception):
    """Base class for result stream errors."""

    pass


class ReaderConfigurationError(ResultStreamError):
    """The XML parser could not be set up in this environment."""

    pass


class MalformedResultError(ResultStreamError):
    """The result document is not well formed and will not become so."""

    pass


class ResultStreamIOError(ResultStreamError):
    """The result file could not be read, even after retrying."""

    pass
