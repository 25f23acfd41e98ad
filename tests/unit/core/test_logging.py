"""Tests for junitwatch.core.logging."""

from __future__ import annotations

import io
import logging
from typing import Iterator

import pytest

from junitwatch.core import logging as junitwatch_logging
from junitwatch.core.logging import ROOT_LOGGER_NAME, configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = logger.level
    yield
    if junitwatch_logging._HANDLER is not None:
        logger.removeHandler(junitwatch_logging._HANDLER)
        junitwatch_logging._HANDLER = None
    logger.setLevel(level)


class TestGetLogger:
    def test_package_modules_keep_their_name(self) -> None:
        assert get_logger("junitwatch.reader.parser").name == "junitwatch.reader.parser"
        assert get_logger("junitwatch").name == "junitwatch"

    def test_foreign_names_are_prefixed(self) -> None:
        assert get_logger("plugin").name == "junitwatch.plugin"


class TestConfigureLogging:
    @pytest.mark.parametrize(
        "flags,level",
        [
            ({}, logging.WARNING),
            ({"quiet": True}, logging.ERROR),
            ({"verbose": True}, logging.INFO),
            ({"debug": True, "quiet": True}, logging.DEBUG),
        ],
    )
    def test_levels(self, flags, level) -> None:
        configure_logging(stream=io.StringIO(), **flags)
        assert logging.getLogger(ROOT_LOGGER_NAME).level == level

    def test_replaces_handler(self) -> None:
        first = io.StringIO()
        second = io.StringIO()
        configure_logging(stream=first)
        configure_logging(stream=second)

        get_logger("junitwatch.test").warning("hello")

        assert first.getvalue() == ""
        assert "WARNING junitwatch.test: hello" in second.getvalue()

    def test_debug_format_includes_thread(self) -> None:
        stream = io.StringIO()
        configure_logging(debug=True, stream=stream)
        get_logger("junitwatch.test").debug("tick")
        assert "[MainThread]: tick" in stream.getvalue()
