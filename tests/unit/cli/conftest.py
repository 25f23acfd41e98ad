"""Fixtures for CLI tests."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator
from unittest.mock import patch

import pytest

from junitwatch.core import logging as junitwatch_logging


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run each CLI test in an empty project without a global config."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    logger = logging.getLogger(junitwatch_logging.ROOT_LOGGER_NAME)
    level = logger.level
    with patch.dict(os.environ, {"JUNITWATCH_HOME": str(home)}):
        yield tmp_path
    if junitwatch_logging._HANDLER is not None:
        logger.removeHandler(junitwatch_logging._HANDLER)
        junitwatch_logging._HANDLER = None
    logger.setLevel(level)
