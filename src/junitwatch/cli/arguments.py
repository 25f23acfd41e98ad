"""Argument parser for the junitwatch CLI."""

from __future__ import annotations

import argparse
from pathlib import Path

from junitwatch.reporters import list_available_reporters


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="junitwatch",
        description="junitwatch - follow a JUnit XML report while the tests run.",
    )

    # Global options
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show junitwatch version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )

    subparsers = parser.add_subparsers(dest="command")

    watch = subparsers.add_parser(
        "watch",
        help="Follow a report file until it is complete.",
        description=(
            "Read a JUnit XML report while the test runner writes it and print "
            "a summary once the report closes, the timeout fires or you press Ctrl-C."
        ),
    )
    watch.add_argument(
        "report",
        type=Path,
        help="Report file written by the test runner (may not exist yet).",
    )
    watch.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a config file (default: .junitwatch.yml in the current directory).",
    )
    watch.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Stop waiting after this many seconds.",
    )
    watch.add_argument(
        "--poll-interval",
        type=_positive_float,
        default=None,
        help="Seconds between reads of the report file.",
    )
    watch.add_argument(
        "--format",
        choices=list_available_reporters(),
        default=None,
        help="Output format for the final report.",
    )
    watch.add_argument(
        "--target",
        action="append",
        default=[],
        metavar="ID",
        help="Test file, class or Class::method this run is expected to cover (repeatable).",
    )
    watch.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not print a line per finished test case.",
    )

    return parser
