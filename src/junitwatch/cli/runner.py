"""CLI runner dispatching parsed arguments to commands."""

from __future__ import annotations

from argparse import Namespace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from junitwatch.cli.arguments import build_parser
from junitwatch.cli.commands import Command, WatchCommand
from junitwatch.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from junitwatch.config import ConfigError, load_config
from junitwatch.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version("junitwatch")
    except PackageNotFoundError:
        # Fallback for source checkouts without installed metadata.
        from junitwatch import __version__

        return __version__


def cli_args_to_config_overrides(args: Namespace) -> Dict[str, Any]:
    """Translate CLI flags into a config overlay."""
    overrides: Dict[str, Any] = {}
    if getattr(args, "poll_interval", None) is not None:
        overrides.setdefault("reader", {})["poll_interval"] = args.poll_interval
    if getattr(args, "timeout", None) is not None:
        overrides.setdefault("run", {})["timeout"] = args.timeout
    if getattr(args, "format", None):
        overrides.setdefault("output", {})["format"] = args.format
    return overrides


class CLIRunner:
    """Parses arguments, configures logging and runs a command."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {
            "watch": WatchCommand(),
        }

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        parser = build_parser()
        argv_list = list(argv) if argv is not None else None

        try:
            args = parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits 0 for --help and 2 for usage errors
            return EXIT_SUCCESS if e.code == 0 else EXIT_INVALID_USAGE

        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if args.version:
            print(get_version())
            return EXIT_SUCCESS

        command = self._commands.get(args.command or "")
        if command is None:
            parser.print_help()
            return EXIT_SUCCESS

        try:
            config = load_config(
                project_root=Path.cwd(),
                cli_config_path=getattr(args, "config", None),
                cli_overrides=cli_args_to_config_overrides(args),
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        return command.execute(args, config)
