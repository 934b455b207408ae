"""Command-line entry point for ``db-cli``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Callable

from rich.console import Console

from . import __version__
from .config import ProfileStore
from .credentials import KeyringCredentialStore
from .errors import DbCliError, ProbeFailureError
from .lifecycle import ProfileLifecycleController
from .models import ConfigureOutcome, ProfileCandidate, ResetOutcome
from .output import Reporter
from .probe import ConnectionProber
from .prompts import Prompter, RichPrompter
from .provision import AsyncpgProvisioner

LOG = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

CommandHandler = Callable[[argparse.Namespace, ProfileLifecycleController, Prompter, Reporter], int]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="db-cli",
        description="Store a PostgreSQL connection profile and use it to create databases.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", metavar="<command>", required=True)

    commands.add_parser("config", help="Configure database connection")

    view = commands.add_parser("view", help="View database connection")
    view.add_argument(
        "-p",
        "--show-password",
        action="store_true",
        help="Show password in clear text",
    )

    add = commands.add_parser("add", help="Add a resource on the configured server")
    resources = add.add_subparsers(dest="resource", metavar="<resource>", required=True)
    database = resources.add_parser("db", help="Add a new database")
    database.add_argument("name", nargs="?", help="Database name (prompted for when omitted)")

    reset = commands.add_parser("reset", help="Remove all saved configuration")
    reset.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")
    return parser


def build_controller() -> ProfileLifecycleController:
    return ProfileLifecycleController(
        ProfileStore(),
        KeyringCredentialStore(),
        ConnectionProber(),
        AsyncpgProvisioner(),
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(
    args: argparse.Namespace,
    controller: ProfileLifecycleController,
    prompter: Prompter,
    reporter: Reporter,
) -> int:
    """Dispatch a parsed command and translate failures into exit codes."""

    handler = _HANDLERS[args.command]
    try:
        return handler(args, controller, prompter, reporter)
    except DbCliError as exc:
        LOG.debug("Command failed", exc_info=True, extra={"command": args.command})
        reporter.error(str(exc), title=exc.title)
        return exc.exit_code
    except (KeyboardInterrupt, EOFError):
        reporter.info("Aborted; nothing was changed.")
        return EXIT_INTERRUPTED


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    console = Console()
    return run(args, build_controller(), RichPrompter(console), Reporter(console))


def _configure(
    args: argparse.Namespace,
    controller: ProfileLifecycleController,
    prompter: Prompter,
    reporter: Reporter,
) -> int:
    def _collect() -> ProfileCandidate:
        candidate = prompter.profile_candidate()
        reporter.notice("Testing connection...")
        return candidate

    try:
        outcome = controller.configure(_collect, confirm=prompter.confirm)
    except ProbeFailureError as exc:
        reporter.error(
            f"Connection failed: {exc.detail}",
            hint="Configuration was not saved. Please try again with correct credentials.",
        )
        return exc.exit_code
    if outcome is ConfigureOutcome.UNCHANGED:
        reporter.info("Configuration unchanged")
    else:
        reporter.success("Connection successful!", "Configuration saved successfully!")
    return 0


def _view(
    args: argparse.Namespace,
    controller: ProfileLifecycleController,
    prompter: Prompter,
    reporter: Reporter,
) -> int:
    url = controller.view(args.show_password)
    reporter.connection(
        "Current Configuration:",
        url,
        hint=None if args.show_password else "Use -p flag to show password",
    )
    return 0


def _add(
    args: argparse.Namespace,
    controller: ProfileLifecycleController,
    prompter: Prompter,
    reporter: Reporter,
) -> int:
    controller.require_complete()
    name = args.name if args.name is not None else prompter.database_name()
    url = asyncio.run(controller.add_database(name))
    reporter.connection(
        "Connection string:",
        url,
        title="Success",
        border_style="green",
        lead="Database created successfully!",
    )
    return 0


def _reset(
    args: argparse.Namespace,
    controller: ProfileLifecycleController,
    prompter: Prompter,
    reporter: Reporter,
) -> int:
    confirm = (lambda _message: True) if args.yes else prompter.confirm
    outcome = controller.reset(confirm=confirm)
    if outcome is ResetOutcome.NOTHING_TO_RESET:
        reporter.info("No configuration found to reset")
    elif outcome is ResetOutcome.CANCELLED:
        reporter.info("Reset cancelled")
    else:
        reporter.success("Configuration successfully removed")
    return 0


_HANDLERS: dict[str, CommandHandler] = {
    "config": _configure,
    "view": _view,
    "add": _add,
    "reset": _reset,
}


if __name__ == "__main__":
    raise SystemExit(main())
