"""devlog command line - main entry point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from . import __version__
from .config import DevlogConfig, load_config
from .engine import DevlogEngine
from .errors import DevlogError
from .models import ALL_STATUSES, Status
from .status import render_json, render_status

MAIN_INFO = (
    "Devlog files are created in the directory at $DEVLOG_REPO, "
    "which defaults to $HOME/devlogs if not set."
)

EDIT_INFO = "Uses the editor program $DEVLOG_EDITOR, which defaults to nano if not set."

TAIL_SEPARATOR = "\n~~~~~~~~~~~~~~~~~~~~~~\n"

SHOW_CHOICES = ["all"] + [status.cli_name for status in Status]


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("back must be an integer")
    if number < 0:
        raise argparse.ArgumentTypeError("back must be >= 0")
    return number


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("limit must be an integer")
    if number < 1:
        raise argparse.ArgumentTypeError("limit must be >= 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devlog",
        description="Track daily development work",
        epilog=MAIN_INFO,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to config file (default: $DEVLOG_CONFIG or devlog.toml in the repository)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log hook and editor activity to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    yes_parser = argparse.ArgumentParser(add_help=False)
    yes_parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help='Automatically answer "yes" in response to all prompts.',
    )

    subparsers.add_parser(
        "init",
        parents=[yes_parser],
        help="Initialize a new devlog repository if it does not already exist.",
    )
    subparsers.add_parser(
        "edit",
        parents=[yes_parser],
        help="Edit the most recent devlog file",
        epilog=EDIT_INFO,
    )
    subparsers.add_parser(
        "rollover",
        parents=[yes_parser],
        help="Create new devlog file with incomplete and blocked tasks from the current devlog file",
    )

    status_parser = subparsers.add_parser("status", help="Show recent tasks")
    status_parser.add_argument(
        "--show",
        "-s",
        action="append",
        choices=SHOW_CHOICES,
        metavar="SHOW",
        help=f"Sections to show, repeatable ({', '.join(SHOW_CHOICES)}; default: all)",
    )
    status_parser.add_argument(
        "--back",
        "-b",
        type=non_negative_int,
        default=0,
        help="Show tasks from a previous devlog",
    )
    status_parser.add_argument(
        "--json",
        action="store_true",
        help="Print tasks as JSON",
    )

    tail_parser = subparsers.add_parser("tail", help="Show recent devlogs")
    tail_parser.add_argument(
        "--limit",
        "-n",
        type=positive_int,
        default=None,
        help="Maximum number of log files to display (default: 2)",
    )
    tail_parser.add_argument(
        "--json",
        action="store_true",
        help="Print entries and their blocks as JSON",
    )

    return parser


def parse_show(values: Optional[list[str]]) -> frozenset[Status]:
    """Map --show values to the set of statuses to select."""
    if not values or "all" in values:
        return ALL_STATUSES
    return frozenset(Status.from_cli_name(value) for value in values)


def prompt_confirm(
    msg: str,
    assume_yes: bool,
    out: Optional[TextIO] = None,
    read_line: Optional[Callable[[], str]] = None,
) -> bool:
    if assume_yes:
        return True
    out = out or sys.stdout
    read_line = read_line or sys.stdin.readline
    out.write(f"{msg} [y/n] ")
    out.flush()
    answer = read_line().strip().lower()
    return answer in ("y", "yes")


def initialize_if_necessary(engine: DevlogEngine, assume_yes: bool) -> Optional[bool]:
    """Initialize the repository after confirmation.

    Returns:
        True if created, False if it already existed, None if declined
    """
    if engine.initialized():
        return False
    if not prompt_confirm(f"Initialize devlog repository at {engine.repo_dir}?", assume_yes):
        return None
    return engine.init()


def init_cmd(engine: DevlogEngine, args: argparse.Namespace) -> int:
    created = initialize_if_necessary(engine, args.yes)
    if created is None:
        return 0
    if created:
        print("Success!  Now you can open your devlog using `devlog edit`")
    else:
        print(f"Devlog repository already exists at {engine.repo_dir}")
    return 0


def edit_cmd(engine: DevlogEngine, args: argparse.Namespace) -> int:
    if initialize_if_necessary(engine, args.yes) is None:
        return 0
    result = engine.edit()
    for message in result.messages:
        print(message)
    return 0


def rollover_cmd(engine: DevlogEngine, args: argparse.Namespace) -> int:
    engine.require_initialized()
    if not prompt_confirm("Rollover incomplete tasks?", args.yes):
        return 0
    result = engine.rollover()
    print(f"Imported {result.imported} tasks into {result.new_path}")
    return 0


def status_cmd(engine: DevlogEngine, args: argparse.Namespace) -> int:
    selected = engine.status(back=args.back, statuses=parse_show(args.show))
    if args.json:
        print(render_json(selected))
    else:
        sys.stdout.write(render_status(selected))
    return 0


def tail_cmd(engine: DevlogEngine, args: argparse.Namespace) -> int:
    entries = engine.tail(args.limit)
    if args.json:
        print(json.dumps([entry.to_dict() for entry in entries], indent=2))
        return 0
    for i, entry in enumerate(entries):
        if i > 0:
            sys.stdout.write(TAIL_SEPARATOR)
        sys.stdout.write(entry.text)
    return 0


COMMANDS = {
    "init": init_cmd,
    "edit": edit_cmd,
    "rollover": rollover_cmd,
    "status": status_cmd,
    "tail": tail_cmd,
}


def run(argv: Optional[list[str]] = None, config: Optional[DevlogConfig] = None) -> int:
    """Run one devlog command and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        return 2

    try:
        if config is None:
            config = load_config(args.config)
        if hasattr(args, "yes"):
            args.yes = args.yes or config.assume_yes
        engine = DevlogEngine(config)
        return COMMANDS[args.command](engine, args)
    except DevlogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":  # pragma: no cover
    main()
