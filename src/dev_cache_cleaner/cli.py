"""Command-line interface for listing, checking and cleaning developer caches."""

from __future__ import annotations

import argparse
import json
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dev_cache_cleaner import __version__
from dev_cache_cleaner.core.errors import UnknownTargetError
from dev_cache_cleaner.plugins.base import ReporterPlugin
from dev_cache_cleaner.plugins.builtin import JSONReporterPlugin, RichReporterPlugin
from dev_cache_cleaner.plugins.registry import CleanerRegistry
from dev_cache_cleaner.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Builds the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="dev-cache-cleaner",
        description="Find and remove cache directories left by developer tools.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, help="Also write a debug log to this file")
    parser.add_argument(
        "--home", type=Path, help="Home directory to clean under (default: current user's)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List targets and their availability")
    list_parser.add_argument("--json", action="store_true", help="Print JSON")

    check_parser = subparsers.add_parser("check", help="Check whether one target can be cleaned")
    check_parser.add_argument("target", help="Target id, as shown by 'list'")

    clean_parser = subparsers.add_parser("clean", help="Clean the given targets")
    clean_parser.add_argument("targets", nargs="*", metavar="target", help="Target ids to clean")
    clean_parser.add_argument("--all", action="store_true", help="Clean every target")
    clean_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be removed without removing it"
    )
    clean_parser.add_argument("--json", action="store_true", help="Print a JSON report")

    return parser


def cmd_list(registry: CleanerRegistry, args: argparse.Namespace, console: Console) -> int:
    statuses = registry.refresh()

    if args.json:
        described = registry.describe()
        console.print_json(
            json.dumps(
                [
                    {
                        "id": s.target.id,
                        **described[s.target.id],
                        "available": s.availability.available,
                        "reason": s.availability.reason,
                    }
                    for s in statuses
                ]
            )
        )
        return EXIT_OK

    table = Table(title="Developer caches")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Available")

    for status in statuses:
        availability = (
            "[green]yes[/green]"
            if status.availability.available
            else f"[dim]no - {escape(status.availability.reason)}[/dim]"
        )
        table.add_row(
            status.target.id,
            status.target.display_name,
            status.target.description,
            availability,
        )

    console.print(table)
    return EXIT_OK


def cmd_check(registry: CleanerRegistry, args: argparse.Namespace, console: Console) -> int:
    target = registry.get(args.target).target
    availability = registry.check_available(args.target)

    if availability.available:
        console.print(f"[green]{target.display_name} is available[/green]")
        return EXIT_OK

    console.print(f"[yellow]{target.display_name}: {escape(availability.reason)}[/yellow]")
    return EXIT_FAILED


def cmd_clean(registry: CleanerRegistry, args: argparse.Namespace, console: Console) -> int:
    if args.all:
        selected = [target.id for target in registry.list_targets()]
    else:
        selected = args.targets

    if not selected:
        console.print("[red]No targets given - name some targets or pass --all[/red]")
        return EXIT_USAGE

    reporter: ReporterPlugin
    if args.json:
        reporter = JSONReporterPlugin(console=console)
    else:
        reporter = RichReporterPlugin(verbose=args.verbose, console=console)

    cancel_event = threading.Event()
    previous_handler = signal.getsignal(signal.SIGINT)

    def _request_cancel(signum, frame) -> None:
        if cancel_event.is_set():
            raise KeyboardInterrupt
        logger.warning("Cancelling after the current target - press Ctrl-C again to abort.")
        cancel_event.set()

    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGINT, _request_cancel)

    try:
        report = registry.run(
            selected, dry_run=args.dry_run, cancel_event=cancel_event, reporter=reporter
        )
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    finally:
        if threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGINT, previous_handler)

    if report.cancelled:
        return EXIT_INTERRUPTED
    return EXIT_OK if report.success else EXIT_FAILED


COMMANDS = {
    "list": cmd_list,
    "check": cmd_check,
    "clean": cmd_clean,
}


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Runs the command line interface.

    Args:
        argv (Optional[List[str]]): Arguments without the program name. Defaults to sys.argv.
        console (Optional[Console]): Console for output.

    Returns:
        int: Process exit code.
    """
    args = build_parser().parse_args(argv)
    console = console or Console()

    setup_logging(log_file=args.log_file, verbose=args.verbose)

    registry = CleanerRegistry.create_default(home=args.home)

    try:
        return COMMANDS[args.command](registry, args, console)
    except UnknownTargetError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        console.print(f"Known targets: {', '.join(t.id for t in registry.list_targets())}")
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
