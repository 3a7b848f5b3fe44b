"""Builtin reporter plugins."""

import json
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TimeElapsedColumn
from rich.table import Table

from dev_cache_cleaner.core.models import (
    CacheTarget,
    ExecutionReport,
    RunOutcome,
    RunStatus,
)
from dev_cache_cleaner.utils.filesystem import format_size
from ..base import ReporterPlugin

STATUS_STYLES = {
    RunStatus.SUCCESS: "[green]cleaned[/green]",
    RunStatus.SKIPPED: "[yellow]skipped[/yellow]",
    RunStatus.FAILED: "[bold red]failed[/bold red]",
}


class RichReporterPlugin(ReporterPlugin):
    """Rich console reporter plugin."""

    def __init__(self, verbose: bool = False, console: Optional[Console] = None) -> None:
        """Initialises the RichReporterPlugin.

        Args:
            verbose (bool, optional): Show the target currently being cleaned.
            console (Optional[Console], optional): Console to print to.
        """
        self.verbose = verbose
        self.console = console or Console()
        self.progress: Optional[Progress] = None
        self.task_id: Optional[int] = None

    def on_start(self, total_targets: int) -> None:
        """Initialises the progress display.

        Args:
            total_targets (int): Total number of targets to clean.
        """
        self.console.print(Panel("[bold blue]Cleaning developer caches...[/bold blue]"))

        self.progress = Progress(
            SpinnerColumn(),
            *Progress.get_default_columns(),
            TimeElapsedColumn(),
            console=self.console,
        )

        self.progress.start()
        self.task_id = self.progress.add_task(
            "[cyan]Cleaning caches...", total=total_targets
        )

    def on_target_start(self, target: CacheTarget) -> None:
        if self.progress and self.task_id is not None and self.verbose:
            self.progress.update(
                self.task_id,
                description=f"[cyan]Cleaning: [bold]{escape(target.display_name)}[/bold]",
            )

    def on_target_complete(self, outcome: RunOutcome) -> None:
        if self.progress and self.task_id is not None:
            self.progress.advance(self.task_id)

    def on_complete(self, report: ExecutionReport) -> None:
        """Displays the final summary.

        Args:
            report (ExecutionReport): The finished run report.
        """
        if self.progress:
            self.progress.stop()

        self._display_summary(report)

        message = report.error_message()
        if message:
            self._display_errors(message)

    def _display_summary(self, report: ExecutionReport) -> None:
        """Displays a per-target table and totals.

        Args:
            report (ExecutionReport): The finished run report.
        """
        table = Table(show_header=True, header_style="bold")
        table.add_column("Target")
        table.add_column("Status")
        table.add_column("Entries", justify="right")
        table.add_column("Freed", justify="right")

        for outcome in report.outcomes:
            table.add_row(
                outcome.target.display_name,
                STATUS_STYLES[outcome.status],
                str(outcome.entries_removed),
                format_size(outcome.bytes_freed),
            )

        if report.dry_run:
            title, colour = "Dry Run Complete", "yellow"
        elif report.success:
            title, colour = "Success!", "green"
        else:
            title, colour = "Completed With Errors", "red"

        finished = report.finished_at or report.started_at
        self.console.print(
            Panel.fit(
                table,
                title=f"[bold {colour}]{title}[/bold {colour}]",
                subtitle=f"Last cleaned {finished:%Y-%m-%d %H:%M:%S}",
                border_style=colour,
            )
        )
        verb = "Would free" if report.dry_run else "Freed"
        self.console.print(
            f"[bold]{verb} {format_size(report.bytes_freed)}[/bold] "
            f"across {report.entries_removed} entries"
        )

        if report.cancelled:
            self.console.print("[yellow]Run cancelled before all targets finished.[/yellow]")

    def _display_errors(self, message: str) -> None:
        self.console.print("\n[bold red]Not cleaned:[/bold red]")

        for line in message.splitlines():
            self.console.print(f" [red]•[/red] {escape(line)}")


class SilentReporterPlugin(ReporterPlugin):
    """Silent reporter plugin - no output."""


class JSONReporterPlugin(ReporterPlugin):
    """JSON reporter plugin - outputs for scripting."""

    def __init__(
        self, output_path: Optional[Path] = None, console: Optional[Console] = None
    ) -> None:
        """Initialises the JSONReporterPlugin.

        Args:
            output_path (Optional[Path], optional): Path to output JSON file.
                If None, outputs to stdout.
            console (Optional[Console], optional): Console used for stdout output.
        """
        self.output_path = output_path
        self.console = console or Console()

    def on_complete(self, report: ExecutionReport) -> None:
        """Outputs JSON summary.

        Args:
            report (ExecutionReport): The finished run report.
        """
        json_output = json.dumps(report.to_dict(), indent=4)

        if self.output_path:
            self.output_path.write_text(json_output)
        else:
            self.console.print_json(json_output)
