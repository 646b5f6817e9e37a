"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status messages, spinners, progress bars and the export summary.
Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.spinner import Spinner

from confluence_export.models.confluence_page import UserInfo
from confluence_export.page_export.models import ExportSummary


class OutputHandler:
    """Handles all terminal output using Rich library.

    Messages are escaped before printing, so page titles and wiki links
    such as ``[[Page]]`` are never read as Rich markup.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Export completed")
        >>> with handler.spinner("Fetching page..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(escape(message))

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Example:
            >>> with handler.spinner("Fetching page..."):
            ...     pass
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    @contextmanager
    def progress_bar(self, total: int, description: str = "Exporting") -> Iterator[Tuple[Progress, int]]:
        """Display progress bar for multi-page exports.

        Yields:
            The Progress instance and the id of its task

        Example:
            >>> with handler.progress_bar(10, "Exporting pages") as (progress, task):
            ...     progress.update(task, advance=1)
        """
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
        )
        with progress:
            task = progress.add_task(description, total=total)
            yield progress, task

    def print_dry_run_plan(self, plan: List[Tuple[str, str]]) -> None:
        """Display what an export would do without doing it.

        Args:
            plan: (label, value) pairs in display order
        """
        self.console.print("\n[bold]Dry Run - Export Plan:[/bold]")
        width = max((len(label) for label, _ in plan), default=0)
        for label, value in plan:
            self.console.print(f"  {escape(label.ljust(width))}  {escape(value)}")
        self.console.print("\n[yellow]Dry run: nothing was fetched or written[/yellow]")

    def print_user_info(self, user: UserInfo, sources: Dict[str, str]) -> None:
        """Display the authenticated user and where the credentials came from."""
        self.success(f"Authenticated as {user.display_name or user.account_id}")
        self.console.print(f"  Account ID: {escape(user.account_id)}")
        if user.email:
            self.console.print(f"  Email: {escape(user.email)}")
        if user.public_name and user.public_name != user.display_name:
            self.console.print(f"  Public name: {escape(user.public_name)}")
        self.console.print(
            "  Credentials: "
            + ", ".join(f"{name} from {source}" for name, source in sources.items())
        )

    def print_export_summary(self, summary: ExportSummary, output_dir: str) -> None:
        """Display export summary with color coding."""
        self.console.print("\n[bold]Export Summary:[/bold]")
        self.console.print(f"  [green]✓[/green] Pages written: {summary.pages_written}")
        if summary.images > 0:
            self.console.print(f"  [blue]↓[/blue] Images: {summary.images}")
        if summary.attachments > 0:
            self.console.print(f"  [blue]↓[/blue] Attachments: {summary.attachments}")
        if summary.failures:
            self.console.print(f"  [red]✗[/red] Failed: {len(summary.failures)} page(s)")
            for failure in summary.failures:
                self.console.print(
                    f"    • {escape(failure.title)} ({failure.page_id}): {escape(failure.error)}"
                )

        if self.verbosity >= 1:
            for path in summary.files:
                self.console.print(f"  [dim]{escape(path)}[/dim]")

        if summary.failures:
            self.console.print(f"\n[yellow]Export completed with errors in {escape(output_dir)}[/yellow]")
        else:
            self.console.print(f"\n[green]Export completed successfully in {escape(output_dir)}[/green]")
