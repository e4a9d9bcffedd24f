"""Rich-based progress reporter and log setup."""
from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table
from rich.text import Text

from ..core.models import BatchResult, MediaEntry, ThumbnailRecord


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route stdlib logging through rich on stderr.

    Args:
        verbose: Show debug records.
        quiet: Only show errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


class RichProgressReporter:
    """Progress reporter using Rich for terminal output.

    Implements the ProgressReporter protocol with Rich console output.
    """

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize the reporter.

        Args:
            verbose: Enable verbose output.
            quiet: Suppress all non-essential output.
            console: Console to draw on, stderr by default.
        """
        self._console = console or Console(stderr=True)
        self._verbose = verbose
        self._quiet = quiet
        self._progress: Optional[Progress] = None
        self._current_task_id: Optional[TaskID] = None

    # --- Phase Management ---

    def start_phase(self, name: str, total: int) -> None:
        """Start a new phase with a progress bar."""
        if self._quiet:
            return

        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TextColumn("[cyan]•"),
            TimeElapsedColumn(),
            TextColumn("[cyan]•"),
            TimeRemainingColumn(),
            console=self._console,
            transient=False,
        )
        self._progress.start()
        self._current_task_id = self._progress.add_task(name, total=total)

    def advance_phase(self, amount: int = 1) -> None:
        if self._progress and self._current_task_id is not None:
            self._progress.advance(self._current_task_id, amount)

    def end_phase(self) -> None:
        if self._progress:
            self._progress.stop()
            self._progress = None
            self._current_task_id = None

    # --- Messages ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._console.print(f"[blue]ℹ[/blue] {message}")

    def success(self, message: str) -> None:
        if not self._quiet:
            self._console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]✗[/red] {message}", style="red")

    # --- Specialized Output ---

    def print_header(self, title: str) -> None:
        if self._quiet:
            return
        self._console.print(Panel(Text(title, style="bold cyan"), border_style="cyan"))

    def print_config(self, config_items: dict) -> None:
        """Print settings as a two-column table."""
        if self._quiet:
            return

        table = Table(title="Import Settings", show_header=True, header_style="bold")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        for key, value in config_items.items():
            table.add_row(key, str(value))
        self._console.print(table)

    def print_entries(self, entries: Sequence[MediaEntry]) -> None:
        """Print scanned media files."""
        if self._quiet:
            return

        table = Table(title=f"Media Files ({len(entries)})", show_header=True, header_style="bold")
        table.add_column("File", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Size", style="green", justify="right")
        for entry in entries:
            table.add_row(str(entry.path), entry.mime_type or "-", _format_size(entry.size_bytes))
        self._console.print(table)

    def print_batch(self, batch: BatchResult) -> None:
        """Print the outcome of an import batch."""
        if self._quiet:
            return

        summary = batch.summary()
        title = "Import Complete" if batch.is_success else "Import Stopped"
        table = Table(title=title, show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="green", justify="right")
        table.add_row("Files Processed", str(summary["processed"]))
        table.add_row("Files Copied", str(summary["copied"]))
        table.add_row("Files Converted", str(summary["converted"]))
        table.add_row("Originals Deleted", str(summary["deleted"]))
        table.add_row("Failed", str(summary["failed"]))
        self._console.print(table)

        if batch.error is not None:
            self._console.print(
                f"[red]Failed at[/red] {batch.error.source_path} "
                f"[dim]({batch.error.stage.value})[/dim]: {batch.error.reason}"
            )

    def print_thumbnails(self, records: Sequence[Optional[ThumbnailRecord]]) -> None:
        """Print thumbnail lookups; None entries are sources that could not be read."""
        if self._quiet:
            return

        table = Table(title="Thumbnails", show_header=True, header_style="bold")
        table.add_column("Source", style="cyan")
        table.add_column("Thumbnail", style="white")
        table.add_column("Status", justify="right")
        for record in records:
            if record is None:
                continue
            if record.cache_hit:
                status = "[green]cached[/green]"
            elif record.exists:
                status = "[blue]extracted[/blue]"
            else:
                status = "[yellow]none[/yellow]"
            table.add_row(str(record.source_path), str(record.cache_path), status)
        self._console.print(table)

    # --- Context Managers ---

    def __enter__(self) -> "RichProgressReporter":
        return self

    def __exit__(self, *args) -> None:
        self.end_phase()


class QuietProgressReporter:
    """Minimal progress reporter that only shows problems."""

    def start_phase(self, name: str, total: int) -> None:
        pass

    def advance_phase(self, amount: int = 1) -> None:
        pass

    def end_phase(self) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        print(f"WARNING: {message}", file=sys.stderr)

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=sys.stderr)

    def print_header(self, title: str) -> None:
        pass

    def print_config(self, config_items: dict) -> None:
        pass

    def print_entries(self, entries: Sequence[MediaEntry]) -> None:
        pass

    def print_batch(self, batch: BatchResult) -> None:
        pass

    def print_thumbnails(self, records: Sequence[Optional[ThumbnailRecord]]) -> None:
        pass

    def __enter__(self) -> "QuietProgressReporter":
        return self

    def __exit__(self, *args) -> None:
        pass
