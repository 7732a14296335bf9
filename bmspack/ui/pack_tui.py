"""Terminal User Interface for bmspack reorganization runs.

This module provides the PackTUI class, a Rich-based console front end for
listing planned merges, asking for confirmation, choosing a dedup preset,
tracking progress and showing run summaries.

Example:
    from bmspack.ui import PackTUI

    tui = PackTUI()
    tui.display_pairs("Undo split", pairs)
    if tui.confirm(f"Found {len(pairs)} folders to merge. Confirm?"):
        ...
    tui.display_summary(summary, dry_run=False)
"""

from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
)
from rich.prompt import Prompt
from rich.table import Table

from bmspack.models import MediaRemoval, MergePair, RulePreset, RunSummary


class PackTUI:
    """Rich-based Terminal User Interface for pack reorganization.

    Args:
        console: Optional Rich Console instance for output. Pass a Console
            backed by StringIO to capture output in tests.

    Attributes:
        console: The Rich Console instance used for all output.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question.

        Args:
            prompt: Question shown to the user; "[y/N]" is appended.

        Returns:
            True only if the trimmed, lowercased answer starts with 'y'.
            An empty answer means no.
        """
        answer = Prompt.ask(
            escape(f"{prompt} [y/N]"),
            console=self.console,
            default="",
            show_default=False,
        )
        return answer.strip().lower().startswith("y")

    def select_preset(self, presets: Sequence[RulePreset]) -> int:
        """Show the available dedup presets and read a numeric choice.

        Args:
            presets: Presets to choose from.

        Returns:
            Index of the chosen preset. Empty, non-numeric or out-of-range
            input selects preset 0.
        """
        table = Table(title="Media Dedup Presets", show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="cyan", width=3)
        table.add_column("Preset", style="magenta")
        table.add_column("Rules", style="white")

        for idx, preset in enumerate(presets):
            table.add_row(str(idx), preset.name, preset.describe())

        self.console.print(table)

        answer = Prompt.ask(
            "Select preset (Default: 0)",
            console=self.console,
            default="",
            show_default=False,
        )
        try:
            selection = int(answer.strip())
        except ValueError:
            return 0

        if 0 <= selection < len(presets):
            return selection
        return 0

    def display_pairs(self, title: str, pairs: Sequence[MergePair]) -> None:
        """Show planned merges as a "target <- source" table."""
        if not pairs:
            self.console.print("[yellow]No folders to merge found.[/yellow]")
            return

        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Target", style="green")
        table.add_column("", justify="center")
        table.add_column("Source", style="white")

        for idx, pair in enumerate(pairs, start=1):
            table.add_row(
                str(idx),
                escape(self._truncate_name(str(pair.target))),
                "<-",
                escape(self._truncate_name(str(pair.source))),
            )

        self.console.print(table)

    def display_removals(self, work_dir: Path, removals: Sequence[MediaRemoval]) -> None:
        """Show the media files about to be removed from one work folder."""
        self.console.print(f"Entering: [bold]{escape(str(work_dir))}[/bold]")
        for removal in removals:
            self.console.print(
                f"  - Remove file [red]{escape(removal.target.name)}[/red], "
                f"because [green]{escape(removal.reason.name)}[/green] exists."
            )

    def display_warning(self, message: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def display_message(self, message: str) -> None:
        self.console.print(message)

    def display_summary(self, summary: RunSummary, dry_run: bool) -> None:
        """Display final statistics of a run.

        Args:
            summary: RunSummary with aggregated statistics.
            dry_run: If True, displays "[DRY RUN]" indicator.
        """
        title = f"{summary.operation} summary"
        if dry_run:
            title += " [yellow][DRY RUN][/yellow]"

        if summary.cancelled:
            self.console.print(Panel(f"{title}\nOperation cancelled.", border_style="yellow"))
            return

        self.console.print(Panel(title, border_style="green" if not dry_run else "yellow"))

        table = Table(show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Actions", f"{summary.total_actions:,}")
        table.add_row("Files moved", f"{summary.files_moved:,}")
        table.add_row("Files replaced", f"{summary.files_replaced:,}")
        table.add_row("Files renamed", f"{summary.files_renamed:,}")
        table.add_row("Duplicates removed", f"{summary.duplicates_removed:,}")
        table.add_row("Folders moved", f"{summary.dirs_moved:,}")
        table.add_row("Folders removed", f"{summary.dirs_removed:,}")
        table.add_row("Media files deleted", f"{summary.files_deleted:,}")
        if summary.warnings:
            table.add_row("Warnings", f"[yellow]{len(summary.warnings):,}[/yellow]")
        table.add_row("Duration", self._format_duration(summary.duration_seconds))

        self.console.print(table)

    def create_progress_callback(
        self, description: str, total: int
    ) -> Tuple[Progress, Callable[[int], None]]:
        """Create a progress bar and a callback that sets its completed count.

        The returned Progress MUST be used as a context manager by the
        caller.

        Example:
            progress, callback = tui.create_progress_callback("Merging", len(pairs))
            with progress:
                for i, pair in enumerate(pairs):
                    merge(pair)
                    callback(i + 1)
        """
        progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
        )
        task_id = progress.add_task(description, total=total)

        def callback(completed: int) -> None:
            progress.update(task_id, completed=completed)

        return progress, callback

    def _format_duration(self, seconds: float) -> str:
        if seconds < 0:
            seconds = 0
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"

    def _truncate_name(self, name: str, max_length: int = 80) -> str:
        if len(name) > max_length:
            return "..." + name[-(max_length - 3):]
        return name
