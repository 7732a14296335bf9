"""
BMS Pack Organizer - CLI Interface.

A command-line interface for reorganizing large collections of BMS works:
splitting a folder into first-character buckets, merging buckets back,
relocating works between roots and removing redundant media files.

Usage Examples:
    # Split a pack into "<name> [<bucket>]" sibling folders
    bmspack split /bms/Insane

    # Merge the buckets back (asks for confirmation)
    bmspack undo-split /bms/Insane

    # Preview moving all works to another root
    bmspack move-works /bms/incoming /bms/library --dry-run

    # Remove redundant media with the oraja preset, no prompts
    bmspack dedup-media /bms/library --preset oraja --yes --log-file dedup.log
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from bmspack.matching import DuplicateTargetError
from bmspack.media import PRESETS, get_preset
from bmspack.models import RunSummary
from bmspack.orchestration import PackOrchestrator
from bmspack.ui import PackTUI

__version__ = "1.0.0"

# Initialize Typer app
app = typer.Typer(
    name="bmspack",
    help="BMS Pack Organizer - Split, merge, relocate and clean up BMS work folders.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"BMS Pack Organizer v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Install a RichHandler on the package logger.

    Args:
        verbose: Log at DEBUG instead of INFO.
    """
    package_logger = logging.getLogger("bmspack")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        log_time_format="[%H:%M:%S]",
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    package_logger.propagate = False


def validate_base_path(base_path: Path, label: str = "Base path") -> None:
    """
    Validate that the provided path exists and is a readable directory.

    Args:
        base_path: Path to validate.
        label: Name of the argument used in error messages.

    Raises:
        typer.Exit: If validation fails with descriptive error message.
    """
    if not base_path.exists():
        console.print(f"[red]Error:[/red] {label} does not exist: {escape(str(base_path))}")
        raise typer.Exit(1)

    if not base_path.is_dir():
        console.print(f"[red]Error:[/red] {label} is not a directory: {escape(str(base_path))}")
        raise typer.Exit(1)

    if not os.access(base_path, os.R_OK):
        console.print(
            f"[red]Error:[/red] Permission denied - cannot read: {escape(str(base_path))}"
        )
        raise typer.Exit(1)


def build_orchestrator(
    dry_run: bool,
    assume_yes: bool,
    log_file: Optional[Path],
    verbose: bool,
) -> PackOrchestrator:
    """Configure logging and create an orchestrator for one command."""
    configure_logging(verbose)
    if dry_run:
        console.print("[yellow][DRY RUN MODE][/yellow] No files will be modified.\n")

    return PackOrchestrator(
        dry_run=dry_run,
        verbose=verbose,
        assume_yes=assume_yes,
        log_file_path=log_file,
        tui=PackTUI(console=console),
    )


def run_operation(action: Callable[[], RunSummary], log_file: Optional[Path]) -> None:
    """
    Run one orchestrator operation and map failures to exit codes.

    Args:
        action: Zero-argument callable performing the operation.
        log_file: Log file path, reported after a successful run.

    Raises:
        typer.Exit: 1 on precondition, ambiguity or I/O errors, 130 on Ctrl+C.
    """
    try:
        summary = action()

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except DuplicateTargetError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print("[dim]No folders were merged.[/dim]")
        raise typer.Exit(1)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except PermissionError as e:
        console.print(f"[red]Error:[/red] Permission denied - {escape(str(e))}")
        raise typer.Exit(1)

    except OSError as e:
        # Check for disk full error
        if getattr(e, "errno", None) == 28:
            console.print("[red]Error:[/red] Disk full - operation aborted.")
            console.print(
                "[dim]Some works may have been partially moved. "
                "Please free up disk space and retry.[/dim]"
            )
        else:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if log_file and not summary.cancelled:
        console.print(f"\n[dim]Log written to: {escape(str(log_file))}[/dim]")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """BMS Pack Organizer - Split, merge, relocate and clean up BMS work folders."""
    pass


DRY_RUN_OPTION = typer.Option(
    False, "--dry-run", "-n", help="Simulate the operation without making changes."
)
YES_OPTION = typer.Option(False, "--yes", "-y", help="Answer yes to every confirmation.")
LOG_FILE_OPTION = typer.Option(None, "--log-file", "-l", help="Path for log file output.")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-V", help="Enable verbose output.")


@app.command()
def split(
    root: Path = typer.Argument(..., help="Folder whose children are split into buckets."),
    dry_run: bool = DRY_RUN_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Split a folder into first-character bucket folders.

    Every child of ROOT is moved into a sibling folder named
    "ROOT [<bucket>]", e.g. "Insane [ABCD]" or "Insane [0-9]".
    """
    validate_base_path(root)
    orchestrator = build_orchestrator(dry_run, False, log_file, verbose)
    run_operation(lambda: orchestrator.split_by_first_char(root), log_file)


@app.command("undo-split")
def undo_split(
    root: Path = typer.Argument(..., help="Folder to merge the bucket folders back into."),
    dry_run: bool = DRY_RUN_OPTION,
    yes: bool = YES_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Merge "ROOT [<bucket>]" sibling folders back into ROOT.
    """
    orchestrator = build_orchestrator(dry_run, yes, log_file, verbose)
    run_operation(lambda: orchestrator.undo_split(root), log_file)


@app.command("merge-split")
def merge_split(
    root: Path = typer.Argument(..., help="Folder containing bucketed child folders."),
    dry_run: bool = DRY_RUN_OPTION,
    yes: bool = YES_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Merge "<name> [<bucket>]" children of ROOT into their "<name>" sibling.

    Aborts without merging anything if two bucket folders share the same
    destination.
    """
    validate_base_path(root)
    orchestrator = build_orchestrator(dry_run, yes, log_file, verbose)
    run_operation(lambda: orchestrator.merge_split_folders(root), log_file)


@app.command("move-works")
def move_works(
    root_from: Path = typer.Argument(..., help="Root to move works out of."),
    root_to: Path = typer.Argument(..., help="Root to move works into."),
    dry_run: bool = DRY_RUN_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Move every work folder of FROM into TO, merging folders that already exist.
    """
    validate_base_path(root_from, label="Source path")
    orchestrator = build_orchestrator(dry_run, False, log_file, verbose)
    run_operation(lambda: orchestrator.move_works(root_from, root_to), log_file)


@app.command("move-out")
def move_out(
    root: Path = typer.Argument(..., help="Folder containing collection folders."),
    dry_run: bool = DRY_RUN_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Lift works out of their collection folders into ROOT.

    Collection folders left empty are removed.
    """
    validate_base_path(root)
    orchestrator = build_orchestrator(dry_run, False, log_file, verbose)
    run_operation(lambda: orchestrator.move_out_works(root), log_file)


@app.command("merge-same-name")
def merge_same_name(
    root_from: Path = typer.Argument(..., help="Root whose folders are merged away."),
    root_to: Path = typer.Argument(..., help="Root whose folders receive the merge."),
    dry_run: bool = DRY_RUN_OPTION,
    yes: bool = YES_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Merge each folder of FROM into the first folder of TO whose name contains it.
    """
    validate_base_path(root_from, label="Source path")
    validate_base_path(root_to, label="Target path")
    orchestrator = build_orchestrator(dry_run, yes, log_file, verbose)
    run_operation(
        lambda: orchestrator.move_works_with_same_name(root_from, root_to), log_file
    )


@app.command("dedup-media")
def dedup_media(
    root: Path = typer.Argument(..., help="Folder whose subfolders are works."),
    preset: Optional[str] = typer.Option(
        None,
        "--preset",
        "-p",
        help="Rule preset name (see 'bmspack presets'). Prompts when omitted.",
    ),
    dry_run: bool = DRY_RUN_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Remove media files made redundant by a better format in the same work.
    """
    validate_base_path(root)

    selected = None
    if preset is not None:
        try:
            selected = get_preset(preset)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--preset")

    orchestrator = build_orchestrator(dry_run, False, log_file, verbose)
    run_operation(
        lambda: orchestrator.remove_unneed_media_files(root, preset=selected), log_file
    )


@app.command()
def presets() -> None:
    """
    List the media dedup presets.
    """
    table = Table(title="Media Dedup Presets", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="cyan", width=3)
    table.add_column("Preset", style="magenta")
    table.add_column("Rules", style="white")

    for idx, rule_preset in enumerate(PRESETS):
        table.add_row(str(idx), rule_preset.name, escape(rule_preset.describe()))

    console.print(table)


if __name__ == "__main__":
    app()
