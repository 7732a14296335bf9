"""PackLogger for writing reorganization runs to a plain-text log file.

Each run log has a header, a plan section listing every merge pair, an
execution section with per-pair counters, media removals and warnings, and
a closing summary.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, TextIO

from bmspack.models import MediaRemoval, MergePair, MoveOperation, RunSummary


class PackLogger:
    """Logger for reorganization runs with a structured output format.

    Usage:
        with PackLogger(log_path, dry_run=True) as log:
            log.log_header("undo-split", [root_dir])
            log.log_plan(pairs)
            for pair in pairs:
                log.log_move_operation(file_ops.merge_directory(pair.source, pair.target))
            log.log_summary(summary)

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(self, log_file_path: Path, dry_run: bool = False) -> None:
        """Initialize the PackLogger.

        Args:
            log_file_path: Path of the log file to write.
            dry_run: Whether this is a dry run (no actual changes made).

        Raises:
            OSError: If the log file's parent directory is missing or not
                writable.
        """
        self._dry_run = dry_run
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None
        self._execution_started = False
        self._log_file_path = Path(log_file_path)
        self._validate_path()

    def _validate_path(self) -> None:
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")

    def __enter__(self) -> "PackLogger":
        try:
            self._file_handle = open(self._log_file_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_log_path(self) -> Path:
        """Get the path to the log file."""
        return self._log_file_path

    def log_header(self, operation: str, paths: Sequence[Path]) -> None:
        """Write the title, timestamp, mode and the paths the run works on."""
        self._write_separator()
        self._write_line("BMS Pack Organizer - Run Log")
        self._write_separator()
        self._write_line(f"Operation: {operation}")
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        mode = "DRY RUN" if self._dry_run else "LIVE"
        self._write_line(f"Mode: {mode}")
        for path in paths:
            self._write_line(f"Path: {path}")
        self._write_line("")

    def log_plan(self, pairs: Sequence[MergePair]) -> None:
        """Write the list of planned merges."""
        self._write_separator()
        self._write_line("PLAN")
        self._write_separator()
        self._write_line(f"Planned merges: {len(pairs)}")
        for i, pair in enumerate(pairs, start=1):
            self._write_line(f"{i}. {pair.target} <- {pair.source}", indent=2)
        self._write_line("")

    def log_move_operation(self, operation: MoveOperation) -> None:
        """Write the counters of one completed merge."""
        self._start_execution()
        self._write_line(
            f"[{self._format_timestamp(operation.timestamp)}] Merged: "
            f"{operation.target} <- {operation.source}"
        )
        self._write_line(f"Files moved: {operation.files_moved}", indent=4)
        self._write_line(f"Files replaced: {operation.files_replaced}", indent=4)
        self._write_line(f"Files renamed: {operation.files_renamed}", indent=4)
        self._write_line(f"Duplicates removed: {operation.duplicates_removed}", indent=4)
        self._write_line(f"Folders moved: {operation.dirs_moved}", indent=4)
        self._write_line(f"Folders removed: {operation.dirs_removed}", indent=4)

    def log_entry_move(self, source: Path, target: Path) -> None:
        """Write a single moved entry (used by split)."""
        self._start_execution()
        self._write_line(f"Moved: {source} -> {target}", indent=2)

    def log_removals(self, work_dir: Path, removals: Sequence[MediaRemoval]) -> None:
        """Write the media files removed from one work folder."""
        self._start_execution()
        self._write_line(f"Entering: {work_dir}")
        for removal in removals:
            self._write_line(
                f"- Removed {removal.target.name}, because {removal.reason.name} exists",
                indent=4,
            )

    def log_warning(self, message: str) -> None:
        self._write_line(f"! {message}", indent=2)

    def log_cancelled(self) -> None:
        self._write_line("Operation cancelled by user.")
        self._write_line("")

    def log_summary(self, summary: RunSummary) -> None:
        """Write the summary section to the log file."""
        self._write_line("")
        self._write_separator()
        self._write_line("SUMMARY")
        self._write_separator()
        self._write_line(f"Actions: {summary.total_actions}")
        self._write_line(f"Files moved: {summary.files_moved:,}")
        self._write_line(f"Files replaced: {summary.files_replaced:,}")
        self._write_line(f"Files renamed: {summary.files_renamed:,}")
        self._write_line(f"Duplicates removed: {summary.duplicates_removed:,}")
        self._write_line(f"Folders moved: {summary.dirs_moved:,}")
        self._write_line(f"Folders removed: {summary.dirs_removed:,}")
        self._write_line(f"Media files deleted: {summary.files_deleted:,}")

        if summary.warnings:
            self._write_line(f"Total warnings: {len(summary.warnings)}")

        self._write_line(f"Duration: {self._format_duration(summary.duration_seconds)}")
        self._write_line("")
        self._write_line(f"Log file: {self._log_file_path}")
        self._write_separator()

    def _start_execution(self) -> None:
        if self._execution_started:
            return
        self._execution_started = True
        self._write_separator()
        self._write_line("EXECUTION")
        self._write_separator()

    def _format_duration(self, seconds: float) -> str:
        """Format duration as "45s", "5m 23s" or "1h 5m 30s"."""
        total_seconds = int(seconds)

        if total_seconds < 60:
            return f"{total_seconds}s"

        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        secs = total_seconds % 60

        if hours > 0:
            return f"{hours}h {minutes}m {secs}s"
        return f"{minutes}m {secs}s"

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed log file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
