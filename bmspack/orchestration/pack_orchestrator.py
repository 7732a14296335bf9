"""PackOrchestrator for coordinating pack reorganization runs.

This module provides the PackOrchestrator class. Each public method is one
top-level operation: it lists a directory tree, asks the matching and
media components for a decision, optionally confirms with the user through
PackTUI, and then drives FileOperations. Every method returns a RunSummary.

Example:
    from bmspack.orchestration import PackOrchestrator
    from pathlib import Path

    orchestrator = PackOrchestrator(dry_run=True)
    orchestrator.split_by_first_char(Path("/bms/Insane"))
    orchestrator.undo_split(Path("/bms/Insane"))
"""

import logging
import sys
import time
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from rich.markup import escape

from bmspack.matching import BucketClassifier, PairMatcher
from bmspack.media import PRESETS, MediaDeduplicator
from bmspack.models import DirEntry, MergePair, RulePreset, RunSummary
from bmspack.operations import FileOperations
from bmspack.orchestration.pack_logger import PackLogger
from bmspack.scanning import FolderScanner
from bmspack.ui import PackTUI

logger = logging.getLogger("bmspack.orchestration")


class PackOrchestrator:
    """Orchestrates split, merge, move and media dedup operations.

    Precondition failures raise ValueError before anything on disk is
    touched. Ambiguous merge plans raise DuplicateTargetError (also a
    ValueError). OSErrors from individual moves propagate and abort the
    rest of the run; completed moves are not rolled back.

    Attributes:
        dry_run: Whether to simulate operations without making changes.
        verbose: Whether to display additional diagnostics.
        assume_yes: Answer every confirmation prompt with yes.
        log_file_path: Optional path for a per-run log file.
    """

    def __init__(
        self,
        dry_run: bool = False,
        verbose: bool = False,
        assume_yes: bool = False,
        log_file_path: Optional[Path] = None,
        tui: Optional[PackTUI] = None,
        file_ops: Optional[FileOperations] = None,
        scanner: Optional[FolderScanner] = None,
    ) -> None:
        """Initialize the PackOrchestrator.

        Args:
            dry_run: If True, decide and report everything but change nothing.
            verbose: If True, display additional details during execution.
            assume_yes: If True, skip confirmation prompts.
            log_file_path: If given, each run is written to this log file.
            tui: Terminal UI used for prompts and output.
            file_ops: Move/delete primitive; defaults to one honouring dry_run.
            scanner: Directory lister.
        """
        self.dry_run = dry_run
        self.verbose = verbose
        self.assume_yes = assume_yes
        self.log_file_path = log_file_path

        self._tui = tui or PackTUI()
        self._file_ops = file_ops or FileOperations(dry_run=dry_run)
        self._scanner = scanner or FolderScanner()
        self._classifier = BucketClassifier()
        self._matcher = PairMatcher()
        self._deduplicator = MediaDeduplicator()

    @property
    def tui(self) -> PackTUI:
        return self._tui

    def split_by_first_char(self, root_dir: Path) -> RunSummary:
        """Move every child of `root_dir` into "<root> [<bucket>]" siblings.

        Args:
            root_dir: Directory whose direct children are distributed.

        Returns:
            RunSummary with one action per moved child.

        Raises:
            ValueError: If root_dir has no name, is not a directory, or
                already ends with ']'.
        """
        start_time = time.time()
        summary = RunSummary(operation="split")

        root_name = root_dir.name
        if not root_name:
            raise ValueError(f"Invalid directory name: {root_dir}")
        if not root_dir.is_dir():
            raise ValueError(f"{root_dir} is not a directory")
        if str(root_dir).endswith("]"):
            raise ValueError(f"{root_dir} ends with ']'. Aborting.")

        parent_dir = root_dir.parent
        entries = self._scanner.list_directory(root_dir)

        with self._run_log(summary.operation, [root_dir]) as log:
            progress, callback = self._tui.create_progress_callback(
                f"Splitting {root_name}", len(entries)
            )
            with progress:
                for idx, entry in enumerate(entries, start=1):
                    label = self._classifier.classify(entry.name)
                    bucket_dir = parent_dir / self._classifier.bucket_dir_name(root_name, label)
                    self._file_ops.ensure_dir(bucket_dir)

                    target = bucket_dir / entry.name
                    self._file_ops.move_entry(entry.path, target)
                    logger.info(f"Moved {entry.name} -> {bucket_dir.name}")

                    summary.total_actions += 1
                    if entry.is_dir:
                        summary.dirs_moved += 1
                    else:
                        summary.files_moved += 1
                    if log is not None:
                        log.log_entry_move(entry.path, target)
                    callback(idx)

            return self._finish(summary, start_time, log)

    def undo_split(self, root_dir: Path) -> RunSummary:
        """Merge "<root> [...]" siblings of `root_dir` back into it.

        Raises:
            ValueError: If root_dir has no name or its parent is missing.
        """
        root_name = root_dir.name
        if not root_name:
            raise ValueError(f"Invalid directory name: {root_dir}")

        parent_dir = root_dir.parent
        if not parent_dir.is_dir():
            raise ValueError(f"Parent directory does not exist: {parent_dir}")

        sibling_names = self._scanner.subdirectory_names(parent_dir)
        pairs = self._matcher.find_undo_split_pairs(root_dir, sibling_names)

        return self._confirm_and_merge(
            "undo-split",
            [root_dir],
            pairs,
            prompt=f"Found {len(pairs)} folders to merge. Confirm?",
        )

    def merge_split_folders(self, root_dir: Path) -> RunSummary:
        """Merge bucketed children of `root_dir` into their base-name sibling.

        Raises:
            ValueError: If root_dir is not a directory.
            DuplicateTargetError: If two bucketed folders would merge into
                the same base folder. No merge is performed.
        """
        if not root_dir.is_dir():
            raise ValueError(f"{root_dir} is not a directory")

        self._matcher.clear_warnings()
        dir_names = self._scanner.subdirectory_names(root_dir)
        pairs = self._matcher.find_split_merge_pairs(root_dir, dir_names)

        warnings = self._matcher.get_warnings()
        for warning in warnings:
            self._tui.display_warning(warning)

        self._matcher.check_duplicate_targets(pairs)

        return self._confirm_and_merge(
            "merge-split",
            [root_dir],
            pairs,
            prompt=f"There are {len(pairs)} actions. Do transferring?",
            warnings=warnings,
        )

    def move_works(self, root_from: Path, root_to: Path) -> RunSummary:
        """Move every work folder of `root_from` into `root_to`, auto-merging.

        When `root_from` has no subdirectories it is treated as a single
        work and merged into `root_to` itself. Moving a root onto itself is
        a no-op.

        Raises:
            ValueError: If root_from is not a directory.
        """
        start_time = time.time()
        summary = RunSummary(operation="move-works")

        if root_from.resolve() == root_to.resolve():
            logger.info(f"Source and destination are the same: {root_from}")
            return self._finish(summary, start_time, None)

        if not root_from.is_dir():
            raise ValueError(f"Source path does not exist or is not a directory: {root_from}")

        works = self._scanner.list_subdirectories(root_from)

        with self._run_log(summary.operation, [root_from, root_to]) as log:
            for work in works:
                logger.info(f"Moving: {work.name}")
                operation = self._file_ops.merge_directory(work.path, root_to / work.name)
                summary.add_operation(operation)
                if log is not None:
                    log.log_move_operation(operation)

            if works:
                self._tui.display_message(f"Moved {len(works)} works.")
            else:
                operation = self._file_ops.merge_directory(root_from, root_to)
                summary.add_operation(operation)
                if log is not None:
                    log.log_move_operation(operation)

            return self._finish(summary, start_time, log)

    def move_out_works(self, root_dir: Path) -> RunSummary:
        """Lift works one level up out of the collection folders in `root_dir`.

        Each grandchild directory is merged into `root_dir/<name>`. A
        collection folder is removed when it is empty afterwards.

        Raises:
            ValueError: If root_dir is not a directory.
        """
        start_time = time.time()
        summary = RunSummary(operation="move-out")

        if not root_dir.is_dir():
            raise ValueError(f"{root_dir} is not a directory")

        collections = self._scanner.list_subdirectories(root_dir)

        with self._run_log(summary.operation, [root_dir]) as log:
            for collection in collections:
                for work in self._scanner.list_subdirectories(collection.path):
                    operation = self._file_ops.merge_directory(work.path, root_dir / work.name)
                    summary.add_operation(operation)
                    if log is not None:
                        log.log_move_operation(operation)

                if self._is_emptied(collection.path):
                    self._file_ops.delete_empty_dir(collection.path)
                    summary.dirs_removed += 1
                    logger.info(f"Removed empty folder: {collection.name}")

            return self._finish(summary, start_time, log)

    def move_works_with_same_name(self, root_from: Path, root_to: Path) -> RunSummary:
        """Merge each folder of `root_from` into the first folder of `root_to` containing its name.

        Raises:
            ValueError: If either root is not a directory.
        """
        if not root_from.is_dir():
            raise ValueError(f"Source path does not exist or is not a directory: {root_from}")
        if not root_to.is_dir():
            raise ValueError(f"Target path does not exist or is not a directory: {root_to}")

        from_names = self._scanner.subdirectory_names(root_from)
        to_names = self._scanner.subdirectory_names(root_to)
        pairs = self._matcher.find_same_name_pairs(root_from, from_names, root_to, to_names)

        if self.verbose:
            self._show_unmatched(from_names, to_names, pairs)

        return self._confirm_and_merge(
            "merge-same-name",
            [root_from, root_to],
            pairs,
            prompt="Merge?",
        )

    def remove_unneed_media_files(
        self, root_dir: Path, preset: Optional[RulePreset] = None
    ) -> RunSummary:
        """Delete redundant media files from every work folder in `root_dir`.

        Args:
            root_dir: Directory whose subdirectories are work folders.
            preset: Rule table to apply. When None the user picks one.

        Raises:
            ValueError: If root_dir is not a directory.
        """
        start_time = time.time()
        summary = RunSummary(operation="dedup-media")

        if not root_dir.is_dir():
            raise ValueError(f"{root_dir} is not a directory")

        if preset is None:
            selection = self._tui.select_preset(PRESETS)
            preset = PRESETS[selection] if 0 <= selection < len(PRESETS) else PRESETS[0]
        self._tui.display_message(f"Selected: {preset.name} ({escape(preset.describe())})")

        with self._run_log(summary.operation, [root_dir]) as log:
            for work in self._scanner.list_subdirectories(root_dir):
                entries = self._scanner.list_directory(work.path)

                self._deduplicator.clear_warnings()
                removals = self._deduplicator.evaluate(entries, preset.rules)
                for warning in self._deduplicator.get_warnings():
                    self._record_warning(summary, log, warning)

                if removals:
                    self._tui.display_removals(work.path, removals)
                    for removal in removals:
                        self._file_ops.delete_file(removal.target)
                        summary.files_deleted += 1
                    summary.total_actions += 1
                    if log is not None:
                        log.log_removals(work.path, removals)

                if self.dry_run:
                    removed = {removal.target for removal in removals}
                    remaining = [entry for entry in entries if entry.path not in removed]
                else:
                    remaining = self._scanner.list_directory(work.path)

                videos = self._deduplicator.find_ambiguous_videos(remaining)
                if videos:
                    self._record_warning(
                        summary,
                        log,
                        f"{work.path} has more than 1 {self._deduplicator.video_extension} files! {videos}",
                    )

            return self._finish(summary, start_time, log)

    def _confirm_and_merge(
        self,
        operation: str,
        paths: Sequence[Path],
        pairs: List[MergePair],
        prompt: str,
        warnings: Sequence[str] = (),
    ) -> RunSummary:
        """List `pairs`, confirm once, then merge each pair in order."""
        start_time = time.time()
        summary = RunSummary(operation=operation)
        summary.warnings.extend(warnings)

        with self._run_log(operation, paths) as log:
            if log is not None:
                for warning in warnings:
                    log.log_warning(warning)

            self._tui.display_pairs(operation, pairs)
            if not pairs:
                logger.info("No folders to merge found.")
                return self._finish(summary, start_time, log)

            if log is not None:
                log.log_plan(pairs)

            if not self._confirm(prompt):
                logger.info("Operation cancelled.")
                summary.cancelled = True
                if log is not None:
                    log.log_cancelled()
                return self._finish(summary, start_time, log)

            progress, callback = self._tui.create_progress_callback(
                f"Merging {len(pairs)} folders", len(pairs)
            )
            with progress:
                for idx, pair in enumerate(pairs, start=1):
                    logger.info(f"Merging: {pair.target} <- {pair.source}")
                    move = self._file_ops.merge_directory(pair.source, pair.target)
                    summary.add_operation(move)
                    if log is not None:
                        log.log_move_operation(move)
                    callback(idx)

            return self._finish(summary, start_time, log)

    def _confirm(self, prompt: str) -> bool:
        if self.assume_yes:
            return True
        return self._tui.confirm(prompt)

    def _is_emptied(self, dir_path: Path) -> bool:
        """Whether `dir_path` is empty now (or, in dry-run, would be)."""
        if not self.dry_run:
            return self._scanner.is_empty(dir_path)

        entries: List[DirEntry] = self._scanner.list_directory(dir_path)
        return all(entry.is_dir for entry in entries)

    def _show_unmatched(
        self, from_names: Sequence[str], to_names: Sequence[str], pairs: Sequence[MergePair]
    ) -> None:
        matched = {pair.source_name for pair in pairs}
        for name in from_names:
            if name in matched:
                continue
            suggestion = self._matcher.suggest_closest(name, to_names)
            if suggestion is None:
                self._tui.display_message(f"[dim]No match for {escape(name)}[/dim]")
            else:
                candidate, score = suggestion
                self._tui.display_message(
                    f"[dim]No match for {escape(name)} "
                    f"(closest: {escape(candidate)}, {score:.0f}%)[/dim]"
                )

    def _record_warning(
        self,
        summary: RunSummary,
        log: Optional[PackLogger],
        message: str,
    ) -> None:
        summary.warnings.append(message)
        self._tui.display_warning(message)
        if log is not None:
            log.log_warning(message)

    def _show_hash_stats(self) -> None:
        stats = self._file_ops.file_hasher.get_cache_stats()
        if stats["misses"] == 0:
            return
        self._tui.display_message(
            f"[dim]Chart hashes: {stats['misses']} computed, {stats['hits']} from cache[/dim]"
        )

    @contextmanager
    def _run_log(self, operation: str, paths: Sequence[Path]) -> Iterator[Optional[PackLogger]]:
        """Open the run log file if one was requested; yield None otherwise."""
        if self.log_file_path is None:
            yield None
            return

        with ExitStack() as stack:
            try:
                run_log = stack.enter_context(
                    PackLogger(self.log_file_path, dry_run=self.dry_run)
                )
            except OSError as e:
                # Logging is non-critical
                print(f"Warning: Could not create log file: {e}", file=sys.stderr)
                run_log = None
            else:
                run_log.log_header(operation, paths)
            yield run_log

    def _finish(
        self, summary: RunSummary, start_time: float, log: Optional[PackLogger]
    ) -> RunSummary:
        summary.duration_seconds = time.time() - start_time
        self._tui.display_summary(summary, self.dry_run)
        if self.verbose:
            self._show_hash_stats()
        if log is not None:
            log.log_summary(summary)
            if self.verbose:
                self._tui.display_message(f"[dim]Log file: {escape(str(log.get_log_path()))}[/dim]")
        return summary
