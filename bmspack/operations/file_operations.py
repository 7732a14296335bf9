"""
File operations module for the BMS pack organizer.

This module contains the FileOperations class: the single-entry primitives
(move, delete) and the recursive directory merge every reorganization is
built on.
"""

import errno
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Set

from bmspack.models import MoveOperation, ReplaceAction, ReplacePolicy
from bmspack.scanning import FileHasher

# Configure module logger
logger = logging.getLogger("bmspack.operations")

# Chart and text files are never overwritten blindly
CHART_EXTENSIONS = ("bms", "bme", "bml", "pms", "bmson", "txt")

UPDATE_PACK_POLICY = ReplacePolicy(
    by_extension={ext: ReplaceAction.CHECK_REPLACE for ext in CHART_EXTENSIONS},
    default=ReplaceAction.REPLACE,
)


class FileOperations:
    """
    Moves, deletes and merges filesystem entries for pack reorganization.

    Errors are not collected: any OSError raised by a single move or
    delete propagates to the caller and aborts the remaining work.
    Entries already moved stay where they are. All operations support
    dry-run mode, in which decisions are made and logged but nothing on
    disk changes. Dry-run remembers the moves and directories it has
    simulated, so later calls on the same instance see the planned layout.
    """

    def __init__(self, file_hasher: Optional[FileHasher] = None, dry_run: bool = False) -> None:
        """
        Create a FileOperations instance.

        Parameters:
            file_hasher (FileHasher): Used to compare chart files that exist on both sides of a merge.
            dry_run (bool): If True, simulate operations without making filesystem changes.
        """
        self.file_hasher = file_hasher if file_hasher is not None else FileHasher()
        self.dry_run = dry_run
        self._planned_dirs: Set[Path] = set()
        # Simulated destination -> on-disk path still holding its content
        self._planned_moves: Dict[Path, Path] = {}

    def ensure_dir(self, dir_path: Path) -> bool:
        """
        Create `dir_path` (and parents) if it does not exist.

        Returns:
            bool: True if the directory was (or in dry-run would be) created.
        """
        if self._is_dir(dir_path):
            return False

        if self.dry_run:
            logger.info(f"[DRY RUN] Would create directory: {dir_path}")
            self._planned_dirs.add(dir_path)
            return True

        dir_path.mkdir(parents=True)
        logger.debug(f"Created directory: {dir_path}")
        return True

    def move_entry(self, source: Path, dest: Path) -> None:
        """
        Rename one file or directory, creating missing parents of `dest`. Never overwrites.

        Raises:
            FileExistsError: If `dest` already exists.
            OSError: If the rename fails (including cross-device moves).
        """
        if self._exists(dest):
            raise FileExistsError(errno.EEXIST, "Destination already exists", str(dest))

        if self.dry_run:
            logger.info(f"[DRY RUN] Would move: {source} -> {dest}")
            self._planned_moves[dest] = self._on_disk(source)
            return

        dest.parent.mkdir(parents=True, exist_ok=True)
        os.rename(source, dest)
        logger.debug(f"Moved: {source} -> {dest}")

    def delete_file(self, file_path: Path) -> None:
        """
        Delete a single file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if self.dry_run:
            if not self._exists(file_path):
                raise FileNotFoundError(errno.ENOENT, "No such file", str(file_path))
            logger.info(f"[DRY RUN] Would delete file: {file_path}")
            return

        file_path.unlink()
        logger.debug(f"Deleted file: {file_path}")

    def delete_empty_dir(self, dir_path: Path) -> None:
        """
        Delete an empty directory.

        Raises:
            OSError: If the directory is missing or not empty.
        """
        if self.dry_run:
            logger.info(f"[DRY RUN] Would remove directory: {dir_path}")
            return

        dir_path.rmdir()
        logger.debug(f"Removed empty directory: {dir_path}")

    def merge_directory(self, source_dir: Path, dest_dir: Path) -> MoveOperation:
        """
        Move every entry of `source_dir` into `dest_dir`, merging recursively.

        When `dest_dir` does not exist, `source_dir` is simply renamed to it.
        Otherwise entries are moved one by one, sub-directories present on
        both sides are merged, and files present on both sides are resolved
        with UPDATE_PACK_POLICY. `source_dir` is removed once it is empty.

        Parameters:
            source_dir (Path): Directory whose contents are moved.
            dest_dir (Path): Directory receiving the contents.

        Returns:
            MoveOperation: Counters for everything moved, replaced, renamed or removed.

        Raises:
            NotADirectoryError: If `source_dir` is not a directory or `dest_dir` exists as a file.
            OSError: Any failure of an individual move or delete.
        """
        operation = MoveOperation(
            source=source_dir,
            target=dest_dir,
            dry_run=self.dry_run,
            timestamp=datetime.now(),
        )

        if source_dir.resolve() == dest_dir.resolve():
            return operation

        if not self._is_dir(source_dir):
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(source_dir))
        if self._exists(dest_dir) and not self._is_dir(dest_dir):
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(dest_dir))

        self._merge_tree(source_dir, dest_dir, operation)
        return operation

    def _merge_tree(self, source_dir: Path, dest_dir: Path, operation: MoveOperation) -> None:
        if not self._exists(dest_dir):
            self.move_entry(source_dir, dest_dir)
            operation.dirs_moved += 1
            return

        for name in sorted(child.name for child in self._on_disk(source_dir).iterdir()):
            entry = source_dir / name
            target = dest_dir / name

            if self._is_dir(entry):
                if not self._exists(target):
                    self.move_entry(entry, target)
                    operation.dirs_moved += 1
                elif self._is_dir(target):
                    self._merge_tree(entry, target, operation)
                else:
                    self._move_renamed(entry, target, operation)
                continue

            if not self._exists(target):
                self.move_entry(entry, target)
                operation.files_moved += 1
            elif self._is_dir(target):
                self._move_renamed(entry, target, operation)
            else:
                self._resolve_conflict(entry, target, operation)

        if self.dry_run:
            self.delete_empty_dir(source_dir)
            operation.dirs_removed += 1
            return

        if not any(source_dir.iterdir()):
            self.delete_empty_dir(source_dir)
            operation.dirs_removed += 1

    def _resolve_conflict(self, source_file: Path, dest_file: Path, operation: MoveOperation) -> None:
        """
        Apply UPDATE_PACK_POLICY to a file present on both sides.
        """
        action = UPDATE_PACK_POLICY.action_for(source_file.name)

        if action == ReplaceAction.REPLACE:
            if self.dry_run:
                logger.info(f"[DRY RUN] Would replace: {dest_file} <- {source_file}")
            else:
                os.replace(source_file, dest_file)
                logger.debug(f"Replaced: {dest_file} <- {source_file}")
            operation.files_replaced += 1
            return

        if self.file_hasher.files_identical(self._on_disk(source_file), self._on_disk(dest_file)):
            self.delete_file(source_file)
            operation.duplicates_removed += 1
            return

        self._move_renamed(source_file, dest_file, operation)

    def _move_renamed(self, source: Path, dest: Path, operation: MoveOperation) -> None:
        """
        Move `source` next to `dest` under the first free "<stem>.<n><suffix>" name.
        """
        renamed = self._free_name(dest)
        self.move_entry(source, renamed)
        operation.files_renamed += 1
        logger.info(f"Kept both copies: {source.name} -> {renamed.name}")

    def _free_name(self, path: Path) -> Path:
        index = 1
        while True:
            candidate = path.with_name(f"{path.stem}.{index}{path.suffix}")
            if not self._exists(candidate):
                return candidate
            index += 1

    def _on_disk(self, path: Path) -> Path:
        """Where the content planned for `path` currently lives (identity outside dry-run)."""
        if not self._planned_moves:
            return path

        for ancestor in (path, *path.parents):
            origin = self._planned_moves.get(ancestor)
            if origin is not None:
                return origin / path.relative_to(ancestor)
        return path

    def _exists(self, path: Path) -> bool:
        real = self._on_disk(path)
        return real.exists() or real.is_symlink() or real in self._planned_dirs

    def _is_dir(self, path: Path) -> bool:
        """Directory test that treats symlinks as plain entries."""
        real = self._on_disk(path)
        return (real.is_dir() and not real.is_symlink()) or real in self._planned_dirs
