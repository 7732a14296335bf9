"""
Core data models for the BMS pack organizer.

This module contains the following dataclasses:
- DirEntry: One row of a directory listing
- MergePair: A pending folder-to-folder merge
- ExtensionRule: Superior/inferior extension pair used by media dedup
- RulePreset: Named, ordered collection of ExtensionRules
- MediaRemoval: A file scheduled for deletion and the file that supersedes it
- ReplacePolicy: Conflict policy used when two trees hold the same file
- MoveOperation: Counters for a single directory merge
- RunSummary: Summary of one top-level reorganization run
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple

from .replace_action import ReplaceAction


@dataclass
class DirEntry:
    """One direct child of a listed directory."""
    name: str                         # Base name
    path: Path                        # Full path
    is_dir: bool                      # Directory (symlinks followed)
    size: int = 0                     # Bytes for files, 0 for directories


@dataclass
class MergePair:
    """A pending merge of one folder's contents into another."""
    source: Path                      # Folder whose entries are moved
    target: Path                      # Folder receiving the entries

    @property
    def source_name(self) -> str:
        return self.source.name

    @property
    def target_name(self) -> str:
        return self.target.name


@dataclass(frozen=True)
class ExtensionRule:
    """Files with a superior extension make same-stem inferior files redundant."""
    superior: Tuple[str, ...]         # Lowercase extensions, no dot
    inferior: Tuple[str, ...]         # Checked in order

    def is_superior(self, ext: str) -> bool:
        return ext.lower() in self.superior


@dataclass(frozen=True)
class RulePreset:
    """A named dedup rule table. Rules are evaluated in order."""
    name: str
    rules: Tuple[ExtensionRule, ...]

    def describe(self) -> str:
        """Render the rules as `mp4 > avi, wmv; flac > wav`."""
        return "; ".join(
            f"{'/'.join(rule.superior)} > {', '.join(rule.inferior)}"
            for rule in self.rules
        )


@dataclass(frozen=True)
class MediaRemoval:
    """An inferior media file scheduled for removal."""
    target: Path                      # File to delete
    reason: Path                      # Superior file that makes it redundant


@dataclass(frozen=True)
class ReplacePolicy:
    """Per-extension action for files present on both sides of a merge."""
    by_extension: Dict[str, ReplaceAction] = field(default_factory=dict)
    default: ReplaceAction = ReplaceAction.REPLACE

    def action_for(self, file_name: str) -> ReplaceAction:
        ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
        return self.by_extension.get(ext, self.default)


@dataclass
class MoveOperation:
    """Tracks the results of merging one directory into another."""
    source: Path                      # Merged-from folder
    target: Path                      # Merged-into folder
    dry_run: bool                     # Dry run mode flag
    timestamp: datetime               # Operation start time
    files_moved: int = 0              # Files moved to a free name
    files_replaced: int = 0           # Destination files overwritten
    files_renamed: int = 0            # Files moved under a numbered name
    duplicates_removed: int = 0       # Identical source files deleted
    dirs_moved: int = 0               # Whole directories renamed into place
    dirs_removed: int = 0             # Emptied source directories removed


@dataclass
class RunSummary:
    """Summary of one top-level operation returned by PackOrchestrator."""
    operation: str                    # Operation name, e.g. "split"
    total_actions: int = 0            # Merge pairs / moves executed
    files_moved: int = 0
    files_replaced: int = 0
    files_renamed: int = 0
    duplicates_removed: int = 0
    dirs_moved: int = 0
    dirs_removed: int = 0
    files_deleted: int = 0            # Media files removed by dedup
    warnings: List[str] = field(default_factory=list)
    cancelled: bool = False           # User declined the confirmation
    duration_seconds: float = 0.0

    def add_operation(self, operation: MoveOperation) -> None:
        """Fold the counters of one MoveOperation into this summary."""
        self.total_actions += 1
        self.files_moved += operation.files_moved
        self.files_replaced += operation.files_replaced
        self.files_renamed += operation.files_renamed
        self.duplicates_removed += operation.duplicates_removed
        self.dirs_moved += operation.dirs_moved
        self.dirs_removed += operation.dirs_removed
