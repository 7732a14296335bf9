"""
Models package for the BMS pack organizer.

This package provides convenient imports for all data models:
- BucketLabel: Enum of first-character bucket tags
- ReplaceAction: Enum of merge conflict actions
- DirEntry: Directory listing row
- MergePair: Pending folder merge
- ExtensionRule / RulePreset: Media dedup rule tables
- MediaRemoval: Scheduled media deletion
- ReplacePolicy: Merge conflict policy
- MoveOperation: Single merge statistics
- RunSummary: Top-level run summary
"""

from .bucket_label import BucketLabel
from .replace_action import ReplaceAction
from .data_models import (
    DirEntry,
    ExtensionRule,
    MediaRemoval,
    MergePair,
    MoveOperation,
    ReplacePolicy,
    RulePreset,
    RunSummary,
)

__all__ = [
    "BucketLabel",
    "ReplaceAction",
    "DirEntry",
    "ExtensionRule",
    "MediaRemoval",
    "MergePair",
    "MoveOperation",
    "ReplacePolicy",
    "RulePreset",
    "RunSummary",
]
