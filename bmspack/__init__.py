"""BMS Pack Organizer.

A Python application for reorganizing large collections of BMS works:
first-character bucket splitting, bucket merging, relocating works
between roots and removing redundant media files.
"""

__version__ = "1.0.0"

from .models import (
    BucketLabel,
    DirEntry,
    ExtensionRule,
    MediaRemoval,
    MergePair,
    MoveOperation,
    ReplaceAction,
    ReplacePolicy,
    RulePreset,
    RunSummary,
)

__all__ = [
    "__version__",
    "BucketLabel",
    "DirEntry",
    "ExtensionRule",
    "MediaRemoval",
    "MergePair",
    "MoveOperation",
    "ReplaceAction",
    "ReplacePolicy",
    "RulePreset",
    "RunSummary",
]


def main() -> None:
    """Entry point for the bmspack CLI application.

    This function is called when the `bmspack` command is invoked after
    package installation via pip. It imports and runs the Typer app
    from the bmspack.cli module.
    """
    from bmspack.cli import app
    app()
