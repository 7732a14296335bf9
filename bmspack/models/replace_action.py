"""
ReplaceAction enum for resolving file conflicts while merging directories.
"""

from enum import Enum


class ReplaceAction(Enum):
    """What to do when a moved file already exists at the destination."""
    REPLACE = "replace"                # Overwrite the destination file
    CHECK_REPLACE = "check_replace"    # Drop identical source, rename otherwise
