"""File operations package for bmspack.

This package provides the FileOperations class: moving and deleting single
entries and merging one directory tree into another with the update-pack
conflict policy.

Example:
    >>> from bmspack.operations import FileOperations
    >>> ops = FileOperations()
    >>> result = ops.merge_directory(Path("Pack [ABCD]"), Path("Pack"))
    >>> print(f"Moved: {result.files_moved}, Renamed: {result.files_renamed}")
"""

from .file_operations import CHART_EXTENSIONS, UPDATE_PACK_POLICY, FileOperations

__all__ = ["CHART_EXTENSIONS", "FileOperations", "UPDATE_PACK_POLICY"]
