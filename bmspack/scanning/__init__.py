"""Filesystem scanning package for bmspack.

- FolderScanner: Lists direct children of a directory as DirEntry rows.
- FileHasher: SHA256 content comparison used when merging chart files.

Example:
    >>> from bmspack.scanning import FileHasher, FolderScanner
    >>> scanner = FolderScanner()
    >>> works = scanner.list_subdirectories(Path("/bms/packs"))
"""

from .file_hasher import FileHasher
from .folder_scanner import FolderScanner

__all__ = ["FileHasher", "FolderScanner"]
