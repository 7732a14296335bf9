"""Directory listing utility.

This module provides the FolderScanner class which lists the direct
children of a directory as DirEntry rows. Listings are sorted by name so
every reorganization walks entries in a stable order.

Example:
    >>> from bmspack.scanning import FolderScanner
    >>> scanner = FolderScanner()
    >>> for entry in scanner.list_directory(Path("/bms/packs")):
    ...     print(entry.name, entry.is_dir, entry.size)
"""

import os
from pathlib import Path
from typing import List

from bmspack.models import DirEntry


class FolderScanner:
    """Lists directory contents for the reorganization operations.

    Unlike a best-effort crawler, listing errors are not swallowed: an
    unreadable or missing directory raises the underlying OSError so the
    calling operation aborts before acting on a partial view.

    Example:
        >>> scanner = FolderScanner()
        >>> works = scanner.subdirectory_names(Path("/bms/packs/Insane"))
    """

    def list_directory(self, dir_path: Path) -> List[DirEntry]:
        """List the direct children of a directory.

        Symlinks are followed when deciding whether an entry is a
        directory and when reading file sizes. Entries whose target cannot
        be stat'ed (broken symlinks) are reported as zero-length files.

        Args:
            dir_path: Directory to list.

        Returns:
            DirEntry list sorted by name.

        Raises:
            NotADirectoryError: If dir_path is not a directory.
            FileNotFoundError: If dir_path does not exist.
            PermissionError: If dir_path cannot be read.
        """
        entries: List[DirEntry] = []

        with os.scandir(dir_path) as it:
            for item in it:
                try:
                    is_dir = item.is_dir()
                    size = 0 if is_dir else item.stat().st_size
                except OSError:
                    is_dir, size = False, 0

                entries.append(
                    DirEntry(name=item.name, path=Path(item.path), is_dir=is_dir, size=size)
                )

        entries.sort(key=lambda entry: entry.name)
        return entries

    def list_subdirectories(self, dir_path: Path) -> List[DirEntry]:
        """List only the direct child directories of dir_path."""
        return [entry for entry in self.list_directory(dir_path) if entry.is_dir]

    def subdirectory_names(self, dir_path: Path) -> List[str]:
        """Names of the direct child directories of dir_path, sorted."""
        return [entry.name for entry in self.list_subdirectories(dir_path)]

    def is_empty(self, dir_path: Path) -> bool:
        """Re-list dir_path and report whether it has no children at all."""
        with os.scandir(dir_path) as it:
            return next(it, None) is None
