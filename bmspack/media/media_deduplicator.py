"""Redundant media detection for work folders.

This module provides the MediaDeduplicator class. Given the listing of a
single work folder and a rule table, it decides which inferior media files
are made redundant by a same-stem superior file. It never touches the
filesystem; the caller deletes the returned files.

Example:
    >>> from bmspack.media import MediaDeduplicator, PRESET_ORAJA
    >>> dedup = MediaDeduplicator()
    >>> removals = dedup.evaluate(listing, PRESET_ORAJA.rules)
    >>> [r.target.name for r in removals]
    ['track.avi']
"""

import logging
from collections import defaultdict
from pathlib import PurePath
from typing import Dict, List, Sequence, Set

from bmspack.models import DirEntry, ExtensionRule, MediaRemoval

logger = logging.getLogger("bmspack.media")


class MediaDeduplicator:
    """Computes which media files in a work folder can be removed.

    Attributes:
        video_extension: Extension whose multiplicity is reported by
            find_ambiguous_videos().
    """

    def __init__(self, video_extension: str = "mp4") -> None:
        self.video_extension = video_extension
        self._warnings: List[str] = []

    def evaluate(
        self, entries: Sequence[DirEntry], rules: Sequence[ExtensionRule]
    ) -> List[MediaRemoval]:
        """Compute the deletion set for one work folder.

        For every file whose extension is superior in a rule, each
        same-stem file with one of the rule's inferior extensions is
        scheduled for removal. Empty superior files are never trusted.
        A file is scheduled at most once even if several superior files
        or rules point at it.

        Args:
            entries: Listing of the work folder (directories are ignored).
            rules: Rule table, evaluated in order for every file.

        Returns:
            MediaRemoval entries in the order they were scheduled.
        """
        files: Dict[str, DirEntry] = {
            entry.name: entry for entry in entries if not entry.is_dir
        }
        scheduled: Set[str] = set()
        removals: List[MediaRemoval] = []

        for entry in files.values():
            ext = self.file_extension(entry.name)

            for rule in rules:
                if not rule.is_superior(ext):
                    continue

                if entry.size == 0:
                    self._warn(f"File {entry.path} is empty, skipping")
                    continue

                for inferior_ext in rule.inferior:
                    sibling = files.get(self.sibling_name(entry.name, inferior_ext))
                    if sibling is None or sibling.name in scheduled:
                        continue

                    scheduled.add(sibling.name)
                    removals.append(MediaRemoval(target=sibling.path, reason=entry.path))

        return removals

    def find_ambiguous_videos(self, entries: Sequence[DirEntry]) -> List[str]:
        """Return the video file names when more than one remains.

        Args:
            entries: Listing of the work folder after removals.

        Returns:
            Sorted names of files with video_extension if there are two or
            more of them, otherwise an empty list.
        """
        by_ext: Dict[str, List[str]] = defaultdict(list)
        for entry in entries:
            if entry.is_dir:
                continue
            by_ext[self.file_extension(entry.name)].append(entry.name)

        videos = by_ext.get(self.video_extension, [])
        if len(videos) > 1:
            return sorted(videos)
        return []

    @staticmethod
    def file_extension(name: str) -> str:
        """Lowercased text after the last dot (the whole name if it has none)."""
        return name.rsplit(".", 1)[-1].lower()

    @staticmethod
    def sibling_name(name: str, ext: str) -> str:
        """Replace the extension of `name` with `ext`."""
        return PurePath(name).with_suffix(f".{ext}").name

    def get_warnings(self) -> List[str]:
        """Get warnings recorded during evaluation."""
        return self._warnings.copy()

    def clear_warnings(self) -> None:
        """Clear the list of accumulated warnings."""
        self._warnings.clear()

    def _warn(self, message: str) -> None:
        logger.debug(message)
        self._warnings.append(message)
