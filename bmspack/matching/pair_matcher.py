"""Merge pair discovery for split, bucketed and same-name folders.

This module provides the PairMatcher class which decides which folders
should be merged into which. Every method works on plain name lists so the
decisions can be tested without touching the filesystem.

Three pairing strategies are supported:
    1. Undo split: siblings named "<root> [<bucket>]" merge back into <root>
    2. Split merge: children named "<base> [<tag>]" merge into the child
       named <base> living in the same root
    3. Same name: each source folder merges into the first destination
       folder whose name contains the source name

Example:
    >>> from bmspack.matching import PairMatcher
    >>> matcher = PairMatcher()
    >>> pairs = matcher.find_split_merge_pairs(root, ["Foo", "Foo [ABCD]"])
    >>> [(p.source_name, p.target_name) for p in pairs]
    [('Foo [ABCD]', 'Foo')]
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz, process

from bmspack.models import MergePair

logger = logging.getLogger("bmspack.matching")


class DuplicateTargetError(ValueError):
    """Raised when more than one merge pair shares a destination folder.

    Attributes:
        duplicates: Destination names that appear in more than one pair,
            in first-seen order.
    """

    def __init__(self, duplicates: List[str]) -> None:
        self.duplicates = duplicates
        super().__init__(
            "Duplicate merge destinations found: " + ", ".join(duplicates)
        )


class PairMatcher:
    """Finds folder merge pairs using name-based heuristics.

    Warnings about names that were deliberately left unpaired are collected
    on the instance and can be read with get_warnings().

    Attributes:
        max_bucket_siblings: Largest number of "<base> [" siblings accepted
            before a base name is considered ambiguous.
        suggestion_cutoff: Minimum RapidFuzz score (0-100) for
            suggest_closest() to report a candidate.
    """

    def __init__(self, max_bucket_siblings: int = 2, suggestion_cutoff: float = 60.0) -> None:
        self.max_bucket_siblings = max_bucket_siblings
        self.suggestion_cutoff = suggestion_cutoff
        self._warnings: List[str] = []

    def find_undo_split_pairs(
        self, root_dir: Path, sibling_names: Sequence[str]
    ) -> List[MergePair]:
        """Find bucket folders produced by a previous split of `root_dir`.

        Args:
            root_dir: The original (un-bucketed) directory.
            sibling_names: Directory names found in root_dir's parent.

        Returns:
            One MergePair per "<root name> [...]" sibling, all targeting
            root_dir, in sibling_names order.
        """
        prefix = f"{root_dir.name} ["
        parent = root_dir.parent

        return [
            MergePair(source=parent / name, target=root_dir)
            for name in sibling_names
            if name.startswith(prefix) and name.endswith("]")
        ]

    def find_split_merge_pairs(
        self, root_dir: Path, dir_names: Sequence[str]
    ) -> List[MergePair]:
        """Pair bucketed children of `root_dir` with their base-name sibling.

        A child named "Foo [ABCD]" pairs with a child named "Foo". Children
        are skipped when the base name is empty, has no matching sibling,
        or when more than max_bucket_siblings children start with
        "Foo [" (the grouping is ambiguous and a warning is recorded).

        Args:
            root_dir: Directory holding both bucketed and base folders.
            dir_names: Names of root_dir's direct subdirectories.

        Returns:
            List of MergePair(bucketed child -> base child).
        """
        existing = set(dir_names)
        pairs: List[MergePair] = []

        for dir_name in dir_names:
            base_name = self.strip_bucket_suffix(dir_name)
            if base_name is None:
                continue

            if base_name not in existing:
                continue

            starter = f"{base_name} ["
            bucketed = [name for name in dir_names if name.startswith(starter)]
            if len(bucketed) > self.max_bucket_siblings:
                self._warn(
                    f"{base_name} has more than {self.max_bucket_siblings} "
                    f"bucket folders: {bucketed}"
                )
                continue

            pairs.append(MergePair(source=root_dir / dir_name, target=root_dir / base_name))

        return pairs

    @staticmethod
    def strip_bucket_suffix(dir_name: str) -> Optional[str]:
        """Return the base name of "<base> [<tag>]", or None.

        The base is everything before the last '[' minus the single space
        separating it from the bracket. Names without a trailing ']', without
        a space before the bracket, or with an empty base yield None.

        Example:
            >>> PairMatcher.strip_bucket_suffix("Foo Bar [RST]")
            'Foo Bar'
        """
        if not dir_name.endswith("]"):
            return None

        bracket_pos = dir_name.rfind("[")
        if bracket_pos < 1 or dir_name[bracket_pos - 1] != " ":
            return None

        base_name = dir_name[: bracket_pos - 1]
        return base_name or None

    def check_duplicate_targets(self, pairs: Sequence[MergePair]) -> None:
        """Reject a batch in which two pairs share a destination.

        Every pair is compared, not only adjacent ones.

        Raises:
            DuplicateTargetError: If any destination appears more than once.
        """
        counts: Dict[Path, int] = {}
        for pair in pairs:
            counts[pair.target] = counts.get(pair.target, 0) + 1

        duplicates = [target.name for target, count in counts.items() if count > 1]
        if duplicates:
            raise DuplicateTargetError(duplicates)

    def find_same_name_pairs(
        self,
        from_root: Path,
        from_names: Sequence[str],
        to_root: Path,
        to_names: Sequence[str],
    ) -> List[MergePair]:
        """Pair each source folder with the first destination containing its name.

        Args:
            from_root: Source root directory.
            from_names: Subdirectory names of from_root.
            to_root: Destination root directory.
            to_names: Subdirectory names of to_root, in listing order.

        Returns:
            List of MergePair(from_root/name -> to_root/match). Source
            folders with no containing destination produce no pair.
        """
        pairs: List[MergePair] = []

        for from_name in from_names:
            for to_name in to_names:
                if from_name in to_name:
                    pairs.append(MergePair(source=from_root / from_name, target=to_root / to_name))
                    break

        return pairs

    def suggest_closest(
        self, name: str, candidates: Sequence[str]
    ) -> Optional[Tuple[str, float]]:
        """Name the candidate most similar to `name`.

        Used only to explain why a folder was left unpaired.

        Returns:
            Tuple of (candidate, score 0-100), or None when no candidate
            reaches suggestion_cutoff.
        """
        if not name or not candidates:
            return None

        result = process.extractOne(
            name,
            list(candidates),
            scorer=fuzz.token_sort_ratio,
            score_cutoff=self.suggestion_cutoff,
        )
        if result is None:
            return None

        candidate, score, _ = result
        return (candidate, score)

    def get_warnings(self) -> List[str]:
        """Get warnings recorded while pairing."""
        return self._warnings.copy()

    def clear_warnings(self) -> None:
        """Clear the list of accumulated warnings."""
        self._warnings.clear()

    def _warn(self, message: str) -> None:
        logger.debug(message)
        self._warnings.append(message)
