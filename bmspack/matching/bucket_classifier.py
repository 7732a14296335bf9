"""First-character bucket classification for work names.

This module provides the BucketClassifier class which maps a name to a
BucketLabel using an ordered list of rules over the name's first character.

Rules are evaluated in priority order and the first match wins:
    1. ASCII digit
    2. ASCII letter ranges A-D, E-K, L-Q, R-T, U-Z (case-insensitive)
    3. Hiragana (U+3040 - U+309F)
    4. Katakana (U+30A0 - U+30FF)
    5. CJK unified ideographs (U+4E00 - U+9FA5)
    6. Any other non-empty name
Names matching no rule (only the empty name) are Uncategorized.

Example:
    >>> from bmspack.matching import BucketClassifier
    >>> classifier = BucketClassifier()
    >>> classifier.classify("Angelic layer").value
    'ABCD'
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from bmspack.models import BucketLabel


_HIRAGANA_PATTERN = re.compile(r"[\u3040-\u309f]")
_KATAKANA_PATTERN = re.compile(r"[\u30a0-\u30ff]")
_CJK_PATTERN = re.compile(r"[\u4e00-\u9fa5]")


@dataclass(frozen=True)
class ClassificationRule:
    """A bucket label and the predicate selecting it."""
    label: BucketLabel
    predicate: Callable[[str], bool]


def _first_char(name: str) -> Optional[str]:
    return name[0] if name else None


def _is_ascii_digit(name: str) -> bool:
    char = _first_char(name)
    return char is not None and "0" <= char <= "9"


def _letter_range(low: str, high: str) -> Callable[[str], bool]:
    """Build a predicate for a first letter within [low, high].

    Only ASCII characters are uppercased, so characters such as 'ß' never
    fold into a Latin range.
    """
    def predicate(name: str) -> bool:
        char = _first_char(name)
        if char is None:
            return False
        if char.isascii():
            char = char.upper()
        return low <= char <= high

    return predicate


def _script(pattern: "re.Pattern[str]") -> Callable[[str], bool]:
    def predicate(name: str) -> bool:
        char = _first_char(name)
        return char is not None and pattern.fullmatch(char) is not None

    return predicate


DEFAULT_RULES: Sequence[ClassificationRule] = (
    ClassificationRule(BucketLabel.DIGITS, _is_ascii_digit),
    ClassificationRule(BucketLabel.ABCD, _letter_range("A", "D")),
    ClassificationRule(BucketLabel.EFGHIJK, _letter_range("E", "K")),
    ClassificationRule(BucketLabel.LMNOPQ, _letter_range("L", "Q")),
    ClassificationRule(BucketLabel.RST, _letter_range("R", "T")),
    ClassificationRule(BucketLabel.UVWXYZ, _letter_range("U", "Z")),
    ClassificationRule(BucketLabel.HIRAGANA, _script(_HIRAGANA_PATTERN)),
    ClassificationRule(BucketLabel.KATAKANA, _script(_KATAKANA_PATTERN)),
    ClassificationRule(BucketLabel.KANJI, _script(_CJK_PATTERN)),
    ClassificationRule(BucketLabel.OTHER, lambda name: bool(name)),
)


class BucketClassifier:
    """Classifies names into buckets using an ordered rule list.

    Attributes:
        rules: Rules evaluated in order; the first matching rule's label
            is returned.
    """

    def __init__(self, rules: Optional[Sequence[ClassificationRule]] = None) -> None:
        self.rules = tuple(rules) if rules is not None else tuple(DEFAULT_RULES)

    def classify(self, name: str) -> BucketLabel:
        """Return the bucket for `name`.

        Args:
            name: File or directory base name. Only the first character
                is examined.

        Returns:
            The label of the first matching rule, or
            BucketLabel.UNCATEGORIZED when no rule matches.
        """
        for rule in self.rules:
            if rule.predicate(name):
                return rule.label
        return BucketLabel.UNCATEGORIZED

    @staticmethod
    def bucket_dir_name(root_name: str, label: BucketLabel) -> str:
        """Name of the sibling folder holding `label` entries of `root_name`."""
        return f"{root_name} [{label.value}]"
