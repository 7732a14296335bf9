"""Name matching package for bmspack.

This package contains the decision logic that works on names alone:

- BucketClassifier: Maps a work name to its first-character bucket.
- PairMatcher: Finds which folders should be merged into which.

Example:
    >>> from bmspack.matching import BucketClassifier, PairMatcher
    >>> BucketClassifier().classify("123 Go").value
    '0-9'
"""

from .bucket_classifier import BucketClassifier, ClassificationRule, DEFAULT_RULES
from .pair_matcher import DuplicateTargetError, PairMatcher

__all__ = [
    "BucketClassifier",
    "ClassificationRule",
    "DEFAULT_RULES",
    "DuplicateTargetError",
    "PairMatcher",
]
