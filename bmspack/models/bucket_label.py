"""
BucketLabel enum for first-character classification of work names.

Labels are declared in rule priority order:
1. Digits
2. Four Latin-letter ranges (ABCD, EFGHIJK, LMNOPQ, RST, UVWXYZ)
3. Japanese hiragana, then katakana
4. CJK unified ideographs
5. Any other non-empty name
6. Uncategorized (empty name)
"""

from enum import Enum


class BucketLabel(Enum):
    """Bucket tags used as the `[...]` suffix of split collection folders."""
    DIGITS = "0-9"
    ABCD = "ABCD"
    EFGHIJK = "EFGHIJK"
    LMNOPQ = "LMNOPQ"
    RST = "RST"
    UVWXYZ = "UVWXYZ"
    HIRAGANA = "平假"              # U+3040 - U+309F
    KATAKANA = "片假"              # U+30A0 - U+30FF
    KANJI = "字"                   # U+4E00 - U+9FA5
    OTHER = "+"                    # Any other leading character
    UNCATEGORIZED = "Uncategorized"  # Empty name
