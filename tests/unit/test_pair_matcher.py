"""
Unit tests for PairMatcher in bmspack.matching.pair_matcher.

Tests cover the three pairing strategies:
- Undo split: "<root> [<bucket>]" siblings back into <root>
- Split merge: "<base> [<tag>]" children into their <base> sibling
- Same name: source folders into the first destination containing the name

Also tests duplicate-destination detection and the fuzzy suggestion hint.
"""

from pathlib import Path

import pytest

from bmspack.matching import DuplicateTargetError, PairMatcher
from bmspack.models import MergePair


ROOT = Path("/bms")


@pytest.fixture
def matcher() -> PairMatcher:
    return PairMatcher()


# =============================================================================
# Undo split
# =============================================================================

@pytest.mark.unit
class TestUndoSplitPairs:

    def test_bucket_siblings_target_root(self, matcher: PairMatcher):
        root = ROOT / "Insane"
        siblings = ["Insane", "Insane [0-9]", "Insane [ABCD]", "Normal [ABCD]", "Other"]

        pairs = matcher.find_undo_split_pairs(root, siblings)

        assert [(p.source_name, p.target) for p in pairs] == [
            ("Insane [0-9]", root),
            ("Insane [ABCD]", root),
        ]

    def test_requires_space_and_closing_bracket(self, matcher: PairMatcher):
        root = ROOT / "Insane"
        siblings = ["Insane[ABCD]", "Insane [ABCD", "Insane2 [RST]", "Insane [] extra"]

        assert matcher.find_undo_split_pairs(root, siblings) == []

    def test_root_itself_is_not_paired(self, matcher: PairMatcher):
        root = ROOT / "Pack"
        assert matcher.find_undo_split_pairs(root, ["Pack"]) == []


# =============================================================================
# Split merge
# =============================================================================

@pytest.mark.unit
class TestSplitMergePairs:

    def test_pairs_bucketed_children_with_base(self, matcher: PairMatcher):
        names = ["Foo", "Foo [ABCD]", "Foo [RST]", "Bar"]

        pairs = matcher.find_split_merge_pairs(ROOT, names)

        assert pairs == [
            MergePair(source=ROOT / "Foo [ABCD]", target=ROOT / "Foo"),
            MergePair(source=ROOT / "Foo [RST]", target=ROOT / "Foo"),
        ]
        assert matcher.get_warnings() == []

    def test_missing_base_produces_no_pair(self, matcher: PairMatcher):
        assert matcher.find_split_merge_pairs(ROOT, ["Foo [ABCD]", "Bar"]) == []

    def test_more_than_two_bucketed_siblings_warns_and_skips(self, matcher: PairMatcher):
        names = ["Foo", "Foo [ABCD]", "Foo [EFGHIJK]", "Foo [RST]"]

        pairs = matcher.find_split_merge_pairs(ROOT, names)

        assert pairs == []
        warnings = matcher.get_warnings()
        assert len(warnings) == 3
        assert all(w.startswith("Foo has more than 2") for w in warnings)

    def test_ambiguity_only_affects_that_base(self, matcher: PairMatcher):
        names = ["Bar", "Bar [ABCD]", "Foo", "Foo [A]", "Foo [B]", "Foo [C]"]

        pairs = matcher.find_split_merge_pairs(ROOT, names)

        assert [(p.source_name, p.target_name) for p in pairs] == [("Bar [ABCD]", "Bar")]

    def test_configurable_sibling_limit(self):
        matcher = PairMatcher(max_bucket_siblings=1)
        pairs = matcher.find_split_merge_pairs(ROOT, ["Foo", "Foo [A]", "Foo [B]"])
        assert pairs == []
        assert len(matcher.get_warnings()) == 2

    def test_clear_warnings(self, matcher: PairMatcher):
        matcher.find_split_merge_pairs(ROOT, ["Foo", "Foo [A]", "Foo [B]", "Foo [C]"])
        matcher.clear_warnings()
        assert matcher.get_warnings() == []


@pytest.mark.unit
class TestStripBucketSuffix:

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Foo [ABCD]", "Foo"),
            ("Foo Bar [RST]", "Foo Bar"),
            ("[Old] Foo [0-9]", "[Old] Foo"),
            ("Foo [A [B]", "Foo [A"),
        ],
    )
    def test_valid_suffix(self, name: str, expected: str):
        assert PairMatcher.strip_bucket_suffix(name) == expected

    @pytest.mark.parametrize("name", ["Foo", "Foo[ABCD]", "[ABCD]", " [ABCD]", "Foo [ABCD] x"])
    def test_invalid_suffix(self, name: str):
        assert PairMatcher.strip_bucket_suffix(name) is None


# =============================================================================
# Duplicate destinations
# =============================================================================

@pytest.mark.unit
class TestDuplicateTargets:

    def test_unique_targets_pass(self, matcher: PairMatcher):
        pairs = [
            MergePair(source=ROOT / "Foo [A]", target=ROOT / "Foo"),
            MergePair(source=ROOT / "Bar [A]", target=ROOT / "Bar"),
        ]
        matcher.check_duplicate_targets(pairs)

    def test_shared_target_raises(self, matcher: PairMatcher):
        pairs = matcher.find_split_merge_pairs(ROOT, ["Foo", "Foo [ABCD]", "Foo [RST]"])

        with pytest.raises(DuplicateTargetError) as exc_info:
            matcher.check_duplicate_targets(pairs)

        assert exc_info.value.duplicates == ["Foo"]
        assert "Foo" in str(exc_info.value)

    def test_non_adjacent_duplicates_detected(self, matcher: PairMatcher):
        pairs = [
            MergePair(source=ROOT / "a", target=ROOT / "X"),
            MergePair(source=ROOT / "b", target=ROOT / "Y"),
            MergePair(source=ROOT / "c", target=ROOT / "X"),
        ]

        with pytest.raises(DuplicateTargetError) as exc_info:
            matcher.check_duplicate_targets(pairs)

        assert exc_info.value.duplicates == ["X"]

    def test_duplicate_error_is_value_error(self):
        assert issubclass(DuplicateTargetError, ValueError)


# =============================================================================
# Same name
# =============================================================================

@pytest.mark.unit
class TestSameNamePairs:

    def test_substring_match(self, matcher: PairMatcher):
        from_root, to_root = Path("/from"), Path("/to")

        pairs = matcher.find_same_name_pairs(
            from_root, ["Artist A"], to_root, ["Other", "Something Artist A Remix"]
        )

        assert pairs == [
            MergePair(source=from_root / "Artist A", target=to_root / "Something Artist A Remix")
        ]

    def test_first_containing_destination_wins(self, matcher: PairMatcher):
        pairs = matcher.find_same_name_pairs(
            Path("/from"), ["Song"], Path("/to"), ["Song (long)", "Song"]
        )
        assert [p.target_name for p in pairs] == ["Song (long)"]

    def test_unmatched_source_is_skipped(self, matcher: PairMatcher):
        pairs = matcher.find_same_name_pairs(
            Path("/from"), ["Nothing", "Beta"], Path("/to"), ["Alpha Beta"]
        )
        assert [(p.source_name, p.target_name) for p in pairs] == [("Beta", "Alpha Beta")]

    def test_matching_is_case_sensitive(self, matcher: PairMatcher):
        pairs = matcher.find_same_name_pairs(Path("/from"), ["artist"], Path("/to"), ["ARTIST"])
        assert pairs == []


@pytest.mark.unit
class TestSuggestClosest:

    def test_suggests_similar_name(self, matcher: PairMatcher):
        suggestion = matcher.suggest_closest("Artist Remix", ["Zzz", "Artist Remix 2"])
        assert suggestion is not None
        assert suggestion[0] == "Artist Remix 2"
        assert 60.0 <= suggestion[1] <= 100.0

    def test_nothing_above_cutoff(self, matcher: PairMatcher):
        assert matcher.suggest_closest("abcdef", ["zyxwvu"]) is None

    def test_no_candidates(self, matcher: PairMatcher):
        assert matcher.suggest_closest("Artist", []) is None
