"""Unit tests for clinic_search.matching.fuzzy_matchers module."""

import pytest

from clinic_search.matching.fuzzy_matchers import FuzzyMatcher, levenshtein_distance


def _reference_distance(source: str, target: str) -> int:
    """Textbook dynamic-programming edit distance, used to cross-check."""
    previous = list(range(len(target) + 1))
    for i, source_char in enumerate(source, 1):
        current = [i]
        for j, target_char in enumerate(target, 1):
            cost = 0 if source_char == target_char else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


class TestLevenshteinDistance:
    """Test the edit distance primitive."""

    @pytest.mark.parametrize("text", ["", "a", "kitten", "Lakeside Dental", "Zahnärztin Müller"])
    def test_identity(self, text):
        """A string is zero edits away from itself."""
        assert levenshtein_distance(text, text) == 0

    @pytest.mark.parametrize("source,target", [
        ("kitten", "sitting"),
        ("flaw", "lawn"),
        ("Apple", "Apply Dental"),
        ("", "abc"),
    ])
    def test_symmetry(self, source, target):
        """Distance does not depend on argument order."""
        assert levenshtein_distance(source, target) == levenshtein_distance(target, source)

    def test_kitten_sitting(self):
        """Classic example needs three edits."""
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_empty_strings(self):
        """Against an empty string the distance is the other string's length."""
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "") == 3
        assert levenshtein_distance("", "") == 0

    def test_case_sensitive(self):
        """Case differences count as substitutions."""
        assert levenshtein_distance("Dental", "dental") == 1

    @pytest.mark.parametrize("source,target", [
        ("Lakeside Dental", "Lakesdie Dentol"),
        ("Hilltop Smiles", "Hill"),
        ("555-0100", "5550100"),
        ("info@lakeside.example", "info@lakesid.example"),
    ])
    def test_matches_reference_implementation(self, source, target):
        """Agrees with a plain dynamic-programming implementation."""
        assert levenshtein_distance(source, target) == _reference_distance(source, target)


class TestFuzzyMatcherInitialization:
    """Test FuzzyMatcher initialization and configuration."""

    def test_default_initialization(self):
        """Default threshold is three edits."""
        assert FuzzyMatcher().max_distance == 3

    def test_custom_initialization(self):
        """A custom threshold is kept."""
        assert FuzzyMatcher(max_distance=1).max_distance == 1

    @pytest.mark.parametrize("value", [-1, 1.5, "3", True, None])
    def test_invalid_max_distance(self, value):
        """Only non-negative integers are accepted."""
        with pytest.raises(ValueError, match="max_distance must be a non-negative integer"):
            FuzzyMatcher(max_distance=value)


class TestFieldMatches:
    """Test the prefix-or-fuzzy field predicate."""

    def test_prefix_match(self, fuzzy_matcher):
        """A term the value starts with always matches."""
        assert fuzzy_matcher.field_matches("Lakeside Dental", "Lake") is True

    def test_long_prefix_beyond_threshold(self, fuzzy_matcher):
        """Prefix matches regardless of how many characters remain."""
        assert fuzzy_matcher.field_matches("Lakeside Dental and Orthodontics", "L") is True

    def test_fuzzy_match_within_threshold(self, fuzzy_matcher):
        """Typos within three edits still match."""
        assert fuzzy_matcher.field_matches("Lakeside Dental", "Lakesdie Dentol") is True

    def test_no_match_beyond_threshold(self, fuzzy_matcher):
        """Unrelated values do not match."""
        assert fuzzy_matcher.field_matches("Lakeside Dental", "Completely Different Name") is False

    def test_threshold_boundary(self):
        """Exactly max_distance edits matches, one more does not."""
        matcher = FuzzyMatcher(max_distance=2)
        assert matcher.field_matches("abcdef", "abxdey") is True
        assert matcher.field_matches("abcdef", "xbxdey") is False

    def test_prefix_is_case_sensitive(self):
        """Prefix comparison is ordinal; a lower-case term is only a fuzzy candidate."""
        matcher = FuzzyMatcher(max_distance=0)
        assert matcher.field_matches("Lakeside", "lake") is False
        assert matcher.field_matches("Lakeside", "Lake") is True

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_value_never_matches(self, fuzzy_matcher, value):
        """Absent or empty field values are never matches, even for short terms."""
        assert fuzzy_matcher.field_matches(value, "a") is False

    @pytest.mark.parametrize("term", [None, ""])
    def test_empty_term_never_matches(self, fuzzy_matcher, term):
        """An empty term is not a match on its own."""
        assert fuzzy_matcher.field_matches("Lakeside Dental", term) is False


class TestWeightedDistance:
    """Test weighted distance used in relevance scoring."""

    def test_absent_term_contributes_nothing(self):
        """No term, no distance."""
        assert FuzzyMatcher.weighted_distance("Lakeside Dental", None, 1.5) == 0
        assert FuzzyMatcher.weighted_distance("Lakeside Dental", "", 1.5) == 0

    def test_weight_is_applied_and_truncated(self):
        """Scaled distance is truncated toward zero."""
        # distance("Apple Dental", "Apple") == 7
        assert FuzzyMatcher.weighted_distance("Apple Dental", "Apple", 0.5) == 3
        assert FuzzyMatcher.weighted_distance("Apple Dental", "Apple", 1.5) == 10

    def test_absent_value_compared_as_empty(self):
        """A missing field counts as the empty string."""
        assert FuzzyMatcher.weighted_distance(None, "abcd", 1.5) == 6

    def test_identical_value_scores_zero(self):
        """An exact value has no distance."""
        assert FuzzyMatcher.weighted_distance("Hilltop", "Hilltop", 1.5) == 0
