from typing import Optional

from rapidfuzz.distance import Levenshtein

from ..config import DEFAULT_MAX_DISTANCE


def levenshtein_distance(source: str, target: str) -> int:
    """Uniform-cost edit distance (insert, delete, substitute), case-sensitive."""
    return Levenshtein.distance(source, target)


class FuzzyMatcher:
    def __init__(self, max_distance: int = DEFAULT_MAX_DISTANCE):
        if isinstance(max_distance, bool) or not isinstance(max_distance, int) or max_distance < 0:
            raise ValueError("max_distance must be a non-negative integer")
        self.max_distance = max_distance

    def field_matches(self, field_value: Optional[str], term: Optional[str]) -> bool:
        """
        Prefix-or-fuzzy match of a single field value against a search term.

        A value matches when it starts with the term (ordinal comparison) or is
        within ``max_distance`` edits of it. A missing or empty value never
        matches, and neither does an empty term.
        """
        if not field_value or not term:
            return False
        if field_value.startswith(term):
            return True
        return levenshtein_distance(field_value, term) <= self.max_distance

    @staticmethod
    def weighted_distance(field_value: Optional[str], term: Optional[str], weight: float) -> int:
        """
        Edit distance scaled by ``weight`` and truncated to an int.

        An absent term contributes nothing. An absent field value is compared
        as the empty string.
        """
        if not term:
            return 0
        return int(levenshtein_distance(field_value or "", term) * weight)
