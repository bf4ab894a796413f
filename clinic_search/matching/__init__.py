"""Clinic and dentist fuzzy search and ranking."""

from .fuzzy_matchers import FuzzyMatcher, levenshtein_distance
from .models import ProximityMatch, SearchableClinic, SearchableDentist, SearchQuery
from .predicates import all_of, build_filters, field_predicate, general_predicate
from .proximity import find_clinic_by_id, find_nearby_clinics
from .search_strategy import DEFAULT_CLINIC_SEARCH_CONFIG, ClinicSearchStrategy, ranked_search

__all__ = [
    "SearchableClinic",
    "SearchableDentist",
    "SearchQuery",
    "ProximityMatch",
    "FuzzyMatcher",
    "levenshtein_distance",
    "general_predicate",
    "field_predicate",
    "build_filters",
    "all_of",
    "ClinicSearchStrategy",
    "DEFAULT_CLINIC_SEARCH_CONFIG",
    "ranked_search",
    "find_nearby_clinics",
    "find_clinic_by_id",
]
