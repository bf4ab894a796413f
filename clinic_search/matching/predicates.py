"""Clinic filter predicates built from a SearchQuery.

Each supplied search term becomes one independent predicate over a
``SearchableClinic``; a clinic is kept only when every predicate accepts it.
"""
from typing import Callable, Iterable, List

from ..config import CLINIC_TEXT_FIELDS, DENTIST_TEXT_FIELDS
from .fuzzy_matchers import FuzzyMatcher
from .models import SearchableClinic, SearchQuery

ClinicPredicate = Callable[[SearchableClinic], bool]


def any_dentist_matches(clinic: SearchableClinic, field_name: str, term: str, matcher: FuzzyMatcher) -> bool:
    return any(matcher.field_matches(getattr(dentist, field_name), term) for dentist in clinic.dentists)


def general_predicate(term: str, matcher: FuzzyMatcher) -> ClinicPredicate:
    """Match the term against every clinic text field and every dentist field."""
    def predicate(clinic: SearchableClinic) -> bool:
        if any(matcher.field_matches(clinic.text_field(name), term) for name in CLINIC_TEXT_FIELDS):
            return True
        return any(any_dentist_matches(clinic, name, term, matcher) for name in DENTIST_TEXT_FIELDS)

    return predicate


def field_predicate(field_name: str, term: str, matcher: FuzzyMatcher) -> ClinicPredicate:
    """Match the term against one clinic field, falling back to dentists for name, email and phone."""
    if field_name not in CLINIC_TEXT_FIELDS:
        raise ValueError(f"Unknown clinic search field: {field_name}")
    check_dentists = field_name in DENTIST_TEXT_FIELDS

    def predicate(clinic: SearchableClinic) -> bool:
        if matcher.field_matches(clinic.text_field(field_name), term):
            return True
        return check_dentists and any_dentist_matches(clinic, field_name, term, matcher)

    return predicate


def build_filters(query: SearchQuery, matcher: FuzzyMatcher) -> List[ClinicPredicate]:
    filters: List[ClinicPredicate] = []
    if query.general_search:
        filters.append(general_predicate(query.general_search, matcher))
    for field_name in CLINIC_TEXT_FIELDS:
        term = query.field_term(field_name)
        if term:
            filters.append(field_predicate(field_name, term, matcher))
    return filters


def all_of(predicates: Iterable[ClinicPredicate]) -> ClinicPredicate:
    predicates = list(predicates)

    def predicate(clinic: SearchableClinic) -> bool:
        return all(p(clinic) for p in predicates)

    return predicate
