import time
from typing import Any, Dict, List, Optional, Sequence

from ..config import CLINIC_TEXT_FIELDS, DEFAULT_MAX_DISTANCE, FIELD_WEIGHT, NAME_WEIGHT
from ..secure_logging import get_secure_logger
from .fuzzy_matchers import FuzzyMatcher
from .models import SearchableClinic, SearchQuery
from .predicates import all_of, build_filters

logger = get_secure_logger(__name__)

DEFAULT_CLINIC_SEARCH_CONFIG = {
    "max_distance": DEFAULT_MAX_DISTANCE,
    "field_weights": {
        "name": NAME_WEIGHT,
        "email": FIELD_WEIGHT,
        "phone_number": FIELD_WEIGHT,
        "address": FIELD_WEIGHT,
        "description": FIELD_WEIGHT,
        "website": FIELD_WEIGHT,
    },
}


class ClinicSearchStrategy:
    def __init__(
        self,
        fuzzy_matcher: Optional[FuzzyMatcher] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        # Merge nested dicts like field_weights one level deep
        merged_config = {**DEFAULT_CLINIC_SEARCH_CONFIG}
        if config:
            for key, value in config.items():
                if isinstance(value, dict) and key in merged_config and isinstance(merged_config[key], dict):
                    merged_config[key] = {**merged_config[key], **value}
                else:
                    merged_config[key] = value
        self.config = merged_config

        unknown = set(self.config["field_weights"]) - set(CLINIC_TEXT_FIELDS)
        if unknown:
            raise ValueError(f"field_weights in config has unknown fields: {sorted(unknown)}")

        self.fuzzy_matcher = fuzzy_matcher or FuzzyMatcher(max_distance=self.config["max_distance"])

    def filter_clinics(self, clinics: Sequence[SearchableClinic], query: SearchQuery) -> List[SearchableClinic]:
        accepts = all_of(build_filters(query, self.fuzzy_matcher))
        return [clinic for clinic in clinics if accepts(clinic)]

    def score_clinic(self, clinic: SearchableClinic, query: SearchQuery) -> int:
        """
        Summed weighted edit distance of the clinic's own text fields.

        Each field is compared once against the general term and once against
        its own per-field term; absent terms add nothing. Dentist fields are
        not scored, so a clinic admitted through a dentist is ranked on its
        own fields alone.
        """
        weights = self.config["field_weights"]
        score = 0
        for field_name in CLINIC_TEXT_FIELDS:
            value = clinic.text_field(field_name)
            weight = weights[field_name]
            score += self.fuzzy_matcher.weighted_distance(value, query.general_search, weight)
            score += self.fuzzy_matcher.weighted_distance(value, query.field_term(field_name), weight)
        return score

    def ranked_search(self, clinics: Sequence[SearchableClinic], query: SearchQuery) -> List[SearchableClinic]:
        start_time = time.time()
        matches = self.filter_clinics(clinics, query)

        if query.general_search:
            # sorted() is stable, ties keep input order
            matches = sorted(matches, key=lambda clinic: self.score_clinic(clinic, query))
            search_type = "ranked"
        else:
            search_type = "filtered"

        logger.log_clinic_search(
            search_type,
            criteria_count=len(query.active_terms()),
            candidates_count=len(clinics),
            results_count=len(matches),
            duration_ms=(time.time() - start_time) * 1000,
        )
        return matches


def ranked_search(
    clinics: Sequence[SearchableClinic],
    query: SearchQuery,
    config: Optional[Dict[str, Any]] = None
) -> List[SearchableClinic]:
    """Filter clinics by the query's terms and, with a general term, order them by relevance."""
    return ClinicSearchStrategy(config=config).ranked_search(clinics, query)
