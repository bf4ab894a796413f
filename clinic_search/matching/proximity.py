import logging
import math
from typing import List, Optional, Sequence

from .models import ProximityMatch, SearchableClinic

logger = logging.getLogger(__name__)


def planar_distance(latitude: float, longitude: float, clinic_latitude: float, clinic_longitude: float) -> float:
    """Euclidean distance in coordinate degrees. Good enough for ordering nearby clinics."""
    return math.sqrt((clinic_longitude - longitude) ** 2 + (clinic_latitude - latitude) ** 2)


def find_nearby_clinics(
    clinics: Sequence[SearchableClinic],
    latitude: float,
    longitude: float,
    radius: Optional[float] = None
) -> List[ProximityMatch]:
    """
    Order clinics by distance from a location, nearest first.

    Args:
        clinics: Candidate clinics.
        latitude: Caller latitude.
        longitude: Caller longitude.
        radius: Optional cut-off in the same units as the distance. No cut-off when None.

    Returns:
        List[ProximityMatch]: Matches in ascending distance order, ties in input order.
    """
    matches: List[ProximityMatch] = []
    skipped = 0
    for clinic in clinics:
        if clinic.latitude is None or clinic.longitude is None:
            skipped += 1
            continue
        distance = planar_distance(latitude, longitude, clinic.latitude, clinic.longitude)
        if radius is not None and distance > radius:
            continue
        matches.append(ProximityMatch(clinic=clinic, distance=distance))

    if skipped:
        logger.debug(f"Skipped {skipped} clinics without coordinates.")

    matches.sort(key=lambda match: match.distance)
    return matches


def find_clinic_by_id(clinics: Sequence[SearchableClinic], clinic_id: int) -> Optional[SearchableClinic]:
    for clinic in clinics:
        if clinic.id == clinic_id:
            return clinic
    return None
