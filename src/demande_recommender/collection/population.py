"""
Population Categories.

Pure functions mapping participant birthdates to clientele age bands:

    children     0-12
    adolescents  13-17
    adults       18-64
    seniors      65+
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple

from demande_recommender.domain.entities import PopulationCategory

# Upper age bound (inclusive) of each band, in band order
AGE_BANDS: Tuple[Tuple[int, PopulationCategory], ...] = (
    (12, PopulationCategory.CHILDREN),
    (17, PopulationCategory.ADOLESCENTS),
    (64, PopulationCategory.ADULTS),
)


def age_on(birthdate: date, as_of: date) -> int:
    """Completed years between birthdate and as_of."""
    age = as_of.year - birthdate.year
    if (as_of.month, as_of.day) < (birthdate.month, birthdate.day):
        age -= 1
    return age


def population_category(
    birthdate: Optional[date],
    as_of: date,
) -> Optional[PopulationCategory]:
    """
    Derive the population category for one participant.

    Args:
        birthdate: Participant birthdate, or None when unknown
        as_of: Reference date

    Returns:
        The age band, or None when birthdate is unknown or after as_of
    """
    if birthdate is None:
        return None

    age = age_on(birthdate, as_of)
    if age < 0:
        return None

    for upper_bound, category in AGE_BANDS:
        if age <= upper_bound:
            return category
    return PopulationCategory.SENIORS


def derive_population_categories(
    birthdates: Iterable[Optional[date]],
    as_of: date,
) -> Tuple[PopulationCategory, ...]:
    """Distinct categories of all participants, in band order."""
    found = {population_category(b, as_of) for b in birthdates}
    ordered: List[PopulationCategory] = [c for c in PopulationCategory if c in found]
    return tuple(ordered)
