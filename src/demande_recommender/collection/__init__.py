"""
Collection Package - Data Collector and Row Mapping.

    - DataCollector: Loads the demande and candidate pool
    - Row mappers: Pydantic row schemas for store rows
    - Population: Birthdate to clientele age band
    - Schedule: Client time-of-week preferences against open slots
"""

from demande_recommender.collection.data_collector import (
    AvailabilityOutcome,
    CollectedData,
    DataCollector,
)
from demande_recommender.collection.population import (
    derive_population_categories,
    population_category,
)
from demande_recommender.collection.row_mappers import (
    map_professional,
    map_request,
    summarize_availability,
)
from demande_recommender.collection.schedule import matches_schedule

__all__ = [
    "AvailabilityOutcome",
    "CollectedData",
    "DataCollector",
    "derive_population_categories",
    "map_professional",
    "map_request",
    "matches_schedule",
    "population_category",
    "summarize_availability",
]
