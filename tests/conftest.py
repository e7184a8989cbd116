"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Optional, Sequence, Tuple

import pytest

from demande_recommender.adapters.console_logger import ConsoleAuditLogger
from demande_recommender.adapters.in_memory_repository import InMemoryRecommendationRepository
from demande_recommender.adapters.metrics_collector import InMemoryMetricsCollector
from demande_recommender.config.models import (
    EligibilityConfig,
    RecommendationConfig,
    ScoringConfig,
)
from demande_recommender.domain.entities import (
    Candidate,
    Demande,
    DemandType,
    PopulationCategory,
    ProficiencyLevel,
    Profession,
    Specialty,
)
from demande_recommender.domain.value_objects import AvailabilitySummary, AvailabilityWindow
from tests.fixtures import ANCHOR, CandidateFactory


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def console_logger() -> ConsoleAuditLogger:
    """Create console logger for testing."""
    return ConsoleAuditLogger(verbose=False)


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()


@pytest.fixture
def repository() -> InMemoryRecommendationRepository:
    """Create an empty result store."""
    return InMemoryRecommendationRepository()


@pytest.fixture
def default_config() -> RecommendationConfig:
    """Create default recommendation configuration."""
    return RecommendationConfig()


@pytest.fixture
def eligibility_config() -> EligibilityConfig:
    """Create eligibility configuration."""
    return EligibilityConfig()


@pytest.fixture
def scoring_config() -> ScoringConfig:
    """Create scoring configuration."""
    return ScoringConfig()


@pytest.fixture
def window() -> AvailabilityWindow:
    """Two-week window starting at the test anchor."""
    return AvailabilityWindow.starting_at(ANCHOR, 14)


@pytest.fixture
def adult_demande() -> Demande:
    """Individual demande for one adult with two motifs."""
    return Demande(
        demande_id="DEM-2026-0042",
        demand_type=DemandType.INDIVIDUAL,
        motif_keys=frozenset({"anxiety", "depression"}),
        motif_description="Anxiété persistante au travail.",
        population_categories=(PopulationCategory.ADULTS,),
    )


@pytest.fixture
def make_candidate() -> CandidateFactory:
    """Factory for candidates with collected availability."""

    def _make(
        professional_id: str,
        slots: int = 5,
        years: float = 10.0,
        specialties: Sequence[Tuple[str, Optional[ProficiencyLevel]]] = (
            ("adults", ProficiencyLevel.PRIMARY),
        ),
        motifs: Sequence[str] = ("anxiety",),
        status: str = "active",
        category: str = "psychologist",
    ) -> Candidate:
        return Candidate(
            professional_id=professional_id,
            display_name=f"Professional {professional_id}",
            status=status,
            years_experience=years,
            professions=(
                Profession(title_key=category, category_key=category, is_primary=True),
            ),
            specialties=tuple(Specialty(code=c, proficiency=p) for c, p in specialties),
            motif_keys=frozenset(motifs),
            availability=AvailabilitySummary(
                slots_in_window=slots,
                next_slot=ANCHOR + timedelta(days=1, hours=1) if slots else None,
                hours_available=float(slots),
            ),
        )

    return _make
