"""
Test Fixtures - Shared Test Data and Configurations.

This package contains reusable test fixtures:
    - sample_config.yaml: Sample configuration for testing
    - Raw store row builders (requests, professionals, slots)

Usage:
    Import builders directly in test files.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from demande_recommender.domain.entities import (
    Candidate,
    DemandeRecommendation,
    GenerationMetadata,
)

# Monday morning; every test clock starts here
ANCHOR = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
AS_OF = ANCHOR.date()

CandidateFactory = Callable[..., Candidate]


def birthdate_for_age(age: int, as_of: date = AS_OF) -> date:
    """A birthdate giving exactly `age` completed years on as_of."""
    return date(as_of.year - age, 1, 1)


def request_row(
    demande_id: str = "DEM-2026-0042",
    demand_type: str = "individual",
    motif_keys: Sequence[str] = ("anxiety",),
    ages: Sequence[int] = (35,),
    **extra: Any,
) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "demande_id": demande_id,
        "demand_type": demand_type,
        "urgency": "moderate",
        "motif_keys": list(motif_keys),
        "participants": [{"birthdate": birthdate_for_age(a)} for a in ages],
    }
    row.update(extra)
    return row


def professional_row(
    professional_id: str,
    specialties: Iterable[Tuple[str, Optional[str]]] = (("adults", "primary"),),
    motif_keys: Sequence[str] = ("anxiety",),
    years: Optional[float] = 10.0,
    status: str = "active",
    category: str = "psychologist",
    display_name: str = "Dr. Test Professional",
) -> Dict[str, Any]:
    return {
        "professional_id": professional_id,
        "display_name": display_name,
        "status": status,
        "years_experience": years,
        "professions": [
            {"title_key": category, "category_key": category, "is_primary": True}
        ],
        "specialties": [
            {"code": code, "proficiency": level} for code, level in specialties
        ],
        "motif_keys": list(motif_keys),
    }


def slot_rows(count: int, anchor: datetime = ANCHOR, first_day: int = 1) -> List[Dict[str, Any]]:
    """`count` one-hour slots, one per day at 09:00 starting first_day after anchor."""
    return [
        {
            "start": anchor + timedelta(days=first_day + i, hours=1),
            "end": anchor + timedelta(days=first_day + i, hours=2),
        }
        for i in range(count)
    ]


def recommendation(
    demande_id: str = "DEM-2026-0042",
    run_token: str = "run-1",
    run_sequence: int = 1,
) -> DemandeRecommendation:
    """An empty recommendation result, enough for store tests."""
    return DemandeRecommendation(
        recommendation_id=f"rec-{run_token}",
        demande_id=demande_id,
        run_token=run_token,
        metadata=GenerationMetadata(
            generated_at=ANCHOR,
            run_sequence=run_sequence,
            config_key="default",
            config_fingerprint="0" * 16,
        ),
    )
