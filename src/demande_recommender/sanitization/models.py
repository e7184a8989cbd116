"""
Sanitized Models - What May Cross the Privacy Boundary.

Nothing outside these models is ever sent to the advisory model. A
sanitized candidate carries exactly the whitelisted keys; any other key is
a defect and raises SanitizationViolation.
"""

from __future__ import annotations

from typing import Any, FrozenSet, List

from pydantic import BaseModel, Field, model_validator

from demande_recommender.advisory.models import HolisticSignal
from demande_recommender.domain.exceptions import SanitizationViolation

SANITIZED_CANDIDATE_KEYS: FrozenSet[str] = frozenset(
    {
        "id",
        "profession_type",
        "deterministic_score",
        "matched_motif_count",
        "available_slot_count",
        "years_experience",
    }
)


class SanitizedCandidate(BaseModel):
    """PII-free projection of a scored candidate."""

    id: str
    profession_type: str
    deterministic_score: float = Field(..., ge=0, le=1)
    matched_motif_count: int = Field(..., ge=0)
    available_slot_count: int = Field(..., ge=0)
    years_experience: float = Field(..., ge=0)

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def _whitelist(cls, data: Any) -> Any:
        if isinstance(data, dict):
            unexpected = set(data) - SANITIZED_CANDIDATE_KEYS
            if unexpected:
                raise SanitizationViolation(
                    f"Sanitized candidate has non-whitelisted keys: {sorted(unexpected)}"
                )
        return data


class AdvisoryInput(BaseModel):
    """The complete payload sent to the advisory model."""

    demand_type: str
    urgency: str
    motif_keys: List[str] = Field(default_factory=list)
    client_text: str = ""
    has_legal_context: bool = False
    population_categories: List[str] = Field(default_factory=list)
    candidates: List[SanitizedCandidate] = Field(default_factory=list)
    holistic_signal: HolisticSignal = Field(default_factory=HolisticSignal)

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def candidate_ids(self) -> List[str]:
        return [c.id for c in self.candidates]
