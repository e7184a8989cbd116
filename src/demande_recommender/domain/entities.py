"""
Core Domain Entities.

This module defines the fundamental entities of the recommendation domain:
the demande being matched, the professionals considered for it, and the
artifacts a recommendation run produces.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, Field

from demande_recommender.domain.value_objects import (
    AvailabilitySummary,
    DeterministicScores,
)


class DemandType(str, Enum):
    """Kind of consultation requested."""

    INDIVIDUAL = "individual"
    COUPLE = "couple"
    FAMILY = "family"
    GROUP = "group"


class UrgencyLevel(str, Enum):
    """Urgency flag set at intake."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class SchedulePreference(str, Enum):
    """Time-of-week a client can attend, chosen at intake."""

    AM = "am"
    PM = "pm"
    EVENING = "evening"
    WEEKEND = "weekend"
    OTHER = "other"


class PopulationCategory(str, Enum):
    """Age band of a participant. Values double as clientele specialty codes."""

    CHILDREN = "children"
    ADOLESCENTS = "adolescents"
    ADULTS = "adults"
    SENIORS = "seniors"


class ProficiencyLevel(str, Enum):
    """Declared proficiency of a professional in a specialty."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    FAMILIAR = "familiar"


class ExclusionReason(str, Enum):
    """
    Closed set of hard-exclusion reason codes.

    Declaration order is the rule priority: when several rules fail, the
    first one declared here is reported as the reason code.
    """

    DATA_UNAVAILABLE = "data_unavailable"
    LICENSE_INACTIVE = "license_inactive"
    NO_AVAILABILITY = "no_availability"
    DEMAND_TYPE_INCOMPATIBLE = "demand_type_incompatible"
    CLIENTELE_INELIGIBLE = "clientele_ineligible"
    SPECIALTY_MISMATCH = "specialty_mismatch"
    NO_MOTIF_OVERLAP = "no_motif_overlap"

    @property
    def priority(self) -> int:
        return list(ExclusionReason).index(self)


class SoftCriterion(str, Enum):
    """Soft criteria that route a candidate to the near-eligible list."""

    LIMITED_AVAILABILITY = "limited_availability"
    LIMITED_EXPERIENCE = "limited_experience"

    @property
    def priority(self) -> int:
        return list(SoftCriterion).index(self)


# =============================================================================
# Inputs
# =============================================================================


class Demande(BaseModel):
    """A client's service intake needing professional assignment."""

    demande_id: str = Field(..., description="Display id, e.g. DEM-2026-0042")
    demand_type: DemandType = DemandType.INDIVIDUAL
    urgency: UrgencyLevel = UrgencyLevel.LOW
    motif_keys: FrozenSet[str] = Field(default_factory=frozenset)
    motif_description: str = ""
    other_motif_text: str = ""
    notes: str = ""
    has_legal_context: bool = False
    required_specialties: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Specialty codes the intake explicitly requires",
    )
    population_categories: Tuple[PopulationCategory, ...] = Field(
        default=(), description="Derived from participant birthdates"
    )
    schedule_preferences: FrozenSet[SchedulePreference] = Field(
        default_factory=frozenset,
        description="Empty means any time suits the client",
    )

    model_config = {"frozen": True}

    @property
    def clinical_text_parts(self) -> List[str]:
        """Non-empty free-text fields in intake order."""
        parts = [self.motif_description, self.other_motif_text, self.notes]
        return [p.strip() for p in parts if p and p.strip()]


class Profession(BaseModel):
    """A profession title held by a professional."""

    title_key: str
    category_key: str
    label: str = ""
    is_primary: bool = False

    model_config = {"frozen": True}


class Specialty(BaseModel):
    """A declared specialty with optional proficiency."""

    code: str
    category: str = ""
    proficiency: Optional[ProficiencyLevel] = None

    model_config = {"frozen": True}


class Candidate(BaseModel):
    """Read-only snapshot of a professional considered for a demande."""

    professional_id: str
    display_name: str = ""
    status: str = "active"
    years_experience: float = Field(default=0.0, ge=0)
    professions: Tuple[Profession, ...] = ()
    specialties: Tuple[Specialty, ...] = ()
    motif_keys: FrozenSet[str] = Field(default_factory=frozenset)
    availability: AvailabilitySummary = Field(default_factory=AvailabilitySummary)

    model_config = {"frozen": True}

    def __hash__(self) -> int:
        return hash(self.professional_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return self.professional_id == other.professional_id

    @property
    def primary_profession(self) -> Optional[Profession]:
        for profession in self.professions:
            if profession.is_primary:
                return profession
        return self.professions[0] if self.professions else None

    @property
    def profession_type(self) -> str:
        primary = self.primary_profession
        return primary.category_key if primary else "unknown"

    @property
    def specialty_codes(self) -> FrozenSet[str]:
        return frozenset(s.code for s in self.specialties)

    @property
    def is_active(self) -> bool:
        return self.status.lower() == "active"


# =============================================================================
# Run artifacts
# =============================================================================


class ExclusionRecord(BaseModel):
    """Why a candidate was removed from consideration."""

    professional_id: str
    reason_code: ExclusionReason
    detail: str = ""
    context: Dict[str, Any] = Field(default_factory=dict)
    additional_reasons: List[ExclusionReason] = Field(default_factory=list)

    model_config = {"frozen": True}


class NearEligible(BaseModel):
    """Candidate that passed every hard rule but missed one soft threshold."""

    professional_id: str
    missed_criterion: SoftCriterion
    gap: float = Field(..., gt=0, description="Magnitude of the shortfall")
    gap_label: str = Field(..., description="e.g. '2 slots short'")
    scores: Optional[DeterministicScores] = None
    next_available_slot: Optional[datetime] = None

    model_config = {"frozen": True}


class RankedProfessional(BaseModel):
    """One entry of the final shortlist."""

    professional_id: str
    rank: int = Field(..., ge=1)
    final_score: float = Field(..., ge=0, le=1)
    scores: DeterministicScores
    advisory_applied: bool = False
    advisory_adjustment: Optional[float] = None
    reasoning: List[str] = Field(default_factory=list)
    matched_motifs: List[str] = Field(default_factory=list)
    matched_specialties: List[str] = Field(default_factory=list)
    available_slot_count: int = Field(default=0, ge=0)
    next_available_slot: Optional[datetime] = None

    model_config = {"frozen": True}


class GenerationMetadata(BaseModel):
    """How and when a recommendation was produced."""

    generated_at: datetime
    run_sequence: int
    config_key: str
    config_fingerprint: str
    config_snapshot: Dict[str, Any] = Field(default_factory=dict)
    advisory_model: str = "none"
    ai_assisted: bool = False
    advisory_error: Optional[str] = None
    processing_time_ms: int = 0
    candidates_considered: int = 0
    correlation_id: Optional[str] = None
    generated_by: Optional[str] = None

    model_config = {"frozen": True}


class DemandeRecommendation(BaseModel):
    """Final, immutable result of one recommendation run."""

    recommendation_id: str
    demande_id: str
    run_token: str
    recommendations: List[RankedProfessional] = Field(default_factory=list)
    exclusions: List[ExclusionRecord] = Field(default_factory=list)
    near_eligible: List[NearEligible] = Field(default_factory=list)
    advisory_summary: Optional[str] = None
    extracted_preferences: Optional[Dict[str, Any]] = None
    metadata: GenerationMetadata

    model_config = {"frozen": True}

    @property
    def ai_assisted(self) -> bool:
        return self.metadata.ai_assisted

    @property
    def ranked_ids(self) -> List[str]:
        return [r.professional_id for r in self.recommendations]

    @property
    def excluded_ids(self) -> List[str]:
        return [e.professional_id for e in self.exclusions]

    @property
    def near_eligible_ids(self) -> List[str]:
        return [n.professional_id for n in self.near_eligible]


class RecommendationViewEvent(BaseModel):
    """Append-only audit row written when staff view a recommendation."""

    demande_id: str
    recommendation_id: Optional[str] = None
    viewer_id: str
    viewed_at: datetime

    model_config = {"frozen": True}


# =============================================================================
# Stage results
# =============================================================================


class EligibilityResult(BaseModel):
    """Result of applying the eligibility filter."""

    eligible: List[Candidate] = Field(default_factory=list)
    exclusions: List[ExclusionRecord] = Field(default_factory=list)
    near_eligible: List[NearEligible] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def eligible_count(self) -> int:
        return len(self.eligible)

    @property
    def excluded_count(self) -> int:
        return len(self.exclusions)


class ScoredCandidate(BaseModel):
    """A surviving candidate paired with its deterministic scores."""

    candidate: Candidate
    scores: DeterministicScores

    model_config = {"frozen": True}

    @property
    def professional_id(self) -> str:
        return self.candidate.professional_id

    @property
    def total(self) -> float:
        return self.scores.total
