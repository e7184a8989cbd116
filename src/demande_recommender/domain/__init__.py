"""
Domain Layer - Core Business Entities and Value Objects.

This package contains the core domain model for the recommendation engine.
All entities here are pure Python with no external dependencies
(except Pydantic for validation).

Entities:
    - Demande: The client request being matched
    - Candidate: A professional considered for the demande
    - ExclusionRecord / NearEligible: Why candidates were not ranked
    - DemandeRecommendation: Complete result of a recommendation run

Value Objects:
    - AvailabilityWindow / AvailabilitySummary: Slot capacity
    - DeterministicScores: Per-candidate score breakdown

Design Principles:
    - Immutable (frozen pydantic models)
    - Closed enums for reason codes, ordered by priority
    - No infrastructure dependencies
"""

from demande_recommender.domain.entities import (
    Candidate,
    Demande,
    DemandeRecommendation,
    DemandType,
    EligibilityResult,
    ExclusionReason,
    ExclusionRecord,
    GenerationMetadata,
    NearEligible,
    PopulationCategory,
    ProficiencyLevel,
    Profession,
    RankedProfessional,
    RecommendationViewEvent,
    SchedulePreference,
    ScoredCandidate,
    SoftCriterion,
    Specialty,
    UrgencyLevel,
)
from demande_recommender.domain.exceptions import (
    AdvisoryTimeout,
    AdvisoryUnavailable,
    CandidateDataUnavailable,
    InvalidConfig,
    RecommendationError,
    RecordMappingError,
    RequestNotFound,
    SanitizationViolation,
)
from demande_recommender.domain.value_objects import (
    AvailabilitySummary,
    AvailabilityWindow,
    DeterministicScores,
)

__all__ = [
    "AdvisoryTimeout",
    "AdvisoryUnavailable",
    "AvailabilitySummary",
    "AvailabilityWindow",
    "Candidate",
    "CandidateDataUnavailable",
    "Demande",
    "DemandeRecommendation",
    "DemandType",
    "DeterministicScores",
    "EligibilityResult",
    "ExclusionReason",
    "ExclusionRecord",
    "GenerationMetadata",
    "InvalidConfig",
    "NearEligible",
    "PopulationCategory",
    "ProficiencyLevel",
    "Profession",
    "RankedProfessional",
    "RecommendationError",
    "RecommendationViewEvent",
    "RecordMappingError",
    "RequestNotFound",
    "SanitizationViolation",
    "SchedulePreference",
    "ScoredCandidate",
    "SoftCriterion",
    "Specialty",
    "UrgencyLevel",
]
