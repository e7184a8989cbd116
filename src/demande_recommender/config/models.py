"""
Configuration Models - Pydantic Models for Type-Safe Config.

Field-level bounds are validated at load time using Pydantic. Cross-field
rules (weights summing to 1, a positive window) are checked by
ConfigValidator so that every problem is reported at once.
"""

from __future__ import annotations

import hashlib
import json
from datetime import timezone, tzinfo
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field


class ScoringWeights(BaseModel):
    """Weight of each scoring dimension. Must sum to 1."""

    motif: float = Field(default=0.35, ge=0, le=1)
    availability: float = Field(default=0.25, ge=0, le=1)
    experience: float = Field(default=0.15, ge=0, le=1)
    specialty: float = Field(default=0.25, ge=0, le=1)

    model_config = {"frozen": True}

    @property
    def total(self) -> float:
        return self.motif + self.availability + self.experience + self.specialty

    def combine(
        self,
        motif: float,
        availability: float,
        experience: float,
        specialty: float,
    ) -> float:
        """
        Weighted sum of component scores over the weight total.

        The result lies in [0, 1] whenever every component does, including
        for weights that sum to 1 only within tolerance.
        """
        total = self.total
        if total <= 0:
            return 0.0
        weighted = (
            self.motif * motif
            + self.availability * availability
            + self.experience * experience
            + self.specialty * specialty
        )
        return weighted / total


class EligibilityConfig(BaseModel):
    """Hard and soft filter thresholds."""

    require_motif_overlap: bool = False
    require_clientele_match: bool = True
    comfortable_slot_threshold: int = Field(default=2, ge=1)
    soft_min_years_experience: float = Field(default=0.0, ge=0)
    demand_type_specialties: Dict[str, str] = Field(
        default_factory=lambda: {"couple": "couples", "family": "families"}
    )
    legal_context_specialties: List[str] = Field(
        default_factory=lambda: ["mediation", "legal_context"]
    )

    model_config = {"frozen": True}


class ScoringConfig(BaseModel):
    """Normalization parameters for the deterministic scorer."""

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    window_target_slots: int = Field(default=10, ge=1)
    experience_cap_years: float = Field(default=15.0, gt=0)
    proficiency_weights: Dict[str, float] = Field(
        default_factory=lambda: {"primary": 1.0, "secondary": 0.7, "familiar": 0.4}
    )

    model_config = {"frozen": True}


class AdvisoryConfig(BaseModel):
    """Settings for the optional advisory model."""

    enabled: bool = False
    model: str = "llama-3.3-70b-versatile"
    timeout_seconds: float = Field(default=10.0, gt=0)
    max_adjustment: float = Field(
        default=0.1, ge=0, le=0.5,
        description="Largest score delta the advisory layer may apply",
    )
    max_tokens: int = Field(default=2048, ge=1)
    temperature: float = Field(default=0.2, ge=0, le=2)
    system_prompt: Optional[str] = None
    user_prompt_template: Optional[str] = None

    model_config = {"frozen": True}


class CollectorConfig(BaseModel):
    """Settings for the data collector fan-out."""

    max_concurrent_fetches: int = Field(default=8, ge=1, le=64)
    schedule_timezone: str = "UTC"

    model_config = {"frozen": True}

    def clinic_tz(self) -> tzinfo:
        """Time zone in which client schedule preferences are read."""
        if self.schedule_timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.schedule_timezone)


class RecommendationConfig(BaseModel):
    """Root configuration object."""

    key: str = "default"
    version: str = "1.0"
    window_days: int = Field(default=14)
    max_results: int = Field(default=3, ge=1)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    eligibility: EligibilityConfig = Field(default_factory=EligibilityConfig)
    advisory: AdvisoryConfig = Field(default_factory=AdvisoryConfig)
    collector: CollectorConfig = Field(default_factory=CollectorConfig)

    model_config = {"frozen": True, "populate_by_name": True}

    def fingerprint(self) -> str:
        """SHA256 prefix of the canonical JSON form, for audit metadata."""
        canonical = json.dumps(self.model_dump(mode="json"), sort_keys=True)
        return hashlib.sha256(canonical.encode()).hexdigest()[:16]

    def snapshot(self) -> Dict[str, object]:
        return self.model_dump(mode="json")


def get_default_config() -> RecommendationConfig:
    """Configuration used when the store holds none for the requested key."""
    return RecommendationConfig()
