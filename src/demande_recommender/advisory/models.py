"""
Advisory Models.

Shapes exchanged with the advisory model. Adjustments are expressed on a
-5..+5 scale and converted to a bounded score delta by the assembler.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

MAX_RANKING_ADJUSTMENT = 5.0


class HolisticCategory(str, Enum):
    """Primary holistic intent detected in client text."""

    BODY = "body"
    ENERGY = "energy"
    LIFESTYLE = "lifestyle"
    GLOBAL = "global"
    NONE = "none"


class HolisticSignal(BaseModel):
    """Holistic-intent classification of the sanitized client text."""

    score: float = Field(default=0.0, ge=0, le=1)
    category: HolisticCategory = HolisticCategory.NONE
    matched_keywords: List[str] = Field(default_factory=list)
    recommend_naturopath: bool = False
    has_clinical_override: bool = False
    clinical_keywords_found: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class AdvisoryRanking(BaseModel):
    """Advisory opinion on one candidate."""

    professional_id: str
    ranking_adjustment: float = Field(
        default=0.0, ge=-MAX_RANKING_ADJUSTMENT, le=MAX_RANKING_ADJUSTMENT
    )
    reasoning: List[str] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0, le=1)

    model_config = {"frozen": True}


class ExtractedPreferences(BaseModel):
    """Preferences the advisory model read from the client text."""

    preferred_timing: Optional[str] = None
    preferred_modality: Optional[str] = None
    other_constraints: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class AdvisoryOutput(BaseModel):
    """Complete advisory response."""

    rankings: List[AdvisoryRanking] = Field(default_factory=list)
    extracted_preferences: ExtractedPreferences = Field(
        default_factory=ExtractedPreferences
    )
    summary: Optional[str] = None

    model_config = {"frozen": True}

    def by_professional(self) -> Dict[str, AdvisoryRanking]:
        return {r.professional_id: r for r in self.rankings}
