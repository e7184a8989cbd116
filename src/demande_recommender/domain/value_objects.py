"""
Value Objects for Domain Layer.

Value objects are immutable objects that describe characteristics of entities
but have no conceptual identity.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# Type Aliases for improved readability
# =============================================================================

# Raw store row, before validated mapping
RawRow = Mapping[str, Any]


class AvailabilityWindow(BaseModel):
    """Lookahead window in which open slots are counted."""

    start: datetime
    end: datetime

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "AvailabilityWindow":
        if self.end <= self.start:
            raise ValueError("window end must be after window start")
        return self

    @classmethod
    def starting_at(cls, start: datetime, days: int) -> "AvailabilityWindow":
        return cls(start=start, end=start + timedelta(days=days))


class AvailabilitySummary(BaseModel):
    """Open capacity of one professional inside the window."""

    slots_in_window: int = Field(default=0, ge=0)
    next_slot: Optional[datetime] = None
    hours_available: float = Field(default=0.0, ge=0)

    model_config = {"frozen": True}


class DeterministicScores(BaseModel):
    """Reproducible score breakdown for one candidate. All values in [0, 1]."""

    motif_score: float = Field(..., ge=0, le=1)
    availability_score: float = Field(..., ge=0, le=1)
    experience_score: float = Field(..., ge=0, le=1)
    specialty_score: float = Field(..., ge=0, le=1)
    total: float = Field(..., ge=0, le=1)
    matched_motifs: List[str] = Field(default_factory=list)
    matched_specialties: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}
