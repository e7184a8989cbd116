"""
Row Mappers - Validated Store Rows to Domain Entities.

Raw rows from the data source are validated through explicit Pydantic row
schemas before being turned into domain entities. Any schema violation
surfaces as RecordMappingError; the caller decides whether it is fatal.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import AbstractSet, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from demande_recommender.collection.population import derive_population_categories
from demande_recommender.collection.schedule import filters_slots, matches_schedule
from demande_recommender.domain.entities import (
    Candidate,
    Demande,
    DemandType,
    ProficiencyLevel,
    Profession,
    SchedulePreference,
    Specialty,
    UrgencyLevel,
)
from demande_recommender.domain.exceptions import RecordMappingError
from demande_recommender.domain.value_objects import (
    AvailabilitySummary,
    AvailabilityWindow,
    RawRow,
)

# Open time is counted in whole slots of this length
SLOT_MINUTES = 60


# =============================================================================
# Row schemas
# =============================================================================


class ParticipantRow(BaseModel):
    birthdate: Optional[date] = None


class RequestRow(BaseModel):
    """Schema of a request row joined with its participants."""

    demande_id: str = Field(..., min_length=1)
    demand_type: DemandType
    urgency: Optional[UrgencyLevel] = None
    motif_keys: List[str] = Field(default_factory=list)
    motif_description: Optional[str] = None
    other_motif_text: Optional[str] = None
    notes: Optional[str] = None
    has_legal_context: bool = False
    required_specialties: List[str] = Field(default_factory=list)
    participants: List[ParticipantRow] = Field(default_factory=list)
    schedule_preferences: List[SchedulePreference] = Field(default_factory=list)


class ProfessionRow(BaseModel):
    title_key: str = Field(..., min_length=1)
    category_key: str = Field(..., min_length=1)
    label: str = ""
    is_primary: bool = False


class SpecialtyRow(BaseModel):
    code: str = Field(..., min_length=1)
    category: str = ""
    proficiency: Optional[ProficiencyLevel] = None


class ProfessionalRow(BaseModel):
    """Schema of a roster row joined with professions, specialties and motifs."""

    professional_id: str = Field(..., min_length=1)
    display_name: str = ""
    status: str = "active"
    years_experience: Optional[float] = Field(default=None, ge=0)
    professions: List[ProfessionRow] = Field(default_factory=list)
    specialties: List[SpecialtyRow] = Field(default_factory=list)
    motif_keys: List[str] = Field(default_factory=list)


class SlotRow(BaseModel):
    """One open availability block."""

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "SlotRow":
        if self.end <= self.start:
            raise ValueError("slot end must be after slot start")
        return self


# =============================================================================
# Mapping functions
# =============================================================================


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )


def _row_id(row: RawRow, key: str) -> Optional[str]:
    value = row.get(key) if hasattr(row, "get") else None
    return str(value) if value else None


def map_request(row: RawRow, as_of: date) -> Demande:
    """
    Map a raw request row to a Demande.

    Args:
        row: Raw request row
        as_of: Reference date for population categories

    Raises:
        RecordMappingError: If the row does not match RequestRow
    """
    try:
        parsed = RequestRow.model_validate(dict(row))
    except (ValidationError, TypeError, ValueError) as e:
        detail = _describe(e) if isinstance(e, ValidationError) else str(e)
        raise RecordMappingError("request", _row_id(row, "demande_id"), detail) from e

    return Demande(
        demande_id=parsed.demande_id,
        demand_type=parsed.demand_type,
        urgency=parsed.urgency or UrgencyLevel.LOW,
        motif_keys=frozenset(parsed.motif_keys),
        motif_description=parsed.motif_description or "",
        other_motif_text=parsed.other_motif_text or "",
        notes=parsed.notes or "",
        has_legal_context=parsed.has_legal_context,
        required_specialties=frozenset(parsed.required_specialties),
        population_categories=derive_population_categories(
            (p.birthdate for p in parsed.participants), as_of
        ),
        schedule_preferences=frozenset(parsed.schedule_preferences),
    )


def map_professional(row: RawRow) -> Candidate:
    """
    Map a raw roster row to a Candidate without availability.

    Raises:
        RecordMappingError: If the row does not match ProfessionalRow
    """
    try:
        parsed = ProfessionalRow.model_validate(dict(row))
    except (ValidationError, TypeError, ValueError) as e:
        detail = _describe(e) if isinstance(e, ValidationError) else str(e)
        raise RecordMappingError(
            "professional", _row_id(row, "professional_id"), detail
        ) from e

    return Candidate(
        professional_id=parsed.professional_id,
        display_name=parsed.display_name,
        status=parsed.status,
        years_experience=parsed.years_experience or 0.0,
        professions=tuple(Profession(**p.model_dump()) for p in parsed.professions),
        specialties=tuple(Specialty(**s.model_dump()) for s in parsed.specialties),
        motif_keys=frozenset(parsed.motif_keys),
    )


def summarize_availability(
    professional_id: str,
    rows: List[RawRow],
    window: AvailabilityWindow,
    preferences: AbstractSet[SchedulePreference] = frozenset(),
    clinic_tz: tzinfo = timezone.utc,
) -> AvailabilitySummary:
    """
    Summarize open slot rows inside the window.

    Blocks are clipped to the window. Each block contributes its whole
    number of SLOT_MINUTES slots; the next slot is the earliest clipped
    block start that holds at least one slot.

    With schedule preferences, only slots whose start suits the client
    (in clinic_tz) are counted, and open hours cover those slots only.

    Raises:
        RecordMappingError: If any slot row is malformed
    """
    try:
        slots = [SlotRow.model_validate(dict(r)) for r in rows]
    except (ValidationError, TypeError, ValueError) as e:
        detail = _describe(e) if isinstance(e, ValidationError) else str(e)
        raise RecordMappingError("availability", professional_id, detail) from e

    slot_length = timedelta(minutes=SLOT_MINUTES)
    filtered = filters_slots(preferences)
    slot_count = 0
    open_minutes = 0.0
    next_slot: Optional[datetime] = None

    for slot in sorted(slots, key=lambda s: s.start):
        start = max(slot.start, window.start)
        end = min(slot.end, window.end)
        if end <= start:
            continue

        block = end - start
        block_slots = block // slot_length
        if not filtered:
            open_minutes += block.total_seconds() / 60
            slot_count += block_slots
            if next_slot is None and block_slots > 0:
                next_slot = start
            continue

        for i in range(block_slots):
            slot_start = start + i * slot_length
            if not matches_schedule(slot_start, preferences, clinic_tz):
                continue
            slot_count += 1
            open_minutes += SLOT_MINUTES
            if next_slot is None:
                next_slot = slot_start

    return AvailabilitySummary(
        slots_in_window=slot_count,
        next_slot=next_slot,
        hours_available=round(open_minutes / 60, 1),
    )
