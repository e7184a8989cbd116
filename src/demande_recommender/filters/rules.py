"""
Eligibility Rules.

Each rule inspects one candidate against the demande and returns None when
the candidate passes, or a RuleFailure describing the miss. Hard rules are
keyed by ExclusionReason and soft rules by SoftCriterion; the filter
evaluates them in the enum declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from demande_recommender.config.models import EligibilityConfig
from demande_recommender.domain.entities import (
    Candidate,
    Demande,
    ExclusionReason,
    SoftCriterion,
)


@dataclass(frozen=True)
class RuleFailure:
    """Why a single rule failed."""
    detail: str
    context: Dict[str, Any] = field(default_factory=dict)
    gap: float = 0.0
    gap_label: str = ""


Rule = Callable[[Candidate, Demande, EligibilityConfig], Optional[RuleFailure]]


def _plural(count: float, unit: str) -> str:
    return f"{count:g} {unit}" if count == 1 else f"{count:g} {unit}s"


# =============================================================================
# Hard rules
# =============================================================================


def check_license(candidate: Candidate, demande: Demande, config: EligibilityConfig) -> Optional[RuleFailure]:
    if candidate.is_active:
        return None
    return RuleFailure(
        detail=f"status={candidate.status} is not active",
        context={"status": candidate.status},
    )


def check_availability(candidate: Candidate, demande: Demande, config: EligibilityConfig) -> Optional[RuleFailure]:
    if candidate.availability.slots_in_window > 0:
        return None
    return RuleFailure(detail="no open slot in window", context={"slots_in_window": 0})


def check_demand_type(candidate: Candidate, demande: Demande, config: EligibilityConfig) -> Optional[RuleFailure]:
    required = config.demand_type_specialties.get(demande.demand_type.value)
    if not required or required in candidate.specialty_codes:
        return None
    return RuleFailure(
        detail=f"demand_type={demande.demand_type.value} requires specialty '{required}'",
        context={"demand_type": demande.demand_type.value, "required_specialty": required},
    )


def check_clientele(candidate: Candidate, demande: Demande, config: EligibilityConfig) -> Optional[RuleFailure]:
    # Passes when no category could be derived or any one is covered
    if not config.require_clientele_match or not demande.population_categories:
        return None
    requested = [c.value for c in demande.population_categories]
    covered = [c for c in requested if c in candidate.specialty_codes]
    if covered:
        return None
    return RuleFailure(
        detail=f"clientele not covered: {', '.join(requested)}",
        context={"requested_clientele": requested},
    )


def check_required_specialties(candidate: Candidate, demande: Demande, config: EligibilityConfig) -> Optional[RuleFailure]:
    missing = sorted(demande.required_specialties - candidate.specialty_codes)
    if not missing:
        return None
    return RuleFailure(
        detail=f"missing required specialties: {', '.join(missing)}",
        context={"missing_specialties": missing},
    )


def check_motif_overlap(candidate: Candidate, demande: Demande, config: EligibilityConfig) -> Optional[RuleFailure]:
    if not config.require_motif_overlap or not demande.motif_keys:
        return None
    if demande.motif_keys & candidate.motif_keys:
        return None
    return RuleFailure(
        detail="no requested motif in candidate's motifs",
        context={"requested_motifs": sorted(demande.motif_keys)},
    )


HARD_RULES: Dict[ExclusionReason, Rule] = {
    ExclusionReason.LICENSE_INACTIVE: check_license,
    ExclusionReason.NO_AVAILABILITY: check_availability,
    ExclusionReason.DEMAND_TYPE_INCOMPATIBLE: check_demand_type,
    ExclusionReason.CLIENTELE_INELIGIBLE: check_clientele,
    ExclusionReason.SPECIALTY_MISMATCH: check_required_specialties,
    ExclusionReason.NO_MOTIF_OVERLAP: check_motif_overlap,
}


# =============================================================================
# Soft rules
# =============================================================================


def check_limited_availability(candidate: Candidate, demande: Demande, config: EligibilityConfig) -> Optional[RuleFailure]:
    slots = candidate.availability.slots_in_window
    threshold = config.comfortable_slot_threshold
    if slots == 0 or slots >= threshold:
        return None
    gap = threshold - slots
    return RuleFailure(
        detail=f"{slots} open slots, below comfortable threshold {threshold}",
        context={"slots_in_window": slots, "threshold": threshold},
        gap=float(gap),
        gap_label=f"{_plural(gap, 'slot')} short",
    )


def check_limited_experience(candidate: Candidate, demande: Demande, config: EligibilityConfig) -> Optional[RuleFailure]:
    minimum = config.soft_min_years_experience
    if minimum <= 0 or candidate.years_experience >= minimum:
        return None
    gap = minimum - candidate.years_experience
    return RuleFailure(
        detail=f"{candidate.years_experience:g} years of experience, below {minimum:g}",
        context={"years_experience": candidate.years_experience, "minimum": minimum},
        gap=gap,
        gap_label=f"{_plural(round(gap, 1), 'year')} short",
    )


SOFT_RULES: Dict[SoftCriterion, Rule] = {
    SoftCriterion.LIMITED_AVAILABILITY: check_limited_availability,
    SoftCriterion.LIMITED_EXPERIENCE: check_limited_experience,
}
