"""
Eligibility Filter Implementation.

Splits the candidate pool into three disjoint groups:
    - Excluded: failed at least one hard rule (or data was unavailable)
    - Near-eligible: passed every hard rule but missed one soft threshold
    - Eligible: everything else, passed on to scoring

Hard rules, in priority order:
    1. data_unavailable
    2. license_inactive
    3. no_availability
    4. demand_type_incompatible
    5. clientele_ineligible
    6. specialty_mismatch
    7. no_motif_overlap (only when configured)

The first failing rule is the reason code; the others are kept as
additional reasons. Soft rules are evaluated only when all hard rules pass.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from demande_recommender.config.models import EligibilityConfig
from demande_recommender.domain.entities import (
    Candidate,
    Demande,
    EligibilityResult,
    ExclusionReason,
    ExclusionRecord,
    NearEligible,
)
from demande_recommender.filters.rules import HARD_RULES, SOFT_RULES, RuleFailure

logger = logging.getLogger(__name__)


class EligibilityFilter:
    """Filter candidates by hard and soft eligibility rules."""

    def __init__(self, config: EligibilityConfig) -> None:
        """
        Initialize with configuration.

        Args:
            config: Eligibility thresholds and mappings
        """
        self.config = config

    @property
    def name(self) -> str:
        """Unique name of this filter stage."""
        return "eligibility_filter"

    def apply(
        self,
        demande: Demande,
        candidates: List[Candidate],
        unavailable: Optional[Dict[str, str]] = None,
    ) -> EligibilityResult:
        """
        Apply eligibility filtering.

        Args:
            demande: The demande being matched
            candidates: Candidates with collected availability
            unavailable: Professional id -> error for candidates whose
                data could not be collected

        Returns:
            EligibilityResult with eligible, excluded and near-eligible
        """
        unavailable = unavailable or {}
        exclusions: List[ExclusionRecord] = [
            ExclusionRecord(
                professional_id=professional_id,
                reason_code=ExclusionReason.DATA_UNAVAILABLE,
                detail=detail,
            )
            for professional_id, detail in unavailable.items()
        ]
        near_eligible: List[NearEligible] = []
        eligible: List[Candidate] = []

        for candidate in candidates:
            if candidate.professional_id in unavailable:
                continue

            exclusion = self._check_hard_rules(candidate, demande)
            if exclusion is not None:
                exclusions.append(exclusion)
                continue

            near = self._check_soft_rules(candidate, demande)
            if near is not None:
                near_eligible.append(near)
                continue

            eligible.append(candidate)

        exclusions.sort(key=lambda e: (e.reason_code.priority, e.professional_id))
        near_eligible.sort(key=lambda n: (n.missed_criterion.priority, n.professional_id))

        logger.debug(
            f"Eligibility for {demande.demande_id}: {len(eligible)} eligible, "
            f"{len(exclusions)} excluded, {len(near_eligible)} near-eligible"
        )
        return EligibilityResult(
            eligible=eligible,
            exclusions=exclusions,
            near_eligible=near_eligible,
        )

    def _check_hard_rules(
        self,
        candidate: Candidate,
        demande: Demande,
    ) -> Optional[ExclusionRecord]:
        """Evaluate every hard rule; first failure becomes the reason code."""
        failures: List[Tuple[ExclusionReason, RuleFailure]] = []
        for reason in ExclusionReason:
            rule = HARD_RULES.get(reason)
            if rule is None:
                continue
            failure = rule(candidate, demande, self.config)
            if failure is not None:
                failures.append((reason, failure))

        if not failures:
            return None

        reason, first = failures[0]
        return ExclusionRecord(
            professional_id=candidate.professional_id,
            reason_code=reason,
            detail=first.detail,
            context=first.context,
            additional_reasons=[r for r, _ in failures[1:]],
        )

    def _check_soft_rules(
        self,
        candidate: Candidate,
        demande: Demande,
    ) -> Optional[NearEligible]:
        """Return the first missed soft criterion, if any."""
        for criterion, rule in SOFT_RULES.items():
            failure = rule(candidate, demande, self.config)
            if failure is not None:
                return NearEligible(
                    professional_id=candidate.professional_id,
                    missed_criterion=criterion,
                    gap=failure.gap,
                    gap_label=failure.gap_label,
                    next_available_slot=candidate.availability.next_slot,
                )
        return None
