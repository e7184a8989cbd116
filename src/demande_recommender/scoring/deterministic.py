"""
Deterministic Scorer.

Computes a reproducible score for each eligible candidate. Every component
lies in [0, 1]:

    motif         matched requested motifs / requested motifs (0 if none)
    availability  min(slots in window / window_target_slots, 1)
    experience    min(years / experience_cap_years, 1)
    specialty     sum of proficiency weights of matched relevant specialties
                  / number of relevant specialties, capped at 1; 1.0 when
                  the demande has no relevant specialty

Relevant specialties are the demande's population categories, the specialty
mapped to its demand type, the legal-context specialties when the demande
has a legal context, and any explicitly required specialty.

total = sum(weight_i * component_i) / sum(weight_i). Results are ordered
by total descending, ties broken by professional id ascending.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, List, Tuple

from demande_recommender.config.models import EligibilityConfig, ScoringConfig
from demande_recommender.domain.entities import (
    Candidate,
    Demande,
    ProficiencyLevel,
    ScoredCandidate,
)
from demande_recommender.domain.value_objects import DeterministicScores

logger = logging.getLogger(__name__)


class DeterministicScorer:
    """Weighted, reproducible candidate scoring."""

    def __init__(
        self,
        scoring: ScoringConfig,
        eligibility: EligibilityConfig,
    ) -> None:
        self.scoring = scoring
        self.eligibility = eligibility

    @property
    def name(self) -> str:
        return "deterministic_scorer"

    def score(
        self,
        demande: Demande,
        candidates: List[Candidate],
    ) -> List[ScoredCandidate]:
        """
        Score and order candidates.

        Args:
            demande: The demande being matched
            candidates: Eligible candidates

        Returns:
            Scored candidates, best first
        """
        relevant = self.relevant_specialties(demande)
        scored = [
            ScoredCandidate(
                candidate=candidate,
                scores=self.score_candidate(demande, candidate, relevant),
            )
            for candidate in candidates
        ]
        scored.sort(key=lambda s: (-s.total, s.professional_id))
        return scored

    def relevant_specialties(self, demande: Demande) -> FrozenSet[str]:
        """Specialty codes that count toward the specialty component."""
        codes = {c.value for c in demande.population_categories}
        demand_type_specialty = self.eligibility.demand_type_specialties.get(
            demande.demand_type.value
        )
        if demand_type_specialty:
            codes.add(demand_type_specialty)
        if demande.has_legal_context:
            codes.update(self.eligibility.legal_context_specialties)
        codes.update(demande.required_specialties)
        return frozenset(codes)

    def score_candidate(
        self,
        demande: Demande,
        candidate: Candidate,
        relevant: FrozenSet[str],
    ) -> DeterministicScores:
        """Compute the full score breakdown for one candidate."""
        motif_score, matched_motifs = self._motif_score(demande, candidate)
        specialty_score, matched_specialties = self._specialty_score(candidate, relevant)
        availability_score = min(
            candidate.availability.slots_in_window / self.scoring.window_target_slots,
            1.0,
        )
        experience_score = min(
            candidate.years_experience / self.scoring.experience_cap_years, 1.0
        )

        total = self.scoring.weights.combine(
            motif_score, availability_score, experience_score, specialty_score
        )

        return DeterministicScores(
            motif_score=motif_score,
            availability_score=availability_score,
            experience_score=experience_score,
            specialty_score=specialty_score,
            total=total,
            matched_motifs=matched_motifs,
            matched_specialties=matched_specialties,
        )

    def _motif_score(
        self,
        demande: Demande,
        candidate: Candidate,
    ) -> Tuple[float, List[str]]:
        if not demande.motif_keys:
            return 0.0, []
        matched = sorted(demande.motif_keys & candidate.motif_keys)
        return len(matched) / len(demande.motif_keys), matched

    def _specialty_score(
        self,
        candidate: Candidate,
        relevant: FrozenSet[str],
    ) -> Tuple[float, List[str]]:
        if not relevant:
            return 1.0, []

        weights = self.scoring.proficiency_weights
        earned = 0.0
        matched: List[str] = []
        for specialty in candidate.specialties:
            if specialty.code not in relevant or specialty.code in matched:
                continue
            level = specialty.proficiency or ProficiencyLevel.FAMILIAR
            earned += weights.get(level.value, 0.0)
            matched.append(specialty.code)

        return min(earned / len(relevant), 1.0), sorted(matched)
