"""
Recommendation Assembler - Merge Deterministic and Advisory Signals.

Final score per candidate:

    delta = (ranking_adjustment / 5) * max_adjustment * confidence
    final = clamp(total + delta, 0, 1)

Since |delta| <= max_adjustment, advice can only reorder candidates whose
deterministic totals are within 2 * max_adjustment of each other.
Candidates are ordered by final score descending, ties by professional id,
and truncated to max_results.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from demande_recommender.advisory.models import (
    MAX_RANKING_ADJUSTMENT,
    AdvisoryOutput,
    AdvisoryRanking,
)
from demande_recommender.domain.entities import (
    DemandeRecommendation,
    EligibilityResult,
    GenerationMetadata,
    NearEligible,
    RankedProfessional,
    ScoredCandidate,
)


@dataclass(frozen=True)
class _Merged:
    scored: ScoredCandidate
    final_score: float
    advice: Optional[AdvisoryRanking]


def bounded_delta(ranking: AdvisoryRanking, max_adjustment: float) -> float:
    """Score delta contributed by one advisory ranking."""
    return (
        ranking.ranking_adjustment / MAX_RANKING_ADJUSTMENT
        * max_adjustment
        * ranking.confidence
    )


def deterministic_reasoning(scored: ScoredCandidate, requested_motifs: int) -> List[str]:
    """Explanation bullets derived from the score breakdown alone."""
    scores = scored.scores
    candidate = scored.candidate
    bullets: List[str] = []
    if requested_motifs:
        bullets.append(
            f"{len(scores.matched_motifs)}/{requested_motifs} motifs correspondants"
        )
    bullets.append(
        f"{candidate.availability.slots_in_window} plages disponibles dans la fenêtre"
    )
    bullets.append(f"{candidate.years_experience:g} ans d'expérience")
    if scores.matched_specialties:
        bullets.append(
            "Spécialités pertinentes: " + ", ".join(scores.matched_specialties)
        )
    return bullets


class RecommendationAssembler:
    """Builds the final ranked result of a run."""

    def __init__(self, max_results: int, max_adjustment: float) -> None:
        """
        Initialize the assembler.

        Args:
            max_results: Length of the shortlist
            max_adjustment: Largest score delta advice may apply
        """
        self.max_results = max_results
        self.max_adjustment = max_adjustment

    @property
    def name(self) -> str:
        return "assembler"

    def rank(
        self,
        scored: List[ScoredCandidate],
        advisory: Optional[AdvisoryOutput],
        requested_motifs: int = 0,
    ) -> List[RankedProfessional]:
        """
        Merge scores with advice and return the shortlist.

        Args:
            scored: Deterministically scored candidates
            advisory: Advisory output, or None for a deterministic run
            requested_motifs: Number of motifs on the demande, for reasoning

        Returns:
            Ranked professionals, best first, at most max_results
        """
        advice = advisory.by_professional() if advisory else {}

        merged: List[_Merged] = []
        for item in scored:
            ranking = advice.get(item.professional_id)
            final = item.total
            if ranking is not None:
                final = min(max(final + bounded_delta(ranking, self.max_adjustment), 0.0), 1.0)
            merged.append(_Merged(scored=item, final_score=final, advice=ranking))

        merged.sort(key=lambda m: (-m.final_score, m.scored.professional_id))

        ranked: List[RankedProfessional] = []
        for rank, entry in enumerate(merged[: self.max_results], start=1):
            item = entry.scored
            candidate = item.candidate
            reasoning = (
                list(entry.advice.reasoning)
                if entry.advice is not None and entry.advice.reasoning
                else deterministic_reasoning(item, requested_motifs)
            )
            ranked.append(
                RankedProfessional(
                    professional_id=item.professional_id,
                    rank=rank,
                    final_score=entry.final_score,
                    scores=item.scores,
                    advisory_applied=entry.advice is not None,
                    advisory_adjustment=(
                        entry.advice.ranking_adjustment if entry.advice is not None else None
                    ),
                    reasoning=reasoning,
                    matched_motifs=item.scores.matched_motifs,
                    matched_specialties=item.scores.matched_specialties,
                    available_slot_count=candidate.availability.slots_in_window,
                    next_available_slot=candidate.availability.next_slot,
                )
            )
        return ranked

    def assemble(
        self,
        demande_id: str,
        run_token: str,
        ranked: List[RankedProfessional],
        eligibility: EligibilityResult,
        near_eligible: List[NearEligible],
        metadata: GenerationMetadata,
        advisory: Optional[AdvisoryOutput] = None,
    ) -> DemandeRecommendation:
        """Combine every artifact of the run into the final result."""
        preferences: Optional[Dict[str, Any]] = None
        if advisory is not None:
            preferences = advisory.extracted_preferences.model_dump()

        return DemandeRecommendation(
            recommendation_id=str(uuid.uuid4()),
            demande_id=demande_id,
            run_token=run_token,
            recommendations=ranked,
            exclusions=eligibility.exclusions,
            near_eligible=near_eligible,
            advisory_summary=advisory.summary if advisory is not None else None,
            extracted_preferences=preferences,
            metadata=metadata,
        )

