"""
Unit Tests for RecommendationAssembler.

Test Aspects Covered:
    ✅ Business Logic: Bounded merge, truncation, reasoning
    ✅ Invariants: Advice cannot overturn a large deterministic gap
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

import pytest

from demande_recommender.advisory.models import (
    AdvisoryOutput,
    AdvisoryRanking,
    ExtractedPreferences,
)
from demande_recommender.config.models import EligibilityConfig, ScoringConfig
from demande_recommender.domain.entities import (
    Demande,
    EligibilityResult,
    GenerationMetadata,
    ScoredCandidate,
)
from demande_recommender.pipeline.assembler import RecommendationAssembler, bounded_delta
from demande_recommender.scoring.deterministic import DeterministicScorer
from tests.fixtures import CandidateFactory


@pytest.fixture
def scored(adult_demande: Demande, make_candidate: CandidateFactory) -> List[ScoredCandidate]:
    scorer = DeterministicScorer(ScoringConfig(), EligibilityConfig())
    return scorer.score(
        adult_demande,
        [
            make_candidate("pro-a", slots=10, years=15, motifs=("anxiety", "depression")),
            make_candidate("pro-b", slots=6, years=8),
            make_candidate("pro-c", slots=6, years=7),
            make_candidate("pro-d", slots=1, years=1, motifs=()),
        ],
    )


def _advice(**adjustments: float) -> AdvisoryOutput:
    return AdvisoryOutput(
        rankings=[
            AdvisoryRanking(professional_id=pid.replace("_", "-"), ranking_adjustment=adj, reasoning=["r"])
            for pid, adj in adjustments.items()
        ],
        extracted_preferences=ExtractedPreferences(preferred_modality="en ligne"),
        summary="Résumé.",
    )


class TestBoundedDelta:
    """Test cases for the score delta formula."""

    def test_full_adjustment_is_max(self) -> None:
        ranking = AdvisoryRanking(professional_id="p", ranking_adjustment=5)

        assert bounded_delta(ranking, 0.1) == pytest.approx(0.1)

    def test_scaled_by_confidence(self) -> None:
        ranking = AdvisoryRanking(professional_id="p", ranking_adjustment=-2.5, confidence=0.5)

        assert bounded_delta(ranking, 0.2) == pytest.approx(-0.05)


class TestRank:
    """Test cases for merging and truncation."""

    def test_deterministic_only(self, scored: List[ScoredCandidate]) -> None:
        """
        SCENARIO: No advisory output
        EXPECTED: Deterministic order, final == total, truncated to 3
        """
        # Arrange
        assembler = RecommendationAssembler(max_results=3, max_adjustment=0.1)

        # Act
        ranked = assembler.rank(scored, None, requested_motifs=2)

        # Assert
        assert [r.professional_id for r in ranked] == ["pro-a", "pro-b", "pro-c"]
        assert [r.rank for r in ranked] == [1, 2, 3]
        for r, s in zip(ranked, scored):
            assert r.final_score == s.total
            assert r.advisory_applied is False
            assert r.advisory_adjustment is None
        assert ranked[0].reasoning[0] == "2/2 motifs correspondants"

    def test_advice_reorders_close_candidates(self, scored: List[ScoredCandidate]) -> None:
        """
        SCENARIO: pro-c trails pro-b slightly; advisor favours pro-c
        EXPECTED: pro-c moves ahead of pro-b
        """
        assembler = RecommendationAssembler(max_results=4, max_adjustment=0.1)

        ranked = assembler.rank(scored, _advice(pro_b=-2, pro_c=4))

        order = [r.professional_id for r in ranked]
        assert order.index("pro-c") < order.index("pro-b")
        pro_c = next(r for r in ranked if r.professional_id == "pro-c")
        assert pro_c.advisory_applied is True
        assert pro_c.advisory_adjustment == 4
        assert pro_c.reasoning == ["r"]

    def test_advice_cannot_overturn_large_gap(self, scored: List[ScoredCandidate]) -> None:
        """
        SCENARIO: Advisor maximally favours the weakest, penalizes the best
        EXPECTED: Best stays first since the gap exceeds 2 * max_adjustment
        """
        assembler = RecommendationAssembler(max_results=4, max_adjustment=0.1)

        ranked = assembler.rank(scored, _advice(pro_a=-5, pro_d=5))

        assert ranked[0].professional_id == "pro-a"
        assert ranked[-1].professional_id == "pro-d"

    def test_final_score_clamped(self, scored: List[ScoredCandidate]) -> None:
        assembler = RecommendationAssembler(max_results=1, max_adjustment=0.5)

        ranked = assembler.rank(scored, _advice(pro_a=5))

        assert ranked[0].final_score == 1.0


class TestAssemble:
    """Test cases for result assembly."""

    def test_builds_recommendation(self, scored: List[ScoredCandidate]) -> None:
        """
        SCENARIO: Assemble with advisory output
        EXPECTED: Summary, preferences and metadata carried over
        """
        # Arrange
        assembler = RecommendationAssembler(max_results=3, max_adjustment=0.1)
        advice = _advice(pro_a=1)
        ranked = assembler.rank(scored, advice)
        metadata = GenerationMetadata(
            generated_at=datetime(2026, 3, 2, tzinfo=timezone.utc),
            run_sequence=1,
            config_key="default",
            config_fingerprint="abc",
            ai_assisted=True,
        )

        # Act
        recommendation = assembler.assemble(
            demande_id="DEM-1",
            run_token="tok",
            ranked=ranked,
            eligibility=EligibilityResult(),
            near_eligible=[],
            metadata=metadata,
            advisory=advice,
        )

        # Assert
        assert recommendation.recommendation_id
        assert recommendation.ranked_ids == [r.professional_id for r in ranked]
        assert recommendation.advisory_summary == "Résumé."
        assert recommendation.extracted_preferences["preferred_modality"] == "en ligne"
        assert recommendation.ai_assisted is True
