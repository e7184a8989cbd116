"""
Unit Tests for the Holistic Intent Classifier.

Test Aspects Covered:
    ✅ Business Logic: Category precedence, scoring, naturopath flag
    ✅ Edge Cases: Empty text, accents, word prefixes
"""

from __future__ import annotations

import pytest

from demande_recommender.advisory.holistic import (
    classify_holistic_intent,
    contains_keyword,
    normalize_text,
)
from demande_recommender.advisory.models import HolisticCategory


class TestNormalization:
    """Test cases for text normalization and keyword matching."""

    def test_strips_accents_and_case(self) -> None:
        assert normalize_text("  Énergie   et  SOMMEIL ") == "energie et sommeil"

    def test_single_word_matches_prefix(self) -> None:
        """
        SCENARIO: Plural form of a keyword
        EXPECTED: Matched as a word prefix
        """
        assert contains_keyword(normalize_text("pensées suicidaires"), "suicidaire")

    def test_single_word_needs_word_start(self) -> None:
        """
        SCENARIO: Keyword appears inside another word
        EXPECTED: Not matched
        """
        assert not contains_keyword(normalize_text("anticorps"), "corps")

    def test_phrase_matches_as_written(self) -> None:
        assert contains_keyword(normalize_text("Mon mode de vie est chaotique"), "mode de vie")


class TestClassifyHolisticIntent:
    """Test cases for classify_holistic_intent."""

    def test_empty_text_is_neutral(self) -> None:
        """
        SCENARIO: No client text
        EXPECTED: Score 0, category none, no recommendation
        """
        signal = classify_holistic_intent("   ")

        assert signal.score == 0.0
        assert signal.category == HolisticCategory.NONE
        assert signal.recommend_naturopath is False

    def test_single_body_keyword(self) -> None:
        """
        SCENARIO: One body keyword
        EXPECTED: Body category, score 0.2 + 0.1
        """
        signal = classify_holistic_intent("Problèmes de digestion")

        assert signal.category == HolisticCategory.BODY
        assert signal.score == pytest.approx(0.3)
        assert signal.recommend_naturopath is False

    def test_multi_category_recommends_naturopath(self) -> None:
        """
        SCENARIO: Global, energy and body keywords, no crisis words
        EXPECTED: Global category wins, score above threshold
        """
        # Arrange
        text = "Je cherche une approche globale pour ma fatigue et ma digestion."

        # Act
        signal = classify_holistic_intent(text)

        # Assert
        assert signal.category == HolisticCategory.GLOBAL
        # 0.5 + 0.3 + 0.3 + 0.15 + 0.1, capped
        assert signal.score == pytest.approx(1.0)
        assert signal.recommend_naturopath is True
        assert signal.has_clinical_override is False

    def test_clinical_keywords_override(self) -> None:
        """
        SCENARIO: Strong holistic signal with a crisis keyword
        EXPECTED: No naturopath recommendation, keywords reported
        """
        text = "Approche globale souhaitée, fatigue, mais idées noires récentes."

        signal = classify_holistic_intent(text)

        assert signal.score >= 0.5
        assert signal.has_clinical_override is True
        assert "idées noires" in signal.clinical_keywords_found
        assert signal.recommend_naturopath is False
