"""
Unit Tests for GroqAdvisor and Response Parsing.

Test Aspects Covered:
    ✅ Business Logic: Request shape, response normalization
    ✅ Error Handling: Missing key, API errors, timeouts, bad JSON
    ✅ Edge Cases: Code fences, unknown ids, missing ids, out-of-range values
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import groq
import httpx
import pytest

from demande_recommender.advisory.groq_advisor import (
    NEUTRAL_REASONING,
    GroqAdvisor,
    parse_advisory_response,
)
from demande_recommender.config.models import AdvisoryConfig
from demande_recommender.domain.exceptions import AdvisoryTimeout, AdvisoryUnavailable
from demande_recommender.sanitization.models import AdvisoryInput, SanitizedCandidate

GROQ_CLS = "demande_recommender.advisory.groq_advisor.Groq"


def _mock_groq_response(content: str) -> MagicMock:
    response = MagicMock()
    response.choices[0].message.content = content
    return response


def _candidate(pid: str, score: float) -> SanitizedCandidate:
    return SanitizedCandidate(
        id=pid,
        profession_type="psychologist",
        deterministic_score=score,
        matched_motif_count=1,
        available_slot_count=4,
        years_experience=5.0,
    )


@pytest.fixture
def advisory_input() -> AdvisoryInput:
    return AdvisoryInput(
        demand_type="individual",
        urgency="low",
        motif_keys=["anxiety"],
        client_text="Anxiété au travail.",
        candidates=[_candidate("pro-1", 0.8), _candidate("pro-2", 0.7)],
    )


@pytest.fixture
def settings() -> AdvisoryConfig:
    return AdvisoryConfig(enabled=True, model="llama-test", timeout_seconds=4)


class TestParseAdvisoryResponse:
    """Test cases for response normalization."""

    def test_parses_valid_response(self) -> None:
        """
        SCENARIO: Well-formed JSON for both candidates
        EXPECTED: Rankings in candidate order with values kept
        """
        # Arrange
        content = json.dumps(
            {
                "extracted_preferences": {"preferred_timing": "soirs"},
                "rankings": [
                    {"professional_id": "pro-2", "ranking_adjustment": 2, "reasoning": ["b"], "confidence": 0.9},
                    {"professional_id": "pro-1", "ranking_adjustment": -1, "reasoning": ["a"]},
                ],
                "summary": "Deux options.",
            }
        )

        # Act
        output = parse_advisory_response(content, ["pro-1", "pro-2"])

        # Assert
        assert [r.professional_id for r in output.rankings] == ["pro-1", "pro-2"]
        assert output.rankings[1].ranking_adjustment == 2
        assert output.rankings[1].confidence == 0.9
        assert output.extracted_preferences.preferred_timing == "soirs"
        assert output.summary == "Deux options."

    def test_strips_code_fence(self) -> None:
        content = '```json\n{"rankings": [{"professional_id": "pro-1"}]}\n```'

        output = parse_advisory_response(content, ["pro-1"])

        assert output.rankings[0].professional_id == "pro-1"

    def test_unknown_ids_dropped_missing_filled(self) -> None:
        """
        SCENARIO: Model invents an id and skips a real one
        EXPECTED: Invented id dropped, skipped id neutral
        """
        content = json.dumps(
            {"rankings": [{"professional_id": "pro-999", "ranking_adjustment": 5}]}
        )

        output = parse_advisory_response(content, ["pro-1"])

        assert len(output.rankings) == 1
        assert output.rankings[0].professional_id == "pro-1"
        assert output.rankings[0].ranking_adjustment == 0.0
        assert output.rankings[0].reasoning == [NEUTRAL_REASONING]

    def test_clamps_out_of_range(self) -> None:
        """
        SCENARIO: Adjustment 12 and confidence 3
        EXPECTED: Clamped to 5 and 1
        """
        content = json.dumps(
            {"rankings": [{"professional_id": "pro-1", "ranking_adjustment": 12, "confidence": 3}]}
        )

        ranking = parse_advisory_response(content, ["pro-1"]).rankings[0]

        assert ranking.ranking_adjustment == 5.0
        assert ranking.confidence == 1.0

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(AdvisoryUnavailable):
            parse_advisory_response("I think pro-1 is best", ["pro-1"])

    def test_wrong_shape_raises(self) -> None:
        with pytest.raises(AdvisoryUnavailable):
            parse_advisory_response('{"rankings": "pro-1"}', ["pro-1"])


class TestGroqAdvisor:
    """Test cases for GroqAdvisor."""

    @patch(GROQ_CLS)
    def test_sends_json_mode_request(
        self,
        mock_groq_cls: MagicMock,
        settings: AdvisoryConfig,
        advisory_input: AdvisoryInput,
    ) -> None:
        """
        SCENARIO: Successful completion
        EXPECTED: Client built with key and timeout; JSON mode requested
        """
        # Arrange
        content = json.dumps({"rankings": [{"professional_id": "pro-1", "ranking_adjustment": 1}]})
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(content)
        advisor = GroqAdvisor(settings, api_key="test-key")

        # Act
        output = advisor.advise(advisory_input)

        # Assert
        mock_groq_cls.assert_called_once_with(api_key="test-key", timeout=4, max_retries=0)
        kwargs = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "llama-test"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0]["role"] == "system"
        assert "Anxiété au travail." in kwargs["messages"][1]["content"]
        assert [r.professional_id for r in output.rankings] == ["pro-1", "pro-2"]
        assert advisor.model_id == "llama-test"

    @patch(GROQ_CLS)
    def test_missing_api_key(
        self,
        mock_groq_cls: MagicMock,
        settings: AdvisoryConfig,
        advisory_input: AdvisoryInput,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """
        SCENARIO: No key passed and GROQ_API_KEY unset
        EXPECTED: AdvisoryUnavailable, no client built
        """
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        advisor = GroqAdvisor(settings)

        with pytest.raises(AdvisoryUnavailable):
            advisor.advise(advisory_input)

        mock_groq_cls.assert_not_called()

    @patch(GROQ_CLS)
    def test_timeout_maps_to_advisory_timeout(
        self,
        mock_groq_cls: MagicMock,
        settings: AdvisoryConfig,
        advisory_input: AdvisoryInput,
    ) -> None:
        """
        SCENARIO: Groq raises APITimeoutError
        EXPECTED: AdvisoryTimeout
        """
        request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
        mock_groq_cls.return_value.chat.completions.create.side_effect = groq.APITimeoutError(
            request=request
        )

        with pytest.raises(AdvisoryTimeout):
            GroqAdvisor(settings, api_key="k").advise(advisory_input)

    @patch(GROQ_CLS)
    def test_api_error_maps_to_unavailable(
        self,
        mock_groq_cls: MagicMock,
        settings: AdvisoryConfig,
        advisory_input: AdvisoryInput,
    ) -> None:
        """
        SCENARIO: Groq raises a connection error
        EXPECTED: AdvisoryUnavailable (not AdvisoryTimeout)
        """
        request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
        mock_groq_cls.return_value.chat.completions.create.side_effect = groq.APIConnectionError(
            request=request
        )

        with pytest.raises(AdvisoryUnavailable) as exc_info:
            GroqAdvisor(settings, api_key="k").advise(advisory_input)

        assert not isinstance(exc_info.value, AdvisoryTimeout)

    @patch(GROQ_CLS)
    def test_empty_candidates_skip_call(
        self,
        mock_groq_cls: MagicMock,
        settings: AdvisoryConfig,
    ) -> None:
        """
        SCENARIO: No candidates to rank
        EXPECTED: Empty output without calling the API
        """
        empty = AdvisoryInput(demand_type="individual", urgency="low")

        output = GroqAdvisor(settings, api_key="k").advise(empty)

        assert output.rankings == []
        mock_groq_cls.assert_not_called()
