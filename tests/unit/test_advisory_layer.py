"""
Unit Tests for AdvisoryLayer.

Test Aspects Covered:
    ✅ Business Logic: Applied / skipped / fallback outcomes
    ✅ Resilience: Timeout, advisor errors, circuit breaker
"""

from __future__ import annotations

import threading

import pytest

from demande_recommender.adapters.static_advisor import StaticAdvisor
from demande_recommender.advisory.advisory_layer import CIRCUIT_NAME, AdvisoryLayer
from demande_recommender.config.models import AdvisoryConfig
from demande_recommender.domain.exceptions import AdvisoryUnavailable
from demande_recommender.resilience.error_handler import (
    CircuitBreakerConfig,
    CircuitState,
    ErrorHandler,
)
from demande_recommender.sanitization.models import AdvisoryInput, SanitizedCandidate


@pytest.fixture
def advisory_input() -> AdvisoryInput:
    return AdvisoryInput(
        demand_type="individual",
        urgency="low",
        candidates=[
            SanitizedCandidate(
                id="pro-1",
                profession_type="psychologist",
                deterministic_score=0.6,
                matched_motif_count=1,
                available_slot_count=3,
                years_experience=4.0,
            )
        ],
    )


@pytest.fixture
def enabled() -> AdvisoryConfig:
    return AdvisoryConfig(enabled=True, timeout_seconds=0.5)


class TestAdvisoryLayer:
    """Test cases for AdvisoryLayer."""

    def test_applies_advice(self, advisory_input: AdvisoryInput, enabled: AdvisoryConfig) -> None:
        """
        SCENARIO: Advisor answers in time
        EXPECTED: Output applied with the advisor's model id
        """
        # Arrange
        layer = AdvisoryLayer(StaticAdvisor(adjustments={"pro-1": 3}, model_id="stub-1"))

        # Act
        result = layer.run(advisory_input, enabled)

        # Assert
        assert result.applied is True
        assert result.outcome == "applied"
        assert result.model_id == "stub-1"
        assert result.output.rankings[0].ranking_adjustment == 3
        layer.shutdown()

    def test_disabled_skips(self, advisory_input: AdvisoryInput) -> None:
        """
        SCENARIO: Advisory disabled in config
        EXPECTED: Skipped, advisor never called
        """
        advisor = StaticAdvisor()
        layer = AdvisoryLayer(advisor)

        result = layer.run(advisory_input, AdvisoryConfig(enabled=False))

        assert result.outcome == "skipped"
        assert advisor.call_count == 0

    def test_no_advisor_is_inactive(self, enabled: AdvisoryConfig) -> None:
        assert AdvisoryLayer(None).is_active(enabled) is False

    def test_timeout_falls_back(self, advisory_input: AdvisoryInput, enabled: AdvisoryConfig) -> None:
        """
        SCENARIO: Advisor blocks past the deadline
        EXPECTED: Fallback with a timeout error, no output
        """
        # Arrange
        gate = threading.Event()
        layer = AdvisoryLayer(StaticAdvisor(gate=gate))

        # Act
        result = layer.run(advisory_input, enabled)
        gate.set()

        # Assert
        assert result.applied is False
        assert result.outcome == "fallback"
        assert result.error.startswith("timeout")
        layer.shutdown()

    def test_advisor_error_falls_back(
        self, advisory_input: AdvisoryInput, enabled: AdvisoryConfig
    ) -> None:
        """
        SCENARIO: Advisor raises AdvisoryUnavailable
        EXPECTED: Fallback, exception not propagated
        """
        layer = AdvisoryLayer(StaticAdvisor(error=AdvisoryUnavailable("bad json")))

        result = layer.run(advisory_input, enabled)

        assert result.outcome == "fallback"
        assert "bad json" in result.error
        layer.shutdown()

    def test_unexpected_error_falls_back(
        self, advisory_input: AdvisoryInput, enabled: AdvisoryConfig
    ) -> None:
        layer = AdvisoryLayer(StaticAdvisor(error=KeyError("boom")))

        result = layer.run(advisory_input, enabled)

        assert result.error == "error: KeyError"
        layer.shutdown()

    def test_circuit_opens_after_failures(
        self, advisory_input: AdvisoryInput, enabled: AdvisoryConfig
    ) -> None:
        """
        SCENARIO: Advisor fails twice with threshold 2
        EXPECTED: Circuit open; third run skips the advisor
        """
        # Arrange
        handler = ErrorHandler(
            circuit_breaker_config=CircuitBreakerConfig(failure_threshold=2)
        )
        advisor = StaticAdvisor(error=AdvisoryUnavailable("down"))
        layer = AdvisoryLayer(advisor, handler)

        # Act
        layer.run(advisory_input, enabled)
        layer.run(advisory_input, enabled)
        third = layer.run(advisory_input, enabled)

        # Assert
        assert handler.get_circuit_state(CIRCUIT_NAME) == CircuitState.OPEN
        assert third.error == "circuit open"
        assert advisor.call_count == 2
        layer.shutdown()
