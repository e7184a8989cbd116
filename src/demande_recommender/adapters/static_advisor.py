"""
Static Advisor.

An offline Advisor for development and testing. Returns fixed ranking
adjustments and can simulate a slow, failing or blocked model.
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, Dict, List, Optional

from demande_recommender.advisory.models import (
    AdvisoryOutput,
    AdvisoryRanking,
    ExtractedPreferences,
)

if TYPE_CHECKING:
    from demande_recommender.sanitization.models import AdvisoryInput


class StaticAdvisor:
    """Advisor returning predetermined adjustments."""

    def __init__(
        self,
        adjustments: Optional[Dict[str, float]] = None,
        reasoning: Optional[Dict[str, List[str]]] = None,
        summary: Optional[str] = None,
        preferences: Optional[ExtractedPreferences] = None,
        delay_seconds: float = 0.0,
        error: Optional[Exception] = None,
        gate: Optional[threading.Event] = None,
        model_id: str = "static-advisor",
    ) -> None:
        """
        Initialize the advisor.

        Args:
            adjustments: ranking_adjustment per professional id (0 if absent)
            reasoning: Reasoning bullets per professional id
            summary: Summary returned with every output
            preferences: Extracted preferences returned with every output
            delay_seconds: Sleep before answering
            error: Raised instead of answering
            gate: If set, wait for this event before answering
            model_id: Identifier recorded in metadata
        """
        self._adjustments = dict(adjustments or {})
        self._reasoning = dict(reasoning or {})
        self._summary = summary
        self._preferences = preferences or ExtractedPreferences()
        self._delay_seconds = delay_seconds
        self._error = error
        self._gate = gate
        self._model_id = model_id
        self.received: List[AdvisoryInput] = []
        self._lock = threading.Lock()

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.received)

    def advise(self, advisory_input: AdvisoryInput) -> AdvisoryOutput:
        with self._lock:
            self.received.append(advisory_input)

        if self._gate is not None:
            self._gate.wait()
        if self._delay_seconds:
            time.sleep(self._delay_seconds)
        if self._error is not None:
            raise self._error

        return AdvisoryOutput(
            rankings=[
                AdvisoryRanking(
                    professional_id=pid,
                    ranking_adjustment=self._adjustments.get(pid, 0.0),
                    reasoning=self._reasoning.get(pid, []),
                )
                for pid in advisory_input.candidate_ids
            ],
            extracted_preferences=self._preferences,
            summary=self._summary,
        )
