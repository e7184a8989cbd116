"""
In-Memory Recommendation Repository.

Stores recommendation results and the view log in memory.

Design Notes:
    - save is an upsert keyed by (demande_id, run_token)
    - A result is only made current if its run sequence is not older than
      the stored current one (compare-and-set under a lock)
    - The view log is append-only
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, List, Optional, Tuple

from demande_recommender.domain.entities import (
    DemandeRecommendation,
    RecommendationViewEvent,
)

logger = logging.getLogger(__name__)


class InMemoryRecommendationRepository:
    """Thread-safe in-memory result store."""

    def __init__(self) -> None:
        self._current: Dict[str, DemandeRecommendation] = {}
        self._history: Dict[Tuple[str, str], DemandeRecommendation] = {}
        self._views: List[RecommendationViewEvent] = []
        self._lock = Lock()

    def save(self, recommendation: DemandeRecommendation) -> bool:
        """Store a recommendation unless a newer run is already current."""
        key = (recommendation.demande_id, recommendation.run_token)
        sequence = recommendation.metadata.run_sequence

        with self._lock:
            if key in self._history:
                # Replayed save of a run already stored
                return True

            current = self._current.get(recommendation.demande_id)
            if current is not None and current.metadata.run_sequence > sequence:
                logger.info(
                    f"Refusing run {sequence} for {recommendation.demande_id}: "
                    f"run {current.metadata.run_sequence} is current"
                )
                return False

            self._history[key] = recommendation
            self._current[recommendation.demande_id] = recommendation
            return True

    def get_current(self, demande_id: str) -> Optional[DemandeRecommendation]:
        with self._lock:
            return self._current.get(demande_id)

    def get_by_run(self, demande_id: str, run_token: str) -> Optional[DemandeRecommendation]:
        with self._lock:
            return self._history.get((demande_id, run_token))

    def history(self, demande_id: str) -> List[DemandeRecommendation]:
        """All stored runs for a demande, oldest first."""
        with self._lock:
            runs = [r for (d, _), r in self._history.items() if d == demande_id]
        return sorted(runs, key=lambda r: r.metadata.run_sequence)

    def append_view(self, event: RecommendationViewEvent) -> None:
        with self._lock:
            self._views.append(event)

    def list_views(self, demande_id: str) -> List[RecommendationViewEvent]:
        with self._lock:
            return [v for v in self._views if v.demande_id == demande_id]

    def clear(self) -> None:
        with self._lock:
            self._current.clear()
            self._history.clear()
            self._views.clear()
