"""
Recommendation Repository Protocol.

Defines the abstract interface for persisting recommendation results and
the view audit log.

Design Notes:
    - save is an upsert keyed by (demande_id, run_token); a retried save of
      the same run must not create a duplicate
    - save refuses a result whose run sequence is older than the stored one
    - The view log is append-only
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import List, Optional

    from demande_recommender.domain.entities import (
        DemandeRecommendation,
        RecommendationViewEvent,
    )


@runtime_checkable
class RecommendationRepository(Protocol):
    """Abstract interface for recommendation persistence."""

    def save(self, recommendation: DemandeRecommendation) -> bool:
        """
        Store a recommendation as the current one for its demande.

        Returns:
            True if stored (or already stored for this run), False if a newer
            run is already current
        """
        ...

    def get_current(self, demande_id: str) -> Optional[DemandeRecommendation]:
        """Return the current recommendation for a demande, if any."""
        ...

    def append_view(self, event: RecommendationViewEvent) -> None:
        """Append a view event to the audit log."""
        ...

    def list_views(self, demande_id: str) -> List[RecommendationViewEvent]:
        """Return view events for a demande in append order."""
        ...
