"""
Advisor Protocol.

Defines the abstract interface for the external advisory model. The
advisor receives only sanitized input and returns bounded ranking
adjustments, reasoning bullets and extracted preferences.

Design Notes:
    - Implementations raise AdvisoryUnavailable or AdvisoryTimeout on
      failure; the advisory layer turns those into a deterministic run
    - Implementations never see raw client text or professional names
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from demande_recommender.advisory.models import AdvisoryOutput
    from demande_recommender.sanitization.models import AdvisoryInput


@runtime_checkable
class Advisor(Protocol):
    """Abstract interface for an advisory model."""

    @property
    def model_id(self) -> str:
        """Identifier recorded in recommendation metadata."""
        ...

    def advise(self, advisory_input: AdvisoryInput) -> AdvisoryOutput:
        """
        Rank the sanitized candidates.

        Args:
            advisory_input: Sanitized request shape and candidates

        Returns:
            Advisory output with one ranking per input candidate

        Raises:
            AdvisoryUnavailable: If the model cannot produce usable output
        """
        ...
