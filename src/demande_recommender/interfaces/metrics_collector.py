"""
Metrics Collector Protocol.

Defines the abstract interface for operational metrics. The collector
tracks stage timings, exclusion counts and advisory outcomes.

Design Notes:
    - Non-blocking metric recording
    - Tag/label support for dimensionality
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import Any, Dict, Optional


@runtime_checkable
class MetricsCollector(Protocol):
    """Abstract interface for metrics collection."""

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a duration (histogram)."""
        ...

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a counter increment."""
        ...

    def get_metrics(self) -> Dict[str, Any]:
        """Return a summary of everything recorded."""
        ...
