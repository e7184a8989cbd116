"""
Clinic Data Source Protocol.

Defines the abstract interface for data access. All stores (mock, database,
API) must implement this protocol to be used with the data collector.

The data source is responsible for:
    - Fetching the raw request row with its participants
    - Fetching the raw rows of every active professional
    - Fetching open availability slots for one professional in a window
    - Fetching stored recommendation configurations by key

Design Notes:
    - Returns raw mappings; validation happens in the row mappers
    - Transient failures should surface as ConnectionError or TimeoutError
      so they can be retried
    - Implementations must be safe to call from worker threads
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import List, Optional

    from demande_recommender.domain.value_objects import AvailabilityWindow, RawRow


@runtime_checkable
class ClinicDataSource(Protocol):
    """Abstract interface for the request, roster and availability stores."""

    def fetch_request(self, demande_id: str) -> Optional[RawRow]:
        """
        Fetch the raw request row.

        Args:
            demande_id: Display id of the demande

        Returns:
            Raw row, or None when no demande has this id
        """
        ...

    def fetch_active_professionals(self) -> List[RawRow]:
        """Fetch raw rows for every professional with an active roster entry."""
        ...

    def fetch_availability(
        self,
        professional_id: str,
        window: AvailabilityWindow,
    ) -> List[RawRow]:
        """
        Fetch open slots overlapping the window.

        Args:
            professional_id: Professional to query
            window: Lookahead window

        Returns:
            Slot rows with ``start`` and ``end`` datetimes
        """
        ...


@runtime_checkable
class ConfigSource(Protocol):
    """Abstract interface for the recommendation configuration store."""

    def fetch_recommendation_config(self, key: str) -> Optional[RawRow]:
        """
        Fetch a stored configuration.

        Args:
            key: Configuration key

        Returns:
            Raw config mapping, or None when the key is unknown
        """
        ...
