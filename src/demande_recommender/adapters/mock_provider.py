"""
Mock Clinic Data Source.

A dict-backed data source for development and testing. Serves request,
roster, availability and configuration rows exactly as a real store
would, counts calls, and can inject failures.
"""

from __future__ import annotations

import copy
import threading
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from demande_recommender.domain.value_objects import AvailabilityWindow, RawRow


class MockClinicDataSource:
    """Fake clinic store for development and testing."""

    # Sample roster: (id, name, category, years, specialties, motifs)
    MOCK_PROFESSIONALS = [
        ("pro-001", "Dr. Claire Fontaine", "psychologist", 12.0,
         [("adults", "primary"), ("couples", "secondary")], ["anxiety", "depression"]),
        ("pro-002", "Marc Lefebvre", "psychotherapist", 6.0,
         [("adults", "primary"), ("adolescents", "familiar")], ["anxiety", "burnout"]),
        ("pro-003", "Sophie Girard", "psychologist", 20.0,
         [("children", "primary"), ("families", "primary")], ["behaviour", "anxiety"]),
        ("pro-004", "Julien Moreau", "naturopath", 4.0,
         [("adults", "secondary")], ["stress", "sleep"]),
        ("pro-005", "Nadia Benali", "psychologist", 9.0,
         [("adults", "primary"), ("mediation", "secondary"), ("couples", "primary")],
         ["conflict", "anxiety"]),
    ]

    def __init__(
        self,
        requests: Optional[Mapping[str, RawRow]] = None,
        professionals: Optional[Iterable[RawRow]] = None,
        availability: Optional[Mapping[str, List[RawRow]]] = None,
        configs: Optional[Mapping[str, RawRow]] = None,
    ) -> None:
        """
        Initialize the mock store.

        Args:
            requests: Request rows keyed by demande id
            professionals: Roster rows (inactive rows are still served)
            availability: Slot rows keyed by professional id
            configs: Configuration mappings keyed by config key
        """
        self._requests: Dict[str, RawRow] = dict(requests or {})
        self._professionals: List[RawRow] = list(professionals or [])
        self._availability: Dict[str, List[RawRow]] = {
            k: list(v) for k, v in (availability or {}).items()
        }
        self._configs: Dict[str, RawRow] = dict(configs or {})
        self._calls: Counter = Counter()
        self._lock = threading.Lock()

        # Failure injection
        self.failing_availability: Set[str] = set()
        self.transient_failures: Dict[str, int] = {}

    @classmethod
    def sample(cls, anchor: datetime) -> "MockClinicDataSource":
        """
        Build a small clinic around an anchor time.

        Contains one demande ("DEM-SAMPLE-0001", an adult individual with
        anxiety) and the MOCK_PROFESSIONALS roster, each with a different
        amount of open time in the two weeks after the anchor.
        """
        professionals = []
        availability: Dict[str, List[RawRow]] = {}
        for index, (pid, name, category, years, specialties, motifs) in enumerate(
            cls.MOCK_PROFESSIONALS
        ):
            professionals.append(
                {
                    "professional_id": pid,
                    "display_name": name,
                    "status": "active",
                    "years_experience": years,
                    "professions": [
                        {"title_key": category, "category_key": category, "is_primary": True}
                    ],
                    "specialties": [
                        {"code": code, "proficiency": level} for code, level in specialties
                    ],
                    "motif_keys": motifs,
                }
            )
            # pro-001 gets 5 one-hour slots, pro-005 gets 1
            slots = 5 - index
            availability[pid] = [
                {
                    "start": anchor + timedelta(days=day + 1, hours=9),
                    "end": anchor + timedelta(days=day + 1, hours=10),
                }
                for day in range(slots)
            ]

        requests = {
            "DEM-SAMPLE-0001": {
                "demande_id": "DEM-SAMPLE-0001",
                "demand_type": "individual",
                "urgency": "moderate",
                "motif_keys": ["anxiety"],
                "motif_description": "Anxiété au travail depuis quelques mois.",
                "participants": [{"birthdate": (anchor - timedelta(days=365 * 35)).date()}],
            }
        }
        return cls(requests=requests, professionals=professionals, availability=availability)

    # =========================================================================
    # ClinicDataSource
    # =========================================================================

    def fetch_request(self, demande_id: str) -> Optional[RawRow]:
        """Get the raw request row."""
        self._count("fetch_request")
        self._maybe_fail("fetch_request")
        row = self._requests.get(demande_id)
        return copy.deepcopy(row) if row is not None else None

    def fetch_active_professionals(self) -> List[RawRow]:
        """Get every roster row."""
        self._count("fetch_active_professionals")
        self._maybe_fail("fetch_active_professionals")
        return copy.deepcopy(self._professionals)

    def fetch_availability(
        self,
        professional_id: str,
        window: AvailabilityWindow,
    ) -> List[RawRow]:
        """Get slot rows overlapping the window."""
        self._count("fetch_availability")
        if professional_id in self.failing_availability:
            raise ConnectionError(f"availability store unreachable for {professional_id}")
        return [
            dict(row)
            for row in self._availability.get(professional_id, [])
            if _overlaps(row, window)
        ]

    # =========================================================================
    # ConfigSource
    # =========================================================================

    def fetch_recommendation_config(self, key: str) -> Optional[RawRow]:
        """Get a stored configuration."""
        self._count("fetch_recommendation_config")
        self._maybe_fail("fetch_recommendation_config")
        config = self._configs.get(key)
        return copy.deepcopy(config) if config is not None else None

    # =========================================================================
    # Test helpers
    # =========================================================================

    def add_request(self, row: RawRow) -> None:
        self._requests[str(row["demande_id"])] = row

    def add_config(self, key: str, config: RawRow) -> None:
        self._configs[key] = config

    def call_count(self, operation: str) -> int:
        """Number of calls made to a store operation."""
        with self._lock:
            return self._calls[operation]

    def _count(self, operation: str) -> None:
        with self._lock:
            self._calls[operation] += 1

    def _maybe_fail(self, operation: str) -> None:
        """Raise ConnectionError while the operation has injected failures left."""
        with self._lock:
            remaining = self.transient_failures.get(operation, 0)
            if remaining <= 0:
                return
            self.transient_failures[operation] = remaining - 1
        raise ConnectionError(f"{operation}: store temporarily unavailable")


def _overlaps(row: Mapping[str, Any], window: AvailabilityWindow) -> bool:
    start, end = row.get("start"), row.get("end")
    if not isinstance(start, datetime) or not isinstance(end, datetime):
        # Malformed rows are served as-is so the mapper can reject them
        return True
    if start.tzinfo is None:
        start, end = start.replace(tzinfo=timezone.utc), end.replace(tzinfo=timezone.utc)
    return start < window.end and end > window.start
