"""
Data Collector - Gather the Demande and Candidate Pool.

Loads the request and every active professional, then fetches each
professional's availability with bounded concurrency.

Design Notes:
    - Request and roster fetches are retried on transient store errors
    - A missing request raises RequestNotFound; a malformed request row
      raises RecordMappingError
    - One professional's failure (bad roster row, failed availability
      fetch, bad slot rows) never aborts the run: it is reported in
      CollectedData.unavailable and later excluded as data_unavailable
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, timezone, tzinfo
from typing import AbstractSet, Callable, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from demande_recommender.collection.row_mappers import (
    map_professional,
    map_request,
    summarize_availability,
)
from demande_recommender.domain.entities import Candidate, Demande, SchedulePreference
from demande_recommender.domain.exceptions import RecordMappingError, RequestNotFound
from demande_recommender.domain.value_objects import (
    AvailabilitySummary,
    AvailabilityWindow,
)
from demande_recommender.interfaces.data_source import ClinicDataSource
from demande_recommender.resilience.error_handler import ErrorHandler

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AvailabilityOutcome(BaseModel):
    """Result of one availability fetch: a summary or an error message."""

    professional_id: str
    availability: Optional[AvailabilitySummary] = None
    error: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CollectedData:
    """Everything the downstream stages need for one run."""

    demande: Demande
    window: AvailabilityWindow
    candidates: List[Candidate] = field(default_factory=list)
    unavailable: Dict[str, str] = field(default_factory=dict)

    @property
    def considered_count(self) -> int:
        return len(self.candidates) + len(self.unavailable)


class DataCollector:
    """Collects the request and candidate pool from the data source."""

    def __init__(
        self,
        data_source: ClinicDataSource,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        """
        Initialize the collector.

        Args:
            data_source: Store access
            error_handler: For retrying transient store errors (optional)
        """
        self.data_source = data_source
        self.error_handler = error_handler

    def collect(
        self,
        demande_id: str,
        window: AvailabilityWindow,
        as_of: date,
        max_concurrent_fetches: int = 8,
        clinic_tz: tzinfo = timezone.utc,
    ) -> CollectedData:
        """
        Collect the demande and its candidate pool.

        Args:
            demande_id: Demande to load
            window: Lookahead window for availability
            as_of: Reference date for population categories
            max_concurrent_fetches: Upper bound on parallel availability fetches
            clinic_tz: Time zone of the client schedule preferences

        Returns:
            CollectedData with mapped candidates and unavailable ids

        Raises:
            RequestNotFound: If the demande does not exist
            RecordMappingError: If the request row is malformed
            RetryExhausted: If the store keeps failing transiently
        """
        request_row = self._call(
            lambda: self.data_source.fetch_request(demande_id), "fetch_request"
        )
        if request_row is None:
            raise RequestNotFound(demande_id)
        demande = map_request(request_row, as_of)

        roster = self._call(
            self.data_source.fetch_active_professionals, "fetch_active_professionals"
        )

        candidates: List[Candidate] = []
        unavailable: Dict[str, str] = {}
        for row in roster:
            try:
                candidates.append(map_professional(row))
            except RecordMappingError as e:
                if e.record_id is None:
                    logger.warning(f"Dropping roster row without id: {e.detail}")
                    continue
                logger.warning(f"Roster row rejected: {e}")
                unavailable[e.record_id] = f"invalid roster row: {e.detail}"

        outcomes = self._fetch_all_availability(
            candidates,
            window,
            max_concurrent_fetches,
            demande.schedule_preferences,
            clinic_tz,
        )

        complete: List[Candidate] = []
        for candidate in candidates:
            outcome = outcomes[candidate.professional_id]
            if outcome.ok:
                complete.append(
                    candidate.model_copy(update={"availability": outcome.availability})
                )
            else:
                unavailable[candidate.professional_id] = outcome.error or "unknown error"

        logger.info(
            f"Collected {demande.demande_id}: {len(complete)} candidates, "
            f"{len(unavailable)} unavailable"
        )
        return CollectedData(
            demande=demande,
            window=window,
            candidates=complete,
            unavailable=unavailable,
        )

    def _fetch_all_availability(
        self,
        candidates: List[Candidate],
        window: AvailabilityWindow,
        max_workers: int,
        preferences: AbstractSet[SchedulePreference],
        clinic_tz: tzinfo,
    ) -> Dict[str, AvailabilityOutcome]:
        if not candidates:
            return {}

        workers = max(1, min(max_workers, len(candidates)))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="availability"
        ) as executor:
            results = list(
                executor.map(
                    lambda c: self._fetch_availability(c, window, preferences, clinic_tz),
                    candidates,
                )
            )
        return {r.professional_id: r for r in results}

    def _fetch_availability(
        self,
        candidate: Candidate,
        window: AvailabilityWindow,
        preferences: AbstractSet[SchedulePreference],
        clinic_tz: tzinfo,
    ) -> AvailabilityOutcome:
        professional_id = candidate.professional_id
        try:
            rows = self.data_source.fetch_availability(professional_id, window)
            summary = summarize_availability(
                professional_id, list(rows), window, preferences, clinic_tz
            )
        except RecordMappingError as e:
            logger.warning(f"Availability rows rejected for {professional_id}: {e.detail}")
            return AvailabilityOutcome(
                professional_id=professional_id,
                error=f"invalid availability rows: {e.detail}",
            )
        except Exception as e:
            logger.warning(f"Availability fetch failed for {professional_id}: {e}")
            return AvailabilityOutcome(
                professional_id=professional_id,
                error=f"availability fetch failed: {type(e).__name__}",
            )
        return AvailabilityOutcome(professional_id=professional_id, availability=summary)

    def _call(self, func: Callable[[], T], operation_name: str) -> T:
        if self.error_handler:
            return self.error_handler.retry(func, operation_name=operation_name)
        return func()
