"""
Domain Exceptions.

Every failure the engine can surface derives from RecommendationError.
Whether a failure aborts a run or degrades it is decided by the stage
that catches it, not by the exception type alone:

    Fatal (surfaced to the caller):
        - RequestNotFound
        - InvalidConfig
        - SanitizationViolation
        - RecordMappingError (for the request row)

    Recovered locally:
        - CandidateDataUnavailable -> candidate excluded (data_unavailable)
        - AdvisoryUnavailable / AdvisoryTimeout -> deterministic-only run
"""

from __future__ import annotations

from typing import List, Optional


class RecommendationError(Exception):
    """Base class for all recommendation engine errors."""


class RequestNotFound(RecommendationError):
    """Raised when the demande id does not resolve to a request."""

    def __init__(self, demande_id: str) -> None:
        super().__init__(f"Demande not found: {demande_id}")
        self.demande_id = demande_id


class InvalidConfig(RecommendationError):
    """Raised when a recommendation configuration cannot be used."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or [message]


class RecordMappingError(RecommendationError):
    """Raised when a store row does not match the expected schema."""

    def __init__(self, record_type: str, record_id: Optional[str], detail: str) -> None:
        super().__init__(f"Invalid {record_type} row ({record_id or 'unknown id'}): {detail}")
        self.record_type = record_type
        self.record_id = record_id
        self.detail = detail


class CandidateDataUnavailable(RecommendationError):
    """A single candidate's data could not be fetched or mapped."""

    def __init__(self, professional_id: str, detail: str) -> None:
        super().__init__(f"Data unavailable for professional {professional_id}: {detail}")
        self.professional_id = professional_id
        self.detail = detail


class SanitizationViolation(RecommendationError):
    """
    Raised when sanitized output could leak PII.

    Indicates a defect: the run is aborted before any external call.
    """


class AdvisoryUnavailable(RecommendationError):
    """The advisory model could not be reached or returned unusable output."""


class AdvisoryTimeout(AdvisoryUnavailable):
    """The advisory call did not complete within its deadline."""
