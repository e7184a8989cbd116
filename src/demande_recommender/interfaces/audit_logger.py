"""
Audit Logger Protocol.

Defines the abstract interface for audit logging. The audit logger
tracks every exclusion and stage transition of a recommendation run
for staff review and debugging.

The audit logger is responsible for:
    - Logging stage start/end events
    - Logging individual candidate exclusions
    - Logging anomalies and warnings
    - Maintaining correlation across a recommendation run

Design Notes:
    - Never receives client free text or professional names
    - Correlation ID propagation for tracing
    - No side effects on ranking logic
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import Any, Dict, Optional


@runtime_checkable
class AuditLogger(Protocol):
    """Abstract interface for audit logging."""

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        ...

    def log_stage_start(
        self,
        stage_name: str,
        input_count: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log the start of a pipeline stage.

        Args:
            stage_name: Name of the stage
            input_count: Number of candidates entering the stage
            metadata: Optional additional context
        """
        ...

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log the end of a pipeline stage.

        Args:
            stage_name: Name of the stage
            output_count: Number of candidates leaving the stage
            duration_seconds: Time taken for the stage
            metadata: Optional additional context
        """
        ...

    def log_candidate_excluded(
        self,
        professional_id: str,
        stage_name: str,
        reason: str,
    ) -> None:
        """
        Log that a candidate was excluded or set aside.

        Args:
            professional_id: The excluded professional
            stage_name: Which stage excluded it
            reason: Reason code and detail
        """
        ...

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an anomaly or warning.

        Args:
            message: Description of the anomaly
            severity: INFO, WARNING, ERROR or CRITICAL
            context: Optional additional context
        """
        ...
