"""
Structured Audit Logger - structlog Output with Correlation IDs.

Provides:
    - Structured JSON (or console) audit events via structlog
    - Correlation ID propagation through contextvars
    - An in-memory event buffer for inspection

Design Notes:
    - Events carry ids and reason codes only; never client text
    - Thread-safe event buffer
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

_SEVERITY_LEVELS = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warning",
    "ERROR": "error",
    "CRITICAL": "critical",
}


def configure_structlog(use_json: bool = True, log_level: int = logging.INFO) -> None:
    """Configure structlog processors for audit output."""
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


class StructuredAuditLogger:
    """
    AuditLogger emitting structured events.

    Every event is logged through structlog and kept in a buffer so that
    callers (and tests) can inspect the trail of a run.
    """

    def __init__(
        self,
        service_name: str = "demande_recommender",
        configure: bool = False,
        use_json: bool = True,
        log_level: int = logging.INFO,
    ) -> None:
        """
        Initialize the logger.

        Args:
            service_name: Logger name recorded on every event
            configure: Call configure_structlog before first use
            use_json: JSON rendering (console rendering otherwise)
            log_level: Minimum level emitted
        """
        self.service_name = service_name
        if configure:
            configure_structlog(use_json=use_json, log_level=log_level)
        self._logger = structlog.get_logger(service_name)
        self._events: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def set_correlation_id(self, correlation_id: str) -> None:
        """Bind the correlation ID for subsequent events in the calling thread."""
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    def log_event(
        self,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
        level: str = "info",
    ) -> None:
        """
        Log a structured event.

        Args:
            event_type: Type of event (e.g., "stage_start", "candidate_excluded")
            data: Additional event data
            level: Log level (debug, info, warning, error, critical)
        """
        event_data = {
            "event_type": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "correlation_id": structlog.contextvars.get_contextvars().get("correlation_id"),
            **(data or {}),
        }
        with self._lock:
            self._events.append(event_data)

        log_method = getattr(self._logger, level.lower(), self._logger.info)
        log_method(
            event_type,
            **{k: v for k, v in event_data.items() if k not in ("event_type", "correlation_id")},
        )

    def get_events(self, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Buffered events, optionally of one type."""
        with self._lock:
            if event_type is None:
                return list(self._events)
            return [e for e in self._events if e["event_type"] == event_type]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    # =========================================================================
    # AuditLogger Protocol
    # =========================================================================

    def log_stage_start(
        self,
        stage_name: str,
        input_count: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.log_event(
            "stage_start",
            {"stage_name": stage_name, "input_count": input_count, **(metadata or {})},
        )

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.log_event(
            "stage_end",
            {
                "stage_name": stage_name,
                "output_count": output_count,
                "duration_seconds": duration_seconds,
                **(metadata or {}),
            },
        )

    def log_candidate_excluded(
        self,
        professional_id: str,
        stage_name: str,
        reason: str,
    ) -> None:
        self.log_event(
            "candidate_excluded",
            {"professional_id": professional_id, "stage_name": stage_name, "reason": reason},
            level="debug",
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.log_event(
            "anomaly",
            {"message": message, "severity": severity, **(context or {})},
            level=_SEVERITY_LEVELS.get(severity.upper(), "warning"),
        )
