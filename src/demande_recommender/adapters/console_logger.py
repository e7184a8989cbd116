"""
Console Audit Logger.

A simple audit logger that prints the run trail to the console.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Dict, List, Optional


class ConsoleAuditLogger:
    """Simple console-based audit logger."""

    def __init__(self, verbose: bool = True) -> None:
        """
        Initialize console logger.

        Args:
            verbose: If True, log every exclusion. If False, only stages
                and anomalies.
        """
        self._verbose = verbose
        self._local = threading.local()
        self.anomalies: List[str] = []

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries from this thread."""
        self._local.correlation_id = correlation_id

    def log_stage_start(
        self,
        stage_name: str,
        input_count: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the start of a pipeline stage."""
        if self._verbose:
            self._log("INFO", f"Starting {stage_name} with {input_count} candidates")

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the end of a pipeline stage."""
        self._log(
            "INFO",
            f"Completed {stage_name}: {output_count} candidates "
            f"({duration_seconds:.3f}s)",
        )

    def log_candidate_excluded(
        self,
        professional_id: str,
        stage_name: str,
        reason: str,
    ) -> None:
        """Log that a candidate was excluded or set aside."""
        if self._verbose:
            self._log("DEBUG", f"{professional_id} set aside by {stage_name}: {reason}")

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log an anomaly or warning."""
        self.anomalies.append(message)
        self._log(severity, f"ANOMALY: {message}")

    def _log(self, level: str, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        correlation_id = getattr(self._local, "correlation_id", None)
        corr_id = correlation_id[:8] if correlation_id else "--------"
        print(f"[{timestamp}] [{corr_id}] [{level:5}] {message}")
