"""
Advisory Layer - Optional, Time-Bounded Advisory Call.

Runs the injected advisor with an explicit deadline and behind the
"advisory" circuit breaker. Any failure degrades the run to deterministic
ranking; it never aborts it.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from demande_recommender.advisory.models import AdvisoryOutput
from demande_recommender.config.models import AdvisoryConfig
from demande_recommender.domain.exceptions import AdvisoryTimeout, AdvisoryUnavailable
from demande_recommender.interfaces.advisor import Advisor
from demande_recommender.resilience.error_handler import CircuitBreakerOpen, ErrorHandler

if TYPE_CHECKING:
    from demande_recommender.sanitization.models import AdvisoryInput

logger = logging.getLogger(__name__)

CIRCUIT_NAME = "advisory"


@dataclass(frozen=True)
class AdvisoryResult:
    """Outcome of the advisory stage."""
    output: Optional[AdvisoryOutput]
    model_id: str = "none"
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def applied(self) -> bool:
        return self.output is not None

    @property
    def outcome(self) -> str:
        if self.applied:
            return "applied"
        return "fallback" if self.error else "skipped"


class AdvisoryLayer:
    """Calls the advisor and converts every failure into a fallback."""

    def __init__(
        self,
        advisor: Optional[Advisor],
        error_handler: Optional[ErrorHandler] = None,
        max_workers: int = 4,
    ) -> None:
        """
        Initialize the advisory layer.

        Args:
            advisor: Advisory model, or None to always run deterministically
            error_handler: For the circuit breaker (optional)
            max_workers: Threads available for concurrent advisory calls
        """
        self.advisor = advisor
        self.error_handler = error_handler
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    def is_active(self, settings: AdvisoryConfig) -> bool:
        return settings.enabled and self.advisor is not None

    def run(
        self,
        advisory_input: AdvisoryInput,
        settings: AdvisoryConfig,
    ) -> AdvisoryResult:
        """
        Obtain advisory adjustments.

        Args:
            advisory_input: Sanitized payload
            settings: Advisory settings of the active config

        Returns:
            AdvisoryResult; output is None when the advisor was skipped
            or failed
        """
        if not self.is_active(settings) or not advisory_input.candidates:
            return AdvisoryResult(output=None)

        model_id = self.advisor.model_id
        start = time.perf_counter()

        def call() -> AdvisoryOutput:
            return self._call_with_timeout(advisory_input, settings.timeout_seconds)

        try:
            if self.error_handler:
                output = self.error_handler.with_circuit_breaker(call, CIRCUIT_NAME)
            else:
                output = call()
        except CircuitBreakerOpen as e:
            logger.warning(f"Advisory skipped: {e}")
            return self._fallback(model_id, "circuit open", start)
        except AdvisoryTimeout as e:
            logger.warning(f"Advisory timed out after {settings.timeout_seconds}s: {e}")
            return self._fallback(model_id, f"timeout: {e}", start)
        except AdvisoryUnavailable as e:
            logger.warning(f"Advisory unavailable: {e}")
            return self._fallback(model_id, f"unavailable: {e}", start)
        except Exception as e:
            logger.warning(f"Advisory failed unexpectedly: {e}", exc_info=True)
            return self._fallback(model_id, f"error: {type(e).__name__}", start)

        return AdvisoryResult(
            output=output,
            model_id=model_id,
            duration_seconds=time.perf_counter() - start,
        )

    def _call_with_timeout(
        self,
        advisory_input: AdvisoryInput,
        timeout_seconds: float,
    ) -> AdvisoryOutput:
        future = self._get_executor().submit(self.advisor.advise, advisory_input)
        try:
            return future.result(timeout=timeout_seconds)
        except FutureTimeout as e:
            future.cancel()
            raise AdvisoryTimeout(
                f"no response within {timeout_seconds}s"
            ) from e

    def _fallback(self, model_id: str, error: str, start: float) -> AdvisoryResult:
        return AdvisoryResult(
            output=None,
            model_id=model_id,
            error=error,
            duration_seconds=time.perf_counter() - start,
        )

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="advisory"
                )
            return self._executor

    def shutdown(self) -> None:
        """Release the worker threads without waiting for hung calls."""
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None
