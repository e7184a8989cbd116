"""
Error Handler - Resilience Patterns for Store and Advisory Calls.

Provides:
    - Retry with exponential backoff for transient store errors
    - Circuit breaker around the advisory model

Design Notes:
    - Only exceptions listed in RetryConfig.retryable_exceptions are retried;
      domain errors such as RequestNotFound propagate on the first attempt
    - Circuit state is per name and guarded by a lock, since several
      recommendation runs may share one handler
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Type, TypeVar

from demande_recommender.domain.exceptions import RecommendationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"      # Normal operation
    OPEN = "open"          # Failing, reject calls
    HALF_OPEN = "half_open"  # Testing if recovered


class CircuitBreakerOpen(RecommendationError):
    """Raised when circuit breaker is open."""


class RetryExhausted(RecommendationError):
    """Raised when all retry attempts are exhausted."""


@dataclass
class CircuitBreakerConfig:
    """Configuration for circuit breaker."""
    failure_threshold: int = 3  # Failures before opening
    recovery_timeout_seconds: float = 60.0  # Time before half-open
    success_threshold: int = 1  # Successes before closing


@dataclass
class RetryConfig:
    """Configuration for retry logic."""
    max_attempts: int = 3
    base_delay_seconds: float = 0.5
    max_delay_seconds: float = 8.0
    exponential_base: float = 2.0
    retryable_exceptions: Tuple[Type[BaseException], ...] = (ConnectionError, TimeoutError)


@dataclass
class CircuitBreakerState:
    """Mutable state for circuit breaker."""
    state: CircuitState = CircuitState.CLOSED
    failure_count: int = 0
    success_count: int = 0
    opened_at: Optional[float] = None


class ErrorHandler:
    """
    Provides resilience patterns for fault tolerance.

    Features:
        - Retry with exponential backoff
        - Circuit breaker pattern
    """

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize error handler.

        Args:
            retry_config: Configuration for retry logic
            circuit_breaker_config: Configuration for circuit breaker
            clock: Monotonic clock used for recovery timing
            sleep: Sleep function used between retries
        """
        self.retry_config = retry_config or RetryConfig()
        self.circuit_breaker_config = circuit_breaker_config or CircuitBreakerConfig()
        self._clock = clock
        self._sleep = sleep
        self._circuit_states: Dict[str, CircuitBreakerState] = {}
        self._lock = threading.Lock()

    def retry(
        self,
        func: Callable[[], T],
        operation_name: str = "operation",
    ) -> T:
        """
        Execute function with retry and exponential backoff.

        Args:
            func: Function to execute
            operation_name: Name for logging

        Returns:
            Result of successful execution

        Raises:
            RetryExhausted: When all attempts fail with a retryable error
        """
        last_exception: Optional[BaseException] = None
        max_attempts = self.retry_config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                result = func()
                if attempt > 1:
                    logger.info(f"{operation_name} succeeded on attempt {attempt}")
                return result

            except self.retry_config.retryable_exceptions as e:
                last_exception = e
                if attempt < max_attempts:
                    delay = self._calculate_delay(attempt)
                    logger.warning(
                        f"{operation_name} failed (attempt {attempt}/{max_attempts}), "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    self._sleep(delay)
                else:
                    logger.error(f"{operation_name} failed after {attempt} attempts: {e}")

        raise RetryExhausted(
            f"{operation_name} failed after {max_attempts} attempts"
        ) from last_exception

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff."""
        delay = self.retry_config.base_delay_seconds * (
            self.retry_config.exponential_base ** (attempt - 1)
        )
        return min(delay, self.retry_config.max_delay_seconds)

    def with_circuit_breaker(
        self,
        func: Callable[[], T],
        circuit_name: str,
    ) -> T:
        """
        Execute function with circuit breaker protection.

        Args:
            func: Function to execute
            circuit_name: Unique name for this circuit

        Returns:
            Result of successful execution

        Raises:
            CircuitBreakerOpen: When circuit is open
        """
        with self._lock:
            state = self._get_circuit_state(circuit_name)
            if state.state == CircuitState.OPEN:
                if self._should_attempt_recovery(state):
                    state.state = CircuitState.HALF_OPEN
                    logger.info(f"Circuit {circuit_name} entering half-open state")
                else:
                    raise CircuitBreakerOpen(
                        f"Circuit {circuit_name} is open, rejecting call"
                    )

        try:
            result = func()
        except Exception:
            with self._lock:
                self._record_failure(state, circuit_name)
            raise

        with self._lock:
            self._record_success(state, circuit_name)
        return result

    def _get_circuit_state(self, circuit_name: str) -> CircuitBreakerState:
        """Get or create circuit breaker state."""
        if circuit_name not in self._circuit_states:
            self._circuit_states[circuit_name] = CircuitBreakerState()
        return self._circuit_states[circuit_name]

    def _should_attempt_recovery(self, state: CircuitBreakerState) -> bool:
        """Check if enough time has passed to attempt recovery."""
        if state.opened_at is None:
            return True
        elapsed = self._clock() - state.opened_at
        return elapsed >= self.circuit_breaker_config.recovery_timeout_seconds

    def _record_success(self, state: CircuitBreakerState, circuit_name: str) -> None:
        """Record successful execution."""
        if state.state == CircuitState.HALF_OPEN:
            state.success_count += 1
            if state.success_count >= self.circuit_breaker_config.success_threshold:
                state.state = CircuitState.CLOSED
                state.failure_count = 0
                state.success_count = 0
                state.opened_at = None
                logger.info(f"Circuit {circuit_name} closed after recovery")
        else:
            state.failure_count = 0

    def _record_failure(self, state: CircuitBreakerState, circuit_name: str) -> None:
        """Record failed execution."""
        state.failure_count += 1
        state.success_count = 0

        if state.state == CircuitState.HALF_OPEN:
            state.state = CircuitState.OPEN
            state.opened_at = self._clock()
            logger.warning(f"Circuit {circuit_name} re-opened after failed recovery")
        elif state.failure_count >= self.circuit_breaker_config.failure_threshold:
            state.state = CircuitState.OPEN
            state.opened_at = self._clock()
            logger.warning(
                f"Circuit {circuit_name} opened after {state.failure_count} failures"
            )

    def reset_circuit(self, circuit_name: str) -> None:
        """Reset a circuit breaker to closed state."""
        with self._lock:
            if circuit_name in self._circuit_states:
                self._circuit_states[circuit_name] = CircuitBreakerState()
                logger.info(f"Circuit {circuit_name} reset to closed state")

    def get_circuit_state(self, circuit_name: str) -> CircuitState:
        """Get current state of a circuit breaker."""
        with self._lock:
            return self._get_circuit_state(circuit_name).state
