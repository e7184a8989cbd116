"""
Resilience Package - Error Handling and Fault Tolerance.

This package provides resilience patterns for robust operation:
    - ErrorHandler: Retry and circuit breaker
    - Graceful degradation when the advisory model is unavailable

Design Principles:
    - Fail fast for permanent errors (unknown demande, invalid config)
    - Retry with backoff for transient store errors
    - Circuit breaker for a persistently failing advisory model
"""

from demande_recommender.resilience.error_handler import (
    CircuitBreakerConfig,
    CircuitBreakerOpen,
    CircuitState,
    ErrorHandler,
    RetryConfig,
    RetryExhausted,
)

__all__ = [
    "CircuitBreakerConfig",
    "CircuitBreakerOpen",
    "CircuitState",
    "ErrorHandler",
    "RetryConfig",
    "RetryExhausted",
]
