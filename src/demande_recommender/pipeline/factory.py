"""
Pipeline Factory.

Wires a RecommendationPipeline with default adapters for anything the
caller does not supply.
"""

from __future__ import annotations

from typing import Optional

from demande_recommender.adapters.console_logger import ConsoleAuditLogger
from demande_recommender.adapters.in_memory_repository import InMemoryRecommendationRepository
from demande_recommender.adapters.metrics_collector import InMemoryMetricsCollector
from demande_recommender.interfaces.advisor import Advisor
from demande_recommender.interfaces.audit_logger import AuditLogger
from demande_recommender.interfaces.data_source import ClinicDataSource, ConfigSource
from demande_recommender.interfaces.metrics_collector import MetricsCollector
from demande_recommender.interfaces.recommendation_repository import (
    RecommendationRepository,
)
from demande_recommender.pipeline.recommendation_pipeline import RecommendationPipeline
from demande_recommender.resilience.error_handler import (
    CircuitBreakerConfig,
    ErrorHandler,
    RetryConfig,
)


def create_pipeline(
    data_source: ClinicDataSource,
    config_source: Optional[ConfigSource] = None,
    repository: Optional[RecommendationRepository] = None,
    advisor: Optional[Advisor] = None,
    audit_logger: Optional[AuditLogger] = None,
    metrics_collector: Optional[MetricsCollector] = None,
    error_handler: Optional[ErrorHandler] = None,
    verbose: bool = False,
) -> RecommendationPipeline:
    """
    Create a pipeline with sensible defaults.

    Args:
        data_source: Request, roster and availability store
        config_source: Stored configurations (defaults used if None)
        repository: Result store (in-memory if None)
        advisor: Advisory model (deterministic-only if None)
        audit_logger: Audit trail (console if None)
        metrics_collector: Metrics sink (in-memory if None)
        error_handler: Retry and circuit breaker policy
        verbose: Console logger prints per-candidate events

    Returns:
        Configured RecommendationPipeline
    """
    if config_source is None and isinstance(data_source, ConfigSource):
        config_source = data_source

    return RecommendationPipeline(
        data_source=data_source,
        config_source=config_source,
        repository=repository or InMemoryRecommendationRepository(),
        audit_logger=audit_logger or ConsoleAuditLogger(verbose=verbose),
        metrics_collector=metrics_collector or InMemoryMetricsCollector(),
        advisor=advisor,
        error_handler=error_handler
        or ErrorHandler(RetryConfig(), CircuitBreakerConfig()),
    )
