"""
Adapters Package - Infrastructure Implementations.

This package contains concrete implementations of the protocols defined
in the interfaces package (Ports & Adapters).

Stores:
    - MockClinicDataSource: Dict-backed request/roster/availability store
    - YamlConfigSource: Configurations from a directory of YAML files
    - InMemoryRecommendationRepository: Results and view log in memory

Loggers:
    - ConsoleAuditLogger: Simple console output
    - StructuredAuditLogger: structlog events with correlation IDs

Metrics:
    - InMemoryMetricsCollector: Simple in-memory collection

Advisors:
    - StaticAdvisor: Fixed adjustments, for offline use and tests

Design Principles:
    - All adapters implement their respective protocols
    - No business logic in adapters
"""

from demande_recommender.adapters.console_logger import ConsoleAuditLogger
from demande_recommender.adapters.in_memory_repository import InMemoryRecommendationRepository
from demande_recommender.adapters.metrics_collector import InMemoryMetricsCollector
from demande_recommender.adapters.mock_provider import MockClinicDataSource
from demande_recommender.adapters.static_advisor import StaticAdvisor
from demande_recommender.adapters.structured_logger import (
    StructuredAuditLogger,
    configure_structlog,
)
from demande_recommender.adapters.yaml_config_source import YamlConfigSource

__all__ = [
    "ConsoleAuditLogger",
    "InMemoryMetricsCollector",
    "InMemoryRecommendationRepository",
    "MockClinicDataSource",
    "StaticAdvisor",
    "StructuredAuditLogger",
    "YamlConfigSource",
    "configure_structlog",
]
