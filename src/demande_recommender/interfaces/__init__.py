"""
Interfaces Layer - Abstract Protocols for Dependencies.

This package defines the abstract interfaces (using typing.Protocol) for all
external dependencies. Following the Dependency Inversion Principle, high-level
modules depend on these abstractions, not on concrete implementations.

Protocols:
    - ClinicDataSource: Request, roster and availability access
    - ConfigSource: Stored recommendation configurations
    - Advisor: External advisory model
    - RecommendationRepository: Result persistence and view log
    - AuditLogger: Logging abstraction for audit trail
    - MetricsCollector: Operational metrics abstraction

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Interface Segregation: Small, focused interfaces
    - No implementation details leak into interfaces
"""

from demande_recommender.interfaces.advisor import Advisor
from demande_recommender.interfaces.audit_logger import AuditLogger
from demande_recommender.interfaces.data_source import ClinicDataSource, ConfigSource
from demande_recommender.interfaces.metrics_collector import MetricsCollector
from demande_recommender.interfaces.recommendation_repository import (
    RecommendationRepository,
)

__all__ = [
    "Advisor",
    "AuditLogger",
    "ClinicDataSource",
    "ConfigSource",
    "MetricsCollector",
    "RecommendationRepository",
]
