"""
Configuration Package - Models and Loaders.

This package handles all configuration aspects of the recommendation engine:
    - Pydantic models for type-safe configuration
    - YAML loader with validation
    - Support for configuration profiles (e.g. high_urgency, legal_context)

Configuration Structure:
    - RecommendationConfig: Root configuration object
    - ScoringConfig / ScoringWeights: Scorer weights and normalization caps
    - EligibilityConfig: Hard and soft filter thresholds
    - AdvisoryConfig: Advisory model settings
    - CollectorConfig: Data collector fan-out settings

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
    - Passed explicitly through the pipeline, never module-level state
"""

from demande_recommender.config.loader import ConfigLoader, load_config, merge_config_dicts
from demande_recommender.config.models import (
    AdvisoryConfig,
    CollectorConfig,
    EligibilityConfig,
    RecommendationConfig,
    ScoringConfig,
    ScoringWeights,
    get_default_config,
)

__all__ = [
    "AdvisoryConfig",
    "CollectorConfig",
    "ConfigLoader",
    "EligibilityConfig",
    "RecommendationConfig",
    "ScoringConfig",
    "ScoringWeights",
    "get_default_config",
    "load_config",
    "merge_config_dicts",
]
