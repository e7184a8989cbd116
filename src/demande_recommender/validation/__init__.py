"""
Validation Package - Configuration Validation.

This package provides validation for:
    - ConfigValidator: Validate a recommendation config before any data fetch

Design Principles:
    - Fail fast on invalid input
    - Clear, actionable error messages
"""

from demande_recommender.validation.config_validator import ConfigValidator

__all__ = ["ConfigValidator"]
