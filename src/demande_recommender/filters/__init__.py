"""
Filters Package - Eligibility Filtering.

    - EligibilityFilter: Hard exclusions and soft near-misses
    - rules: Individual rule checks keyed by reason code
"""

from demande_recommender.filters.eligibility import EligibilityFilter
from demande_recommender.filters.rules import HARD_RULES, SOFT_RULES, RuleFailure

__all__ = ["EligibilityFilter", "HARD_RULES", "RuleFailure", "SOFT_RULES"]
