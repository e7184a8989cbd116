"""
Sanitization Package - PII Boundary.

    - Sanitizer: Builds the advisory input from the demande and scores
    - SanitizedCandidate / AdvisoryInput: The only shapes sent outside
"""

from demande_recommender.sanitization.models import (
    SANITIZED_CANDIDATE_KEYS,
    AdvisoryInput,
    SanitizedCandidate,
)
from demande_recommender.sanitization.sanitizer import (
    PII_PATTERNS,
    Sanitizer,
    find_pii,
    scrub_text,
)

__all__ = [
    "AdvisoryInput",
    "PII_PATTERNS",
    "SANITIZED_CANDIDATE_KEYS",
    "SanitizedCandidate",
    "Sanitizer",
    "find_pii",
    "scrub_text",
]
