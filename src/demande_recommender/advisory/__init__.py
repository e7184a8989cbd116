"""
Advisory Package - Optional External Ranking Advice.

    - AdvisoryLayer: Timeout and circuit breaker around the advisor
    - GroqAdvisor: Groq chat-completions advisor
    - Holistic classifier: Body / energy / lifestyle intent in client text
    - Prompt builder: Default prompts and placeholder substitution

Design Principles:
    - The advisor only ever receives sanitized input
    - Advice is bounded; it can reorder close candidates, never override
      a large deterministic gap
    - Every failure falls back to deterministic ranking
"""

from demande_recommender.advisory.advisory_layer import AdvisoryLayer, AdvisoryResult
from demande_recommender.advisory.groq_advisor import GroqAdvisor, parse_advisory_response
from demande_recommender.advisory.holistic import classify_holistic_intent
from demande_recommender.advisory.models import (
    AdvisoryOutput,
    AdvisoryRanking,
    ExtractedPreferences,
    HolisticCategory,
    HolisticSignal,
)
from demande_recommender.advisory.prompts import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_USER_PROMPT_TEMPLATE,
    build_user_prompt,
    missing_placeholders,
)

__all__ = [
    "AdvisoryLayer",
    "AdvisoryOutput",
    "AdvisoryRanking",
    "AdvisoryResult",
    "DEFAULT_SYSTEM_PROMPT",
    "DEFAULT_USER_PROMPT_TEMPLATE",
    "ExtractedPreferences",
    "GroqAdvisor",
    "HolisticCategory",
    "HolisticSignal",
    "build_user_prompt",
    "classify_holistic_intent",
    "missing_placeholders",
    "parse_advisory_response",
]
