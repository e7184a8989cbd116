"""
Groq Advisor - Chat-Completions Advisory Model.

Sends the sanitized advisory input to a Groq-hosted model in JSON mode and
validates the response:
    - Markdown code fences around the JSON are tolerated
    - Rankings for unknown candidate ids are dropped
    - Candidates the model skipped get a neutral ranking
    - Adjustments are clamped to [-5, 5] and confidence to [0, 1]

The API key is read from GROQ_API_KEY unless passed explicitly.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import TYPE_CHECKING, Any, List, Optional

import groq
from groq import Groq
from pydantic import BaseModel, Field, ValidationError

from demande_recommender.advisory.models import (
    MAX_RANKING_ADJUSTMENT,
    AdvisoryOutput,
    AdvisoryRanking,
    ExtractedPreferences,
)
from demande_recommender.advisory.prompts import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_USER_PROMPT_TEMPLATE,
    build_user_prompt,
)
from demande_recommender.config.models import AdvisoryConfig
from demande_recommender.domain.exceptions import AdvisoryTimeout, AdvisoryUnavailable

if TYPE_CHECKING:
    from demande_recommender.sanitization.models import AdvisoryInput

logger = logging.getLogger(__name__)

API_KEY_ENV = "GROQ_API_KEY"

NEUTRAL_REASONING = "Candidat non analysé par le modèle; score déterministe conservé."

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


class _RankingPayload(BaseModel):
    professional_id: str
    ranking_adjustment: float = 0.0
    reasoning: List[str] = Field(default_factory=list)
    confidence: float = 1.0


class _ResponsePayload(BaseModel):
    rankings: List[_RankingPayload] = Field(default_factory=list)
    extracted_preferences: ExtractedPreferences = Field(
        default_factory=ExtractedPreferences
    )
    summary: Optional[str] = None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def parse_advisory_response(content: str, candidate_ids: List[str]) -> AdvisoryOutput:
    """
    Parse and normalize a raw model response.

    Args:
        content: Raw message content
        candidate_ids: Ids sent to the model, in deterministic order

    Returns:
        AdvisoryOutput with exactly one ranking per candidate id

    Raises:
        AdvisoryUnavailable: If the content is not valid JSON of the
            expected shape
    """
    text = content.strip()
    fenced = _FENCE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    try:
        raw: Any = json.loads(text)
        payload = _ResponsePayload.model_validate(raw)
    except json.JSONDecodeError as e:
        raise AdvisoryUnavailable(f"Advisory response is not valid JSON: {e.msg}") from e
    except ValidationError as e:
        raise AdvisoryUnavailable(
            f"Advisory response has an unexpected shape: {e.error_count()} errors"
        ) from e

    known = set(candidate_ids)
    received = {}
    for item in payload.rankings:
        if item.professional_id not in known:
            logger.debug(f"Dropping advisory ranking for unknown id {item.professional_id}")
            continue
        received.setdefault(item.professional_id, item)

    rankings: List[AdvisoryRanking] = []
    for professional_id in candidate_ids:
        item = received.get(professional_id)
        if item is None:
            rankings.append(
                AdvisoryRanking(
                    professional_id=professional_id,
                    ranking_adjustment=0.0,
                    reasoning=[NEUTRAL_REASONING],
                )
            )
            continue
        rankings.append(
            AdvisoryRanking(
                professional_id=professional_id,
                ranking_adjustment=_clamp(
                    item.ranking_adjustment, -MAX_RANKING_ADJUSTMENT, MAX_RANKING_ADJUSTMENT
                ),
                reasoning=item.reasoning,
                confidence=_clamp(item.confidence, 0.0, 1.0),
            )
        )

    return AdvisoryOutput(
        rankings=rankings,
        extracted_preferences=payload.extracted_preferences,
        summary=payload.summary,
    )


class GroqAdvisor:
    """Advisory model backed by Groq chat completions."""

    def __init__(
        self,
        settings: AdvisoryConfig,
        api_key: Optional[str] = None,
    ) -> None:
        """
        Initialize the advisor.

        Args:
            settings: Model, timeout and prompt settings
            api_key: Overrides GROQ_API_KEY
        """
        self.settings = settings
        self._api_key = api_key or os.environ.get(API_KEY_ENV)
        self._client: Optional[Groq] = None

    @property
    def model_id(self) -> str:
        return self.settings.model

    def advise(self, advisory_input: AdvisoryInput) -> AdvisoryOutput:
        """
        Ask the model to adjust the ranking of the sanitized candidates.

        Raises:
            AdvisoryTimeout: If the request timed out
            AdvisoryUnavailable: If no key is configured, the API failed
                or the response could not be used
        """
        if not advisory_input.candidates:
            return AdvisoryOutput()

        client = self._get_client()
        system_prompt = self.settings.system_prompt or DEFAULT_SYSTEM_PROMPT
        template = self.settings.user_prompt_template or DEFAULT_USER_PROMPT_TEMPLATE

        try:
            response = client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": build_user_prompt(advisory_input, template)},
                ],
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
                response_format={"type": "json_object"},
            )
        except groq.APITimeoutError as e:
            raise AdvisoryTimeout(f"Groq request timed out: {e}") from e
        except groq.APIError as e:
            raise AdvisoryUnavailable(f"Groq request failed: {e}") from e

        content = response.choices[0].message.content or ""
        output = parse_advisory_response(content, advisory_input.candidate_ids)
        logger.info(
            f"Advisory from {self.model_id}: {len(output.rankings)} rankings"
        )
        return output

    def _get_client(self) -> Groq:
        if not self._api_key:
            raise AdvisoryUnavailable(f"{API_KEY_ENV} is not set")
        if self._client is None:
            self._client = Groq(
                api_key=self._api_key,
                timeout=self.settings.timeout_seconds,
                max_retries=0,
            )
        return self._client
