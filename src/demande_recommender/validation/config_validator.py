"""
Config Validator - Validate Recommendation Configurations.

Validates a configuration before any request or roster data is loaded:
    - Scoring weights sum to 1 (within tolerance)
    - Lookahead window is positive
    - Proficiency weights are known levels within [0, 1]
    - Demand-type mapping uses known demand types
    - Custom prompt templates keep their required placeholders
    - The schedule time zone is known

Design Notes:
    - Fail-fast principle
    - All problems reported in one InvalidConfig
"""

from __future__ import annotations

import logging
from typing import List, Optional
from zoneinfo import ZoneInfoNotFoundError

from demande_recommender.advisory.prompts import missing_placeholders
from demande_recommender.config.models import RecommendationConfig
from demande_recommender.domain.entities import DemandType, ProficiencyLevel
from demande_recommender.domain.exceptions import InvalidConfig

logger = logging.getLogger(__name__)


class ConfigValidator:
    """
    Validates recommendation configurations before processing.

    Validates:
        - Weights sum to 1 within WEIGHT_TOLERANCE
        - window_days > 0
        - Mapping tables reference known enum values
        - Advisory settings are usable when enabled
    """

    WEIGHT_TOLERANCE = 1e-6

    def validate(self, config: RecommendationConfig) -> None:
        """
        Validate a recommendation configuration.

        Args:
            config: Configuration to validate

        Raises:
            InvalidConfig: If validation fails
        """
        errors: List[str] = []

        weights_error = self._validate_weights(config)
        if weights_error:
            errors.append(weights_error)

        if config.window_days <= 0:
            errors.append(f"window_days must be > 0, got {config.window_days}")

        errors.extend(self._validate_proficiency_weights(config))
        errors.extend(self._validate_demand_type_specialties(config))
        errors.extend(self._validate_advisory(config))
        errors.extend(self._validate_schedule_timezone(config))

        if errors:
            error_message = "; ".join(errors)
            logger.error(f"Config validation failed ({config.key}): {error_message}")
            raise InvalidConfig(error_message, errors)

        logger.debug(
            f"Config validated: key={config.key}, version={config.version}"
        )

    def _validate_weights(self, config: RecommendationConfig) -> Optional[str]:
        """Validate the scoring weights sum to one."""
        total = config.scoring.weights.total
        if abs(total - 1.0) > self.WEIGHT_TOLERANCE:
            return f"scoring.weights must sum to 1, got {total:.6f}"
        return None

    def _validate_proficiency_weights(self, config: RecommendationConfig) -> List[str]:
        errors: List[str] = []
        known = {level.value for level in ProficiencyLevel}
        for level, weight in config.scoring.proficiency_weights.items():
            if level not in known:
                errors.append(f"scoring.proficiency_weights has unknown level '{level}'")
            elif not (0 <= weight <= 1):
                errors.append(
                    f"scoring.proficiency_weights.{level} must be between 0 and 1"
                )
        return errors

    def _validate_demand_type_specialties(self, config: RecommendationConfig) -> List[str]:
        known = {dt.value for dt in DemandType}
        return [
            f"eligibility.demand_type_specialties has unknown demand type '{key}'"
            for key in config.eligibility.demand_type_specialties
            if key not in known
        ]

    def _validate_advisory(self, config: RecommendationConfig) -> List[str]:
        errors: List[str] = []
        advisory = config.advisory
        if advisory.enabled and not advisory.model.strip():
            errors.append("advisory.model is empty while advisory is enabled")
        if advisory.user_prompt_template is not None:
            missing = missing_placeholders(advisory.user_prompt_template)
            if missing:
                errors.append(
                    "advisory.user_prompt_template is missing placeholders: "
                    + ", ".join(missing)
                )
        return errors

    def _validate_schedule_timezone(self, config: RecommendationConfig) -> List[str]:
        try:
            config.collector.clinic_tz()
        except (ZoneInfoNotFoundError, ValueError):
            return [
                "collector.schedule_timezone is not a known time zone: "
                f"'{config.collector.schedule_timezone}'"
            ]
        return []
