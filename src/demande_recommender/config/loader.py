"""
Configuration Loader - YAML Loading with Validation.

Loads recommendation configurations from YAML files and validates them
using the Pydantic models. Schema violations surface as InvalidConfig.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from demande_recommender.config.models import RecommendationConfig
from demande_recommender.domain.exceptions import InvalidConfig


def merge_config_dicts(
    base: Dict[str, Any],
    overlay: Dict[str, Any],
) -> Dict[str, Any]:
    """Deep merge overlay into base config."""
    result = dict(base)
    for key, value in overlay.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_config_dicts(result[key], value)
        else:
            result[key] = value
    return result


class ConfigLoader:
    """Loads and validates recommendation configuration from YAML files."""

    def __init__(self, base_path: Optional[Path] = None) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config paths
        """
        self._base_path = base_path or Path(".")

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> RecommendationConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file
            profile: Optional profile name to merge

        Returns:
            Validated RecommendationConfig object

        Raises:
            FileNotFoundError: If config file doesn't exist
            InvalidConfig: If config does not match the schema
        """
        path = self._resolve_path(config_path)
        config_dict = self._load_yaml(path)

        if profile:
            profile_dict = self._load_profile(profile)
            config_dict = merge_config_dicts(config_dict, profile_dict)

        return self.load_from_dict(config_dict)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> RecommendationConfig:
        """
        Load configuration from dictionary.

        Args:
            config_dict: Configuration as dictionary

        Returns:
            Validated RecommendationConfig object

        Raises:
            InvalidConfig: If config does not match the schema
        """
        try:
            return RecommendationConfig.model_validate(config_dict)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise InvalidConfig(
                f"Configuration schema invalid: {'; '.join(errors)}", errors
            ) from e

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        """Resolve config path relative to base path."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self._base_path / p

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML file."""
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        """Load profile configuration."""
        profile_path = self._base_path / "profiles" / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile}")
        return self._load_yaml(profile_path)


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> RecommendationConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to YAML config file
        profile: Optional profile name
        base_path: Base path for resolving relative paths

    Returns:
        Validated RecommendationConfig object
    """
    loader = ConfigLoader(base_path=base_path)
    return loader.load(config_path, profile)
