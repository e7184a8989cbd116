"""
YAML Config Source.

Serves stored recommendation configurations from a directory of YAML
files, one file per key (``<key>.yaml``). Profiles under ``profiles/``
can be layered on top of a key.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from demande_recommender.config.loader import merge_config_dicts

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class YamlConfigSource:
    """ConfigSource backed by YAML files."""

    def __init__(
        self,
        config_dir: Union[str, Path],
        profile: Optional[str] = None,
    ) -> None:
        """
        Initialize the source.

        Args:
            config_dir: Directory holding <key>.yaml files
            profile: Optional profile merged over every key
        """
        self._config_dir = Path(config_dir)
        self._profile = profile

    def fetch_recommendation_config(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Load the configuration stored under a key.

        Returns:
            Raw config mapping, or None when no file exists for the key
        """
        if not _KEY_PATTERN.match(key):
            logger.warning(f"Rejecting config key with unexpected characters: {key!r}")
            return None

        path = self._config_dir / f"{key}.yaml"
        if not path.exists():
            return None

        config = self._load_yaml(path)
        config.setdefault("key", key)

        if self._profile:
            profile_path = self._config_dir / "profiles" / f"{self._profile}.yaml"
            if not profile_path.exists():
                raise FileNotFoundError(f"Profile not found: {self._profile}")
            config = merge_config_dicts(config, self._load_yaml(profile_path))
        return config

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
