"""
Settings Module for the Ball Sort engine

Reads user preferences from a JSON file. Settings are looked up in
config.json in the working directory unless another path is given.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .levels.tiers import Difficulty, DifficultyTier, apply_overrides

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "strategy_name": "bfs",
    "generator_strategy": "astar",
    "default_horizon": 40,
    "timeout_sec": 30.0,
    "max_nodes": None,
    "generation_max_nodes": 200_000,
    "base_seed": 0,
    "tiers": {},
}


def load_settings(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file (SETTINGS_FILE if None)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    if not settings_file.exists():
        logger.debug(f"Settings file not found ({settings_file}), using defaults")
        return _defaults()

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            settings = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return _defaults()

    if not isinstance(settings, dict):
        logger.warning(f"Settings file {settings_file} is not a JSON object, using defaults")
        return _defaults()

    # Merge with defaults to handle missing keys
    result = _defaults()
    for key, value in settings.items():
        if key not in DEFAULT_SETTINGS:
            logger.warning(f"Unknown setting ignored: {key}")
            continue
        result[key] = value
    logger.debug(f"Settings loaded: {result}")
    return result


def tiers_from_settings(settings: Dict[str, Any]) -> Dict[Difficulty, DifficultyTier]:
    """
    Build the tier table with the "tiers" overrides of a settings dict.

    Args:
        settings: Dictionary returned by load_settings()

    Returns:
        Tier table keyed by Difficulty

    Raises:
        ValueError: If an override produces an invalid tier
    """
    overrides = settings.get("tiers") or {}
    if not isinstance(overrides, dict):
        logger.warning("Setting 'tiers' must be an object, ignoring overrides")
        overrides = {}
    return apply_overrides(overrides)


def _defaults() -> Dict[str, Any]:
    result = DEFAULT_SETTINGS.copy()
    result["tiers"] = {}
    return result
