"""
Tests for settings loading and tier overrides.

Usage:
    pytest tests/test_settings.py
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ballsort.levels import TIERS, Difficulty
from ballsort.settings import DEFAULT_SETTINGS, load_settings, tiers_from_settings


def write_config(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content if isinstance(content, str) else json.dumps(content), encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "missing.json")
    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS
    assert settings["strategy_name"] == "bfs"
    assert settings["generator_strategy"] == "astar"
    assert settings["default_horizon"] == 40
    assert settings["timeout_sec"] == 30.0


def test_file_values_override_defaults(tmp_path):
    path = write_config(tmp_path, {"strategy_name": "astar", "base_seed": 7, "colour": "red"})
    settings = load_settings(path)
    assert settings["strategy_name"] == "astar"
    assert settings["base_seed"] == 7
    assert settings["default_horizon"] == 40
    assert "colour" not in settings


@pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
def test_invalid_file_gives_defaults(tmp_path, content):
    assert load_settings(write_config(tmp_path, content)) == DEFAULT_SETTINGS


def test_tier_overrides(tmp_path):
    path = write_config(tmp_path, {"tiers": {"EASY": {"horizon": 18, "levels": 8}}})
    tiers = tiers_from_settings(load_settings(path))
    assert tiers[Difficulty.EASY].horizon == 18
    assert tiers[Difficulty.EASY].levels == 8
    assert tiers[Difficulty.HARD] == TIERS[Difficulty.HARD]
    assert TIERS[Difficulty.EASY].horizon == 15


def test_invalid_tier_override_raises():
    with pytest.raises(ValueError):
        tiers_from_settings({"tiers": {"EASY": {"color_count": 9}}})


def test_defaults_are_not_shared():
    settings = load_settings(Path("does-not-exist.json"))
    settings["tiers"]["EASY"] = {"horizon": 1}
    assert DEFAULT_SETTINGS["tiers"] == {}
