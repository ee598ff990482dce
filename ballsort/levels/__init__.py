"""
Levels Package - Difficulty tiers, level generation, caching and progress.
"""

from .tiers import TIERS, Difficulty, DifficultyTier, apply_overrides, get_tier
from .generator import GenerationReport, LevelGenerator, generate
from .cache import LevelCache, get_cached_level
from .loader import LevelLoader
from .progress import InMemoryProgressStore, ProgressStore, calculate_stars

__all__ = [
    "TIERS",
    "Difficulty",
    "DifficultyTier",
    "apply_overrides",
    "get_tier",
    "GenerationReport",
    "LevelGenerator",
    "generate",
    "LevelCache",
    "get_cached_level",
    "LevelLoader",
    "ProgressStore",
    "InMemoryProgressStore",
    "calculate_stars",
]
