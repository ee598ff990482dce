"""
Level Cache Module - Validated levels memoized by (tier, level index).

The cache is an ordinary object owned by the caller; there is no global
instance. Levels are immutable PuzzleState values, so the cached value
can be handed out directly without copying.
"""

import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..solver.board import PuzzleState
from .generator import LevelGenerator
from .tiers import DifficultyTier

logger = logging.getLogger(__name__)


CacheKey = Tuple[DifficultyTier, int]
GeneratorFactory = Callable[[DifficultyTier, int], LevelGenerator]


class LevelCache:
    """
    Thread-safe store of generated levels.

    A level is generated at most once per (tier, index): concurrent
    callers asking for the same key wait on a per-key lock while one of
    them generates, and an entry is only inserted after generation has
    returned a validated level. Different keys generate in parallel.

    Example:
        cache = LevelCache(base_seed=42)
        level = cache.get(TIERS[Difficulty.EASY], 1)
    """

    def __init__(
        self,
        generator_factory: Optional[GeneratorFactory] = None,
        base_seed: int = 0,
        generator_options: Optional[Mapping[str, Any]] = None
    ):
        """
        Initialize the cache.

        Args:
            generator_factory: Builds the generator for a (tier, index);
                defaults to LevelGenerator.for_level with `base_seed`
            base_seed: Seed shared by all levels when using the default factory
            generator_options: Extra LevelGenerator arguments for the default factory
        """
        self.base_seed = base_seed
        self._generator_options = dict(generator_options or {})
        self._generator_factory = generator_factory or self._default_factory
        self._levels: Dict[CacheKey, PuzzleState] = {}
        self._key_locks: Dict[CacheKey, threading.Lock] = {}
        self._lock = threading.Lock()
        self.generation_count = 0

    def _default_factory(self, tier: DifficultyTier, index: int) -> LevelGenerator:
        return LevelGenerator.for_level(
            tier, index, base_seed=self.base_seed, **self._generator_options
        )

    def get(self, tier: DifficultyTier, index: int) -> PuzzleState:
        """
        Get a level, generating and storing it on first use.

        Args:
            tier: Difficulty tier
            index: 1-based level number

        Returns:
            Validated PuzzleState with the move counter at zero

        Raises:
            ValueError: If index is outside 1..tier.levels
        """
        self._check_index(tier, index)
        key = (tier, index)

        with self._lock:
            cached = self._levels.get(key)
            if cached is not None:
                return cached
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            # Another thread may have finished while we waited
            with self._lock:
                cached = self._levels.get(key)
            if cached is not None:
                return cached

            logger.debug(f"[LevelCache] Generating {tier.name} level {index}")
            state = self._generator_factory(tier, index).generate(tier).fresh()

            with self._lock:
                self._levels[key] = state
                self.generation_count += 1
            return state

    def pre_generate(self, tier: DifficultyTier) -> None:
        """
        Fill the cache with every level of a tier.

        Args:
            tier: Difficulty tier
        """
        logger.info(f"[LevelCache] Pre-generating {tier.levels} levels for {tier.name}")
        for index in range(1, tier.levels + 1):
            self.get(tier, index)
        logger.info(f"[LevelCache] Pre-generation complete for {tier.name}")

    def contains(self, tier: DifficultyTier, index: int) -> bool:
        """Check if a level is already cached."""
        with self._lock:
            return (tier, index) in self._levels

    def clear(self) -> None:
        """Remove every cached level and its generation lock."""
        with self._lock:
            self._levels.clear()
            self._key_locks.clear()
        logger.info("[LevelCache] Cache cleared")

    def stats(self) -> Dict[str, int]:
        """
        Count cached levels per tier.

        Returns:
            {tier name: number of cached levels}
        """
        counts: Dict[str, int] = {}
        with self._lock:
            for tier, _ in self._levels:
                counts[tier.name] = counts.get(tier.name, 0) + 1
        return counts

    def __len__(self) -> int:
        with self._lock:
            return len(self._levels)

    @staticmethod
    def _check_index(tier: DifficultyTier, index: int) -> None:
        if not isinstance(tier, DifficultyTier):
            raise TypeError(f"Expected a DifficultyTier, got {type(tier).__name__}")
        if not tier.is_valid_level(index):
            raise ValueError(f"Level {index} out of range 1..{tier.levels} for {tier.name}")


def get_cached_level(cache: LevelCache, tier: DifficultyTier, index: int) -> PuzzleState:
    """
    Get a validated level from a cache.

    Args:
        cache: Caller-owned LevelCache
        tier: Difficulty tier
        index: 1-based level number

    Returns:
        PuzzleState for the level
    """
    return cache.get(tier, index)
