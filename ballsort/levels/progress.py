"""
Progress Module - Level completion tracking interface.

The engine only talks to a ProgressStore; where completions are kept is
up to the application. InMemoryProgressStore keeps them for the lifetime
of the process and is what tests and the command line use.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Tuple

from .tiers import Difficulty, DifficultyTier

logger = logging.getLogger(__name__)


# Reference move counts used for star ratings
OPTIMAL_MOVES: Dict[Difficulty, int] = {
    Difficulty.EASY: 15,
    Difficulty.MEDIUM: 25,
    Difficulty.HARD: 35,
}

NO_BEST = -1


def calculate_stars(tier: DifficultyTier, moves: int) -> int:
    """
    Rate a completion from 0 to 3 stars.

    Args:
        tier: Tier of the level
        moves: Moves used to finish it

    Returns:
        3 within the reference count, 2 within 1.5x, 1 within 2x, else 0
    """
    optimal = OPTIMAL_MOVES.get(tier.difficulty, tier.horizon)
    if moves <= optimal:
        return 3
    if moves <= optimal * 1.5:
        return 2
    if moves <= optimal * 2:
        return 1
    return 0


class ProgressStore(ABC):
    """
    Abstract completion tracker consumed by the engine.

    Subclasses store completions; the unlock and progress rules are
    shared here.
    """

    @abstractmethod
    def is_level_completed(self, tier: DifficultyTier, index: int) -> bool:
        """Check if a level has been finished at least once."""
        pass

    @abstractmethod
    def record_completion(self, tier: DifficultyTier, index: int, move_count: int) -> None:
        """
        Record that a level was finished.

        Args:
            tier: Tier of the level
            index: 1-based level number
            move_count: Moves used
        """
        pass

    @abstractmethod
    def best_moves(self, tier: DifficultyTier, index: int) -> int:
        """Fewest moves recorded for a level, or NO_BEST."""
        pass

    @abstractmethod
    def stars(self, tier: DifficultyTier, index: int) -> int:
        """Best star rating recorded for a level."""
        pass

    def is_level_unlocked(self, tier: DifficultyTier, index: int) -> bool:
        """
        Level 1 is always open; level n opens when level n-1 is completed.

        Args:
            tier: Difficulty tier
            index: 1-based level number

        Returns:
            True if the level can be played
        """
        if index <= 1:
            return True
        return self.is_level_completed(tier, index - 1)

    def progress_for(self, tier: DifficultyTier) -> float:
        """
        Fraction of a tier's levels completed.

        Returns:
            Value from 0.0 to 1.0
        """
        completed = sum(
            1 for index in range(1, tier.levels + 1)
            if self.is_level_completed(tier, index)
        )
        return completed / tier.levels


class InMemoryProgressStore(ProgressStore):
    """ProgressStore kept in a dictionary, safe to use from several threads."""

    def __init__(self):
        self._records: Dict[Tuple[Difficulty, int], Tuple[int, int]] = {}
        self._lock = threading.Lock()

    def is_level_completed(self, tier: DifficultyTier, index: int) -> bool:
        with self._lock:
            return (tier.difficulty, index) in self._records

    def record_completion(self, tier: DifficultyTier, index: int, move_count: int) -> None:
        if move_count < 0:
            raise ValueError(f"move_count must not be negative, got {move_count}")
        key = (tier.difficulty, index)
        stars = calculate_stars(tier, move_count)
        with self._lock:
            previous = self._records.get(key)
            # Only an improvement replaces an earlier completion
            if previous is not None and previous[0] <= move_count:
                return
            best_stars = max(stars, previous[1]) if previous else stars
            self._records[key] = (move_count, best_stars)
        logger.info(f"{tier.name} level {index} completed in {move_count} moves ({best_stars} stars)")

    def best_moves(self, tier: DifficultyTier, index: int) -> int:
        with self._lock:
            record = self._records.get((tier.difficulty, index))
        return record[0] if record else NO_BEST

    def stars(self, tier: DifficultyTier, index: int) -> int:
        with self._lock:
            record = self._records.get((tier.difficulty, index))
        return record[1] if record else 0

    def reset(self) -> None:
        """Forget every completion."""
        with self._lock:
            self._records.clear()
