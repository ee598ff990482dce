"""
Difficulty Tiers Module - Generation and search parameters per difficulty.

Tiers are plain data: one immutable DifficultyTier per Difficulty,
looked up in a table instead of branching on the difficulty.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..solver.color import Color

logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """Named difficulty levels in increasing order."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def from_name(cls, name: str) -> "Difficulty":
        """
        Parse a difficulty from its member or display name.

        Args:
            name: e.g. "easy", "EASY" or "Easy"

        Returns:
            Matching Difficulty

        Raises:
            ValueError: If the name is empty or unknown
        """
        if name is None or not str(name).strip():
            raise ValueError("Difficulty name must not be empty")
        text = str(name).strip()
        for member in cls:
            if member.name == text.upper() or member.value.lower() == text.lower():
                return member
        raise ValueError(f"Unknown difficulty: {name}")


@dataclass(frozen=True)
class DifficultyTier:
    """
    Parameters of one difficulty tier.

    Attributes:
        difficulty: Difficulty this tier belongs to
        container_count: Number of tubes
        color_count: Number of ball colors (first N of the palette)
        capacity: Balls per tube, also balls per color
        empty_container_count: Tubes left empty at the start
        horizon: Longest plan the solvability check accepts
        max_generation_attempts: Random candidates tried before the fallback
        levels: Number of levels in the tier
    """
    difficulty: Difficulty
    container_count: int
    color_count: int
    capacity: int
    empty_container_count: int
    horizon: int
    max_generation_attempts: int
    levels: int = 5

    def __post_init__(self):
        problems = []
        if self.container_count != self.color_count + self.empty_container_count:
            problems.append(
                f"container_count {self.container_count} must equal color_count "
                f"{self.color_count} + empty_container_count {self.empty_container_count}"
            )
        if self.empty_container_count < 1:
            problems.append("at least one empty container is required")
        if self.capacity < 2:
            problems.append(f"capacity must be at least 2, got {self.capacity}")
        if not 1 <= self.color_count <= len(Color):
            problems.append(f"color_count must be between 1 and {len(Color)}, got {self.color_count}")
        if self.horizon < 1:
            problems.append(f"horizon must be positive, got {self.horizon}")
        if self.max_generation_attempts < 1:
            problems.append(
                f"max_generation_attempts must be positive, got {self.max_generation_attempts}"
            )
        if self.levels < 1:
            problems.append(f"levels must be positive, got {self.levels}")
        if problems:
            raise ValueError(f"Invalid tier {self.difficulty.name}: " + "; ".join(problems))

    @property
    def name(self) -> str:
        return self.difficulty.name

    @property
    def total_items(self) -> int:
        """Number of balls in a level of this tier."""
        return self.color_count * self.capacity

    @property
    def colors(self) -> Tuple[Color, ...]:
        """Colors used by this tier, in palette order."""
        return Color.palette(self.color_count)

    def is_valid_level(self, index: int) -> bool:
        """Check a 1-based level index."""
        return 1 <= index <= self.levels

    def __str__(self) -> str:
        return (
            f"{self.difficulty.value} ({self.container_count} tubes, "
            f"{self.color_count} colors, capacity {self.capacity})"
        )


TIERS: Dict[Difficulty, DifficultyTier] = {
    Difficulty.EASY: DifficultyTier(
        difficulty=Difficulty.EASY, container_count=6, color_count=4, capacity=4,
        empty_container_count=2, horizon=15, max_generation_attempts=25,
    ),
    Difficulty.MEDIUM: DifficultyTier(
        difficulty=Difficulty.MEDIUM, container_count=7, color_count=5, capacity=4,
        empty_container_count=2, horizon=20, max_generation_attempts=25,
    ),
    Difficulty.HARD: DifficultyTier(
        difficulty=Difficulty.HARD, container_count=9, color_count=7, capacity=4,
        empty_container_count=2, horizon=25, max_generation_attempts=25,
    ),
}


def get_tier(
    difficulty: Union[Difficulty, str],
    table: Optional[Mapping[Difficulty, DifficultyTier]] = None
) -> DifficultyTier:
    """
    Look up the tier for a difficulty.

    Args:
        difficulty: Difficulty or its name
        table: Tier table to use (TIERS if None)

    Returns:
        DifficultyTier
    """
    if not isinstance(difficulty, Difficulty):
        difficulty = Difficulty.from_name(difficulty)
    return (table or TIERS)[difficulty]


_TIER_FIELDS = (
    "container_count", "color_count", "capacity", "empty_container_count",
    "horizon", "max_generation_attempts", "levels",
)


def apply_overrides(overrides: Mapping[str, Mapping[str, Any]]) -> Dict[Difficulty, DifficultyTier]:
    """
    Build a tier table with per-tier overrides applied.

    Args:
        overrides: {"EASY": {"horizon": 18}, ...}; unknown tiers or fields
            are skipped with a warning

    Returns:
        New tier table

    Raises:
        ValueError: If an override produces an invalid tier
    """
    table = dict(TIERS)
    for tier_name, values in (overrides or {}).items():
        try:
            difficulty = Difficulty.from_name(tier_name)
        except ValueError:
            logger.warning(f"Ignoring overrides for unknown tier: {tier_name}")
            continue
        changes = {}
        for key, value in values.items():
            if key not in _TIER_FIELDS:
                logger.warning(f"Ignoring unknown tier field {tier_name}.{key}")
                continue
            changes[key] = int(value)
        if changes:
            table[difficulty] = replace(table[difficulty], **changes)
            logger.debug(f"Tier {difficulty.name} overridden: {changes}")
    return table
