"""
Level Loader Module - Fixed levels read from a JSON file.

Expected layout:

    {
      "levels": {
        "EASY": [
          {"tubes": [["RED", "BLUE", "RED", "GREEN"], ..., [], []]},
          ...
        ],
        "MEDIUM": [...]
      }
    }

Each tube lists its balls from bottom to top. The loader only reads.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from ..solver.board import PuzzleState
from ..solver.errors import LevelLoadError
from .tiers import DifficultyTier

logger = logging.getLogger(__name__)


class LevelLoader:
    """
    Reads fixed levels and checks them against their tier.

    The file is parsed once on first use.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize the loader.

        Args:
            path: Path of the levels JSON file
        """
        self.path = Path(path)
        self._data: Dict[str, Any] = {}
        self._loaded = False

    def _load_file(self) -> Dict[str, Any]:
        if self._loaded:
            return self._data

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except FileNotFoundError:
            raise LevelLoadError(f"Levels file not found: {self.path}") from None
        except (json.JSONDecodeError, IOError) as e:
            raise LevelLoadError(f"Failed to read levels file {self.path}: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("levels"), dict):
            raise LevelLoadError(f"Missing 'levels' object in {self.path}")

        self._data = document["levels"]
        self._loaded = True
        logger.debug(f"Levels file loaded: {self.path} (tiers: {list(self._data.keys())})")
        return self._data

    def level_count(self, tier: DifficultyTier) -> int:
        """
        Number of fixed levels stored for a tier.

        Args:
            tier: Difficulty tier

        Returns:
            Level count (0 if the tier is missing)
        """
        levels = self._load_file().get(tier.name)
        return len(levels) if isinstance(levels, list) else 0

    def load(self, tier: DifficultyTier, index: int) -> PuzzleState:
        """
        Load one fixed level.

        Args:
            tier: Difficulty tier the level belongs to
            index: 1-based level number

        Returns:
            PuzzleState with the move counter at zero

        Raises:
            LevelLoadError: If the level is missing or does not fit the tier
        """
        levels = self._load_file()
        if not tier.is_valid_level(index):
            raise LevelLoadError(f"Invalid level number {index} for {tier.name}")

        tier_levels = levels.get(tier.name)
        if not isinstance(tier_levels, list):
            raise LevelLoadError(f"Tier not found in levels file: {tier.name}")
        if index > len(tier_levels):
            raise LevelLoadError(
                f"Level {index} not found for {tier.name} (available: {len(tier_levels)})"
            )

        level_data = tier_levels[index - 1]
        if not isinstance(level_data, dict) or "tubes" not in level_data:
            raise LevelLoadError(f"Missing 'tubes' in {tier.name} level {index}")

        tubes = level_data["tubes"]
        self._validate_tubes(tubes, tier, index)

        try:
            state = PuzzleState.from_colors(tubes, capacity=tier.capacity)
        except ValueError as e:
            raise LevelLoadError(f"Invalid {tier.name} level {index}: {e}") from e

        logger.info(f"Loaded {tier.name} level {index} from {self.path.name}")
        return state

    @staticmethod
    def _validate_tubes(tubes: List[Any], tier: DifficultyTier, index: int) -> None:
        if not isinstance(tubes, list):
            raise LevelLoadError(f"'tubes' must be a list in {tier.name} level {index}")
        if len(tubes) != tier.container_count:
            raise LevelLoadError(
                f"Tube count mismatch in {tier.name} level {index}: "
                f"expected {tier.container_count}, found {len(tubes)}"
            )
        for position, tube in enumerate(tubes):
            if not isinstance(tube, list):
                raise LevelLoadError(
                    f"Tube {position} of {tier.name} level {index} must be a list of colors"
                )
            if len(tube) > tier.capacity:
                raise LevelLoadError(
                    f"Tube {position} of {tier.name} level {index} holds {len(tube)} balls, "
                    f"capacity is {tier.capacity}"
                )
