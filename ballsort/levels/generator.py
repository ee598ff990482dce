"""
Level Generator Module - Random solvable levels by generate-and-test.

Candidates are built by shuffling every ball of the tier and filling the
first `color_count` tubes completely; the remaining tubes start empty.
Each candidate is checked with the solver and rejected unless a plan
within the tier's horizon is found. After `max_generation_attempts`
rejections a fixed, one-move-from-solved level is returned instead.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

import numpy as np

from ..solver.board import PuzzleState
from ..solver.color import Item
from ..solver.context import SolutionContext
from ..solver.errors import GenerationOutcome
from ..solver.factory import create_strategy
from ..solver.move import Move
from ..solver.solution import Plan, Solution
from ..solver.tube import Tube
from .tiers import Difficulty, DifficultyTier

logger = logging.getLogger(__name__)


# Solvability checks only need a verdict, so the faster strategy is used
DEFAULT_GENERATOR_STRATEGY = "astar"

# Budget per solvability check; a check that runs out rejects the candidate
DEFAULT_GENERATION_MAX_NODES = 200_000
DEFAULT_GENERATION_TIMEOUT_SEC = 10.0

SeedLike = Union[None, int, np.random.SeedSequence]


@dataclass(frozen=True)
class GenerationReport:
    """
    Outcome of one generate call.

    Attributes:
        state: The generated level (move counter at zero)
        attempts: Random candidates tried
        outcome: ACCEPTED, or EXHAUSTED when the fallback level was used
        plan: Shortest plan found for the level
    """
    state: PuzzleState
    attempts: int
    outcome: GenerationOutcome
    plan: Plan = ()

    @property
    def solution_length(self) -> int:
        return len(self.plan)

    @property
    def used_fallback(self) -> bool:
        return self.outcome is GenerationOutcome.EXHAUSTED


class LevelGenerator:
    """
    Builds random levels and keeps only those the solver can finish.

    Randomness comes from a numpy Generator seeded at construction, so
    two generators with the same seed produce the same levels.

    Example:
        generator = LevelGenerator(seed=7)
        state = generator.generate(TIERS[Difficulty.EASY])
    """

    def __init__(
        self,
        seed: SeedLike = None,
        strategy: str = DEFAULT_GENERATOR_STRATEGY,
        max_nodes: Optional[int] = DEFAULT_GENERATION_MAX_NODES,
        timeout_sec: Optional[float] = DEFAULT_GENERATION_TIMEOUT_SEC,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize the generator.

        Args:
            seed: Seed for the shuffle (ignored when rng is given)
            strategy: Strategy name used for the solvability check
            max_nodes: Expansion budget per check (None = unlimited)
            timeout_sec: Time budget per check in seconds (None = unlimited)
            rng: Ready-made numpy Generator to draw from
        """
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._strategy = create_strategy(strategy)
        self.max_nodes = max_nodes
        self.timeout_sec = timeout_sec

    @classmethod
    def for_level(
        cls,
        tier: DifficultyTier,
        index: int,
        base_seed: int = 0,
        **kwargs
    ) -> "LevelGenerator":
        """
        Create a generator whose output depends only on (base_seed, tier, index).

        Args:
            tier: Tier of the level
            index: 1-based level number
            base_seed: Seed shared by all levels of a game
            **kwargs: Other LevelGenerator arguments

        Returns:
            LevelGenerator instance
        """
        tier_number = list(Difficulty).index(tier.difficulty)
        seed = np.random.SeedSequence([base_seed, tier_number, index])
        return cls(seed=seed, **kwargs)

    @property
    def strategy_name(self) -> str:
        return self._strategy.name

    def generate(self, tier: DifficultyTier) -> PuzzleState:
        """
        Generate a level that is solvable within the tier's horizon.

        Args:
            tier: Difficulty tier

        Returns:
            PuzzleState with the move counter at zero
        """
        return self.generate_report(tier).state

    def generate_report(self, tier: DifficultyTier) -> GenerationReport:
        """
        Generate a level and report how it was obtained.

        Args:
            tier: Difficulty tier

        Returns:
            GenerationReport with the level, attempts used and outcome
        """
        if not isinstance(tier, DifficultyTier):
            raise TypeError(f"Expected a DifficultyTier, got {type(tier).__name__}")

        for attempt in range(1, tier.max_generation_attempts + 1):
            candidate = self.random_candidate(tier)
            if candidate.is_won:
                logger.debug(f"[Generator] {tier.name} attempt {attempt}: already sorted, skipped")
                continue

            solution = self.check(candidate, tier.horizon)
            if solution.is_solved:
                logger.info(
                    f"[Generator] {tier.name} level accepted on attempt {attempt} "
                    f"({solution.move_count} moves)"
                )
                return GenerationReport(
                    state=candidate,
                    attempts=attempt,
                    outcome=GenerationOutcome.ACCEPTED,
                    plan=solution.plan
                )

            logger.debug(
                f"[Generator] {tier.name} attempt {attempt} rejected: {solution.status.name}"
            )

        logger.warning(
            f"[Generator] {tier.name}: no solvable level in "
            f"{tier.max_generation_attempts} attempts, using fallback level"
        )
        last_filled = tier.color_count - 1
        return GenerationReport(
            state=self.fallback_level(tier),
            attempts=tier.max_generation_attempts,
            outcome=GenerationOutcome.EXHAUSTED,
            plan=(Move(last_filled + 1, last_filled),)
        )

    def random_candidate(self, tier: DifficultyTier) -> PuzzleState:
        """
        Shuffle all balls of the tier into the first `color_count` tubes.

        Args:
            tier: Difficulty tier

        Returns:
            Unchecked candidate level
        """
        items = self._make_items(tier)
        order = self._rng.permutation(len(items))
        shuffled = [items[i] for i in order]

        tubes = []
        for tube_id in range(tier.container_count):
            if tube_id < tier.color_count:
                start = tube_id * tier.capacity
                contents = tuple(shuffled[start:start + tier.capacity])
            else:
                contents = ()
            tubes.append(Tube(id=tube_id, capacity=tier.capacity, items=contents))
        return PuzzleState(tubes=tuple(tubes))

    def check(self, candidate: PuzzleState, horizon: int) -> Solution:
        """
        Run the solvability check on a candidate.

        Args:
            candidate: Level to check
            horizon: Longest acceptable plan

        Returns:
            Solution from the configured strategy
        """
        context = SolutionContext(
            state=candidate,
            timeout_sec=self.timeout_sec,
            max_nodes=self.max_nodes
        )
        return self._strategy.solve(context, horizon)

    @staticmethod
    def fallback_level(tier: DifficultyTier) -> PuzzleState:
        """
        Build the level used when every random candidate was rejected.

        Each color fills its own tube, then the top ball of the last
        filled tube is moved into the empty tube next to it. One move
        solves it and it is never already won.

        Args:
            tier: Difficulty tier

        Returns:
            PuzzleState with the move counter at zero
        """
        layout = [[color] * tier.capacity for color in tier.colors]
        layout.extend([] for _ in range(tier.empty_container_count))
        sorted_state = PuzzleState.from_colors(layout, capacity=tier.capacity)
        last_filled = tier.color_count - 1
        return sorted_state.successor(Move(last_filled, last_filled + 1)).fresh()

    @staticmethod
    def _make_items(tier: DifficultyTier) -> List[Item]:
        """Create `capacity` balls of each tier color with sequential ids."""
        items = []
        for color in tier.colors:
            for _ in range(tier.capacity):
                items.append(Item(id=len(items), color=color))
        return items


def generate(tier: DifficultyTier, seed: SeedLike = None, **kwargs) -> PuzzleState:
    """
    Generate one solvable level.

    Args:
        tier: Difficulty tier
        seed: Seed for the shuffle
        **kwargs: Other LevelGenerator arguments

    Returns:
        PuzzleState solvable within tier.horizon
    """
    return LevelGenerator(seed=seed, **kwargs).generate(tier)
