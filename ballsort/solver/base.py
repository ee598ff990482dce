"""
Base Strategy Module - Abstract base class for solving strategies.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Hashable, List, Optional, Tuple

from .board import PuzzleState
from .context import SolutionContext
from .errors import SolveStatus
from .move import Move
from .solution import Solution, SolutionMetrics

logger = logging.getLogger(__name__)


ParentLinks = Dict[Hashable, Optional[Tuple[Hashable, Move]]]


class SolverStrategy(ABC):
    """
    Abstract base class for all solving strategies.

    Subclasses must implement the solve() method and define
    name and description class attributes. Every strategy returns a
    shortest plan within the horizon, so strategies differ only in
    speed, memory use and which of several equally short plans they pick.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description for UI
        check_interval: Expansions between cancellation checks
    """
    name: str = "base"
    description: str = "Base strategy"
    check_interval: int = 256

    @abstractmethod
    def solve(self, context: SolutionContext, horizon: int) -> Solution:
        """
        Search for a shortest plan from the context's state.

        Must periodically check context.abort_status() and return a
        CANCELLED or TIMED_OUT solution when it fires.

        Args:
            context: Solution context with state, cancellation, deadlines
            horizon: Maximum plan length to consider

        Returns:
            Solution with status, moves and metrics
        """
        pass

    def _validate(self, context: SolutionContext, horizon: int) -> None:
        """
        Fail fast on programming errors.

        Raises:
            TypeError: If context or horizon has the wrong type
            ValueError: If horizon is negative
        """
        if not isinstance(context, SolutionContext):
            raise TypeError(f"Expected a SolutionContext, got {type(context).__name__}")
        if isinstance(horizon, bool) or not isinstance(horizon, int):
            raise TypeError(f"Horizon must be an int, got {type(horizon).__name__}")
        if horizon < 0:
            raise ValueError(f"Horizon must not be negative, got {horizon}")

    def _check_abort(self, context: SolutionContext, expanded: int) -> Optional[SolveStatus]:
        """
        Convenience method to check cancellation and budgets.

        Args:
            context: Solution context
            expanded: States expanded so far

        Returns:
            Status to stop with, or None to continue
        """
        return context.abort_status(expanded)

    @staticmethod
    def _reconstruct(parents: ParentLinks, key: Hashable) -> List[Move]:
        """
        Walk predecessor links back to the start state.

        Args:
            parents: Map of state key to (parent key, move), None for the start
            key: Key of the final state

        Returns:
            Moves from the start state to the final state
        """
        moves: List[Move] = []
        link = parents[key]
        while link is not None:
            parent_key, move = link
            moves.append(move)
            link = parents[parent_key]
        moves.reverse()
        return moves

    def _build_solution(
        self,
        status: SolveStatus,
        start: PuzzleState,
        moves: List[Move],
        horizon: int,
        states_explored: int,
        pruned_branches: int,
        max_depth: int,
        start_time: float
    ) -> Solution:
        """Build Solution object from computation results."""
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        board_states = [start]
        for move in moves:
            board_states.append(board_states[-1].successor(move))

        logger.info(
            f"[{self.name}] {status.name}: {len(moves)} moves, "
            f"{states_explored} states explored, {elapsed_ms:.1f}ms (horizon {horizon})"
        )

        return Solution(
            status=status,
            moves=moves,
            horizon=horizon,
            board_states=board_states,
            metrics=SolutionMetrics(
                computation_time_ms=elapsed_ms,
                states_explored=states_explored,
                pruned_branches=pruned_branches,
                max_depth=max_depth,
                strategy_name=self.name
            )
        )
