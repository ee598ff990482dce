"""
Solution Module - Result of strategy computation and cached solution management.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .board import PuzzleState
from .errors import SolveStatus
from .move import Move


Plan = Tuple[Move, ...]


@dataclass
class SolutionMetrics:
    """
    Performance metrics for solution computation.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        states_explored: Number of puzzle states expanded
        pruned_branches: Successors skipped as duplicates or by pruning rules
        max_depth: Deepest level reached by the search
        strategy_name: Name of strategy that computed this solution
    """
    computation_time_ms: float = 0.0
    states_explored: int = 0
    pruned_branches: int = 0
    max_depth: int = 0
    strategy_name: str = ""


@dataclass
class Solution:
    """
    Result of a strategy computation.

    Attributes:
        status: How the search ended
        moves: Ordered moves reaching a won state (empty unless solved)
        horizon: Maximum plan length that was searched
        metrics: Performance statistics
        board_states: Puzzle state after each move (first is initial)
    """
    status: SolveStatus
    moves: List[Move] = field(default_factory=list)
    horizon: int = 0
    metrics: SolutionMetrics = field(default_factory=SolutionMetrics)
    board_states: List[PuzzleState] = field(default_factory=list)

    @property
    def is_solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    @property
    def was_cancelled(self) -> bool:
        return self.status is SolveStatus.CANCELLED

    @property
    def timed_out(self) -> bool:
        return self.status is SolveStatus.TIMED_OUT

    @property
    def plan(self) -> Optional[Plan]:
        """The move plan if solved, otherwise None."""
        if not self.is_solved:
            return None
        return tuple(self.moves)

    @property
    def first_move(self) -> Optional[Move]:
        """The move to play now, or None if unsolved or already won."""
        if self.is_solved and self.moves:
            return self.moves[0]
        return None

    @property
    def move_count(self) -> int:
        """Number of moves in solution."""
        return len(self.moves)

    @property
    def has_moves(self) -> bool:
        """Check if solution has any moves."""
        return len(self.moves) > 0

    @property
    def final_state(self) -> Optional[PuzzleState]:
        """State after the last move, or None if no states were recorded."""
        return self.board_states[-1] if self.board_states else None


@dataclass
class CachedSolution:
    """
    Full solution with move queue and expected states for step-by-step playback.

    Wraps a solved Solution and tracks progress through the move sequence,
    so hints and auto-play can reuse one search while the player follows it.

    Attributes:
        solution: The complete solution from a strategy
        move_index: Current position in move sequence (0 = first move)
        created_at: Timestamp for cache staleness detection
    """
    solution: Solution
    move_index: int = 0
    created_at: float = field(default_factory=time.perf_counter)

    @property
    def current_move(self) -> Optional[Move]:
        """Get next move to play, or None if exhausted."""
        if self.move_index < len(self.solution.moves):
            return self.solution.moves[self.move_index]
        return None

    @property
    def expected_state_before(self) -> Optional[PuzzleState]:
        """Get expected state before current move executes."""
        if self.move_index < len(self.solution.board_states):
            return self.solution.board_states[self.move_index]
        return None

    @property
    def expected_state_after(self) -> Optional[PuzzleState]:
        """Get expected state after current move executes."""
        if self.move_index + 1 < len(self.solution.board_states):
            return self.solution.board_states[self.move_index + 1]
        return None

    @property
    def is_exhausted(self) -> bool:
        """True if all moves have been consumed."""
        return self.move_index >= len(self.solution.moves)

    @property
    def moves_remaining(self) -> int:
        """Number of moves left in the solution."""
        return max(0, len(self.solution.moves) - self.move_index)

    @property
    def age_seconds(self) -> float:
        """Time since cache was created."""
        return time.perf_counter() - self.created_at

    def advance(self) -> Optional[Move]:
        """
        Move to next move in sequence.

        Returns:
            The move that was just completed, or None if exhausted
        """
        if self.is_exhausted:
            return None
        completed_move = self.current_move
        self.move_index += 1
        return completed_move

    def peek_moves(self, count: int = 3) -> List[Move]:
        """
        Preview upcoming moves without advancing.

        Args:
            count: Number of moves to preview

        Returns:
            List of upcoming moves (may be shorter than count)
        """
        start = self.move_index
        end = min(start + count, len(self.solution.moves))
        return self.solution.moves[start:end]

    def matches(self, actual: PuzzleState) -> bool:
        """
        Check if the player's state is the one the plan expects next.

        Compares canonical keys, so the move counter is ignored.

        Args:
            actual: Current puzzle state

        Returns:
            True if the cached plan still applies to `actual`
        """
        expected = self.expected_state_before
        if expected is None:
            return False
        return expected.canonical_key() == actual.canonical_key()
