"""
Game Session Module - Play state for one level with hints and auto-play.

The session owns the player's current PuzzleState, the undo history and
a CachedSolution. A hint reuses the cached plan as long as the player
follows it; any other move drops the cache and the next hint searches
again from wherever the player is.

For the core solving logic, see the ballsort.solver package.
"""

from enum import Enum, auto
from typing import List, Optional
import logging
import threading
import time

from .solver import (
    CachedSolution, DEFAULT_HORIZON, Move, MoveResult, PuzzleState,
    Solution, SolutionContext, SolverStrategy, create_strategy,
    get_default_strategy_name
)
from .solver.context import DEFAULT_TIMEOUT_SEC
from .levels.progress import ProgressStore
from .levels.tiers import DifficultyTier

logger = logging.getLogger(__name__)


__all__ = [
    "SessionState",
    "GameSession",
]


class SessionState(Enum):
    """
    Session states.

    States:
        PLAYING: Level in progress, moves and undo allowed
        WON: Every tube sorted, the session is finished
    """
    PLAYING = auto()
    WON = auto()


class GameSession:
    """
    One play-through of a level.

    Flow:
        PLAYING --apply()--> PLAYING
           |                    |
           |             puzzle won?
           |                    |
           +<----reset()------ WON  (completion reported once)

    Example:
        session = GameSession(level, tier=tier, index=1, progress=store)
        move = session.request_hint()
        session.apply(move)
    """

    MIN_SCORE = 100
    BASE_SCORE = 1000
    MOVE_PENALTY = 10
    SECOND_PENALTY = 2

    def __init__(
        self,
        state: PuzzleState,
        tier: Optional[DifficultyTier] = None,
        index: Optional[int] = None,
        progress: Optional[ProgressStore] = None,
        strategy_name: Optional[str] = None,
        horizon: int = DEFAULT_HORIZON,
        timeout_sec: Optional[float] = DEFAULT_TIMEOUT_SEC
    ):
        """
        Initialize a session.

        Args:
            state: Starting level
            tier: Tier of the level (needed to report completion)
            index: 1-based level number (needed to report completion)
            progress: Store notified when the level is won
            strategy_name: Strategy used for hints (default strategy if None)
            horizon: Longest plan a hint search considers
            timeout_sec: Time budget per hint search (None = unlimited)
        """
        if not isinstance(state, PuzzleState):
            raise TypeError(f"Expected a PuzzleState, got {type(state).__name__}")
        if horizon < 0:
            raise ValueError(f"horizon must not be negative, got {horizon}")

        self.tier = tier
        self.index = index
        self.progress = progress
        self.horizon = horizon
        self.timeout_sec = timeout_sec

        self._strategy: SolverStrategy = create_strategy(strategy_name or get_default_strategy_name())
        self._cancel_flag = threading.Event()
        self._cancel_lock = threading.Lock()

        self._initial = state.fresh()
        self._puzzle = self._initial
        self._history: List[PuzzleState] = []
        self._cached_solution: Optional[CachedSolution] = None
        self._last_solution: Optional[Solution] = None

        self._state = SessionState.PLAYING
        self._completion_reported = False
        self._started_at = time.monotonic()
        self._finished_at: Optional[float] = None

        if self._initial.is_won:
            self._mark_won()

    @property
    def state(self) -> SessionState:
        """Get current session state."""
        return self._state

    @property
    def puzzle(self) -> PuzzleState:
        """Get the player's current puzzle state."""
        return self._puzzle

    @property
    def move_count(self) -> int:
        return self._puzzle.move_count

    @property
    def can_undo(self) -> bool:
        return self._state is SessionState.PLAYING and bool(self._history)

    @property
    def strategy_name(self) -> str:
        return self._strategy.name

    def set_strategy(self, strategy_name: str) -> None:
        """
        Change the strategy used for hints.

        Args:
            strategy_name: Name of strategy to use
        """
        self._strategy = create_strategy(strategy_name)
        self.invalidate_cache()
        logger.info(f"Strategy changed to: {strategy_name}")

    @property
    def cached_solution(self) -> Optional[CachedSolution]:
        return self._cached_solution

    @property
    def last_solution(self) -> Optional[Solution]:
        """Result of the most recent hint search, if any."""
        return self._last_solution

    @property
    def elapsed_seconds(self) -> float:
        """Seconds played; stops counting once the level is won."""
        end = self._finished_at if self._finished_at is not None else time.monotonic()
        return end - self._started_at

    def invalidate_cache(self) -> None:
        """Drop the cached plan so the next hint searches again."""
        if self._cached_solution is not None:
            logger.debug("Cached plan invalidated")
        self._cached_solution = None

    def apply(self, move: Move) -> MoveResult:
        """
        Play a move.

        Args:
            move: Move to play

        Returns:
            MoveResult with the new state, or the InvalidMoveError
            (the session is unchanged on error)

        Raises:
            RuntimeError: If the level is already won
        """
        if self._state is SessionState.WON:
            raise RuntimeError("Level already completed; reset() to play again")

        result = self._puzzle.apply_move(move)
        if not result.ok:
            logger.debug(f"Move rejected: {result.error}")
            return result

        self._history.append(self._puzzle)
        self._puzzle = result.state
        self._follow_cache(move)

        if self._puzzle.is_won:
            self._mark_won()
        return result

    def undo(self) -> bool:
        """
        Take back the last move.

        Returns:
            True if a move was undone, False if there is nothing to undo
            or the level is already won
        """
        if not self.can_undo:
            return False
        self._puzzle = self._history.pop()
        self.invalidate_cache()
        logger.debug(f"Undo: back to move {self._puzzle.move_count}")
        return True

    def reset(self) -> None:
        """Return to the starting level and restart the clock."""
        self._puzzle = self._initial
        self._history.clear()
        self.invalidate_cache()
        self._last_solution = None
        self._state = SessionState.PLAYING
        self._completion_reported = False
        self._started_at = time.monotonic()
        self._finished_at = None
        if self._initial.is_won:
            self._mark_won()
        logger.info("Session reset")

    def cancel(self) -> None:
        """Abort the hint search currently running on another thread."""
        with self._cancel_lock:
            self._cancel_flag.set()

    def request_hint(self) -> Optional[Move]:
        """
        Get the next move toward a won state.

        Returns:
            Next move, or None if the level is won or no plan was found
            (see last_solution for the reason)
        """
        if self._state is SessionState.WON:
            return None

        cached = self._cached_solution
        if cached is not None and not cached.is_exhausted and cached.matches(self._puzzle):
            return cached.current_move

        self.invalidate_cache()
        # Each search gets its own flag; cancel() targets the newest one
        cancel_flag = threading.Event()
        with self._cancel_lock:
            self._cancel_flag = cancel_flag
        context = SolutionContext(
            state=self._puzzle,
            cancel_flag=cancel_flag,
            timeout_sec=self.timeout_sec
        )
        solution = self._strategy.solve(context, self.horizon)
        self._last_solution = solution

        if not solution.is_solved or not solution.has_moves:
            logger.info(f"No hint available: {solution.status.name}")
            return None

        self._cached_solution = CachedSolution(solution=solution)
        logger.debug(f"Hint plan cached: {solution.move_count} moves")
        return self._cached_solution.current_move

    def auto_solve_step(self) -> Optional[Move]:
        """
        Play the next hinted move.

        Returns:
            The move played, or None if no move was available
        """
        move = self.request_hint()
        if move is None:
            return None
        self.apply(move).unwrap()
        return move

    def score(self) -> int:
        """
        Score of a won level.

        Returns:
            max(100, 1000 - 10 * moves - 2 * seconds) once won, else 0
        """
        if self._state is not SessionState.WON:
            return 0
        raw = (self.BASE_SCORE
               - self.MOVE_PENALTY * self.move_count
               - self.SECOND_PENALTY * int(self.elapsed_seconds))
        return max(self.MIN_SCORE, raw)

    def _follow_cache(self, move: Move) -> None:
        cached = self._cached_solution
        if cached is None:
            return
        expected = cached.expected_state_after
        if (move == cached.current_move and expected is not None
                and expected.canonical_key() == self._puzzle.canonical_key()):
            cached.advance()
        else:
            self.invalidate_cache()

    def _mark_won(self) -> None:
        self._state = SessionState.WON
        self._finished_at = time.monotonic()
        self.invalidate_cache()
        logger.info(f"Level won in {self.move_count} moves")

        if self._completion_reported:
            return
        self._completion_reported = True
        if self.progress is not None and self.tier is not None and self.index is not None:
            self.progress.record_completion(self.tier, self.index, self.move_count)
