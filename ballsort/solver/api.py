"""
Solver API Module - Entry points used by the UI/controller layer.

Every call builds its own SolutionContext unless one is passed in, so
concurrent calls on different threads never share search state.
"""

import logging
import threading
from typing import Optional

from .board import PuzzleState
from .context import DEFAULT_TIMEOUT_SEC, SolutionContext
from .errors import MoveResult
from .factory import create_strategy, get_default_strategy_name
from .move import Move
from .solution import Solution

logger = logging.getLogger(__name__)


# Longest plan searched when the caller gives no horizon
DEFAULT_HORIZON = 40

_UNSET = object()


def _make_context(
    state: PuzzleState,
    context: Optional[SolutionContext],
    cancel_flag: Optional[threading.Event],
    timeout_sec,
    max_nodes: Optional[int]
) -> SolutionContext:
    if context is not None:
        if context.state is not state:
            raise ValueError("Context holds a different state than the one to solve")
        return context
    if not isinstance(state, PuzzleState):
        raise TypeError(f"Expected a PuzzleState, got {type(state).__name__}")
    return SolutionContext(
        state=state,
        cancel_flag=cancel_flag if cancel_flag is not None else threading.Event(),
        timeout_sec=DEFAULT_TIMEOUT_SEC if timeout_sec is _UNSET else timeout_sec,
        max_nodes=max_nodes
    )


def solve(
    state: PuzzleState,
    horizon: Optional[int] = None,
    *,
    strategy: Optional[str] = None,
    context: Optional[SolutionContext] = None,
    cancel_flag: Optional[threading.Event] = None,
    timeout_sec=_UNSET,
    max_nodes: Optional[int] = None
) -> Solution:
    """
    Find a shortest plan from `state` to a won state.

    Args:
        state: Puzzle state to solve
        horizon: Maximum plan length (DEFAULT_HORIZON if None)
        strategy: Strategy name (default strategy if None)
        context: Prepared context; cancel_flag/timeout_sec/max_nodes are
            ignored when given
        cancel_flag: Event another thread can set to abort the search
        timeout_sec: Wall-clock budget in seconds, None for no limit
        max_nodes: Budget of expanded states, None for no limit

    Returns:
        Solution; check `status` to tell a missing plan from an aborted search

    Raises:
        TypeError: If state is not a PuzzleState
        ValueError: If horizon is negative or the strategy is unknown
    """
    if horizon is None:
        horizon = DEFAULT_HORIZON
    ctx = _make_context(state, context, cancel_flag, timeout_sec, max_nodes)
    solver = create_strategy(strategy or get_default_strategy_name())
    return solver.solve(ctx, horizon)


def hint(state: PuzzleState, horizon: Optional[int] = None, **kwargs) -> Optional[Move]:
    """
    Get the next move of a shortest plan.

    Args:
        state: Current puzzle state
        horizon: Maximum plan length (DEFAULT_HORIZON if None)
        **kwargs: Options passed to solve()

    Returns:
        First move of the plan, or None if the puzzle is already won or
        no plan was found
    """
    return solve(state, horizon, **kwargs).first_move


def is_solvable(state: PuzzleState, horizon: Optional[int] = None, **kwargs) -> bool:
    """
    Check if a plan within the horizon exists.

    A cancelled or timed-out search counts as False; call solve() to
    tell those apart from an exhausted search.

    Args:
        state: Puzzle state
        horizon: Maximum plan length (DEFAULT_HORIZON if None)
        **kwargs: Options passed to solve()

    Returns:
        True if a plan was found
    """
    return solve(state, horizon, **kwargs).is_solved


def apply_move(state: PuzzleState, move: Move) -> MoveResult:
    """
    Apply a move to a state.

    Args:
        state: Current puzzle state
        move: Move to apply

    Returns:
        MoveResult with the new state or the InvalidMoveError

    Raises:
        TypeError: If state is not a PuzzleState
    """
    if not isinstance(state, PuzzleState):
        raise TypeError(f"Expected a PuzzleState, got {type(state).__name__}")
    return state.apply_move(move)
