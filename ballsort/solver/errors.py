"""
Errors Module - Error kinds and outcome types shared by the engine.

Runtime outcomes (rejected moves, searches that stop without a plan,
generation fallback) are reported as values. Only programming errors
such as a missing state or a negative horizon are raised.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .board import PuzzleState
    from .move import Move


class BallSortError(Exception):
    """Base class for engine errors."""


class MoveRejection(Enum):
    """Why a move was refused."""
    UNKNOWN_TUBE = auto()
    SAME_TUBE = auto()
    SOURCE_EMPTY = auto()
    TARGET_FULL = auto()
    COLOR_MISMATCH = auto()


class InvalidMoveError(BallSortError):
    """
    A move that cannot be applied to a puzzle state.

    Returned inside a MoveResult; only raised by MoveResult.unwrap().

    Attributes:
        move: The rejected move
        reason: MoveRejection explaining the refusal
    """

    def __init__(self, move: "Move", reason: MoveRejection):
        self.move = move
        self.reason = reason
        super().__init__(f"Invalid move {move}: {reason.name.lower()}")


class LevelLoadError(BallSortError):
    """A fixed level could not be read or does not fit its tier."""


class SolveStatus(Enum):
    """
    How a search ended.

    SOLVED: A plan within the horizon was found
    NO_SOLUTION_WITHIN_HORIZON: The bounded graph was exhausted; this is
        not a proof of unsolvability beyond the horizon
    CANCELLED: The caller set the cancellation flag
    TIMED_OUT: The wall-clock or node budget ran out
    """
    SOLVED = auto()
    NO_SOLUTION_WITHIN_HORIZON = auto()
    CANCELLED = auto()
    TIMED_OUT = auto()

    @property
    def is_conclusive(self) -> bool:
        """True if the result may be cached as a verdict."""
        return self in (SolveStatus.SOLVED, SolveStatus.NO_SOLUTION_WITHIN_HORIZON)


class GenerationOutcome(Enum):
    """
    How level generation ended.

    ACCEPTED: A random candidate passed the solvability check
    EXHAUSTED: All attempts failed and the fallback level was used
    """
    ACCEPTED = auto()
    EXHAUSTED = auto()


@dataclass(frozen=True)
class MoveResult:
    """
    Result of applying a move.

    Exactly one of `state` and `error` is set.

    Attributes:
        state: Resulting puzzle state on success
        error: InvalidMoveError on failure
    """
    state: Optional["PuzzleState"] = None
    error: Optional[InvalidMoveError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> "PuzzleState":
        """
        Get the resulting state.

        Raises:
            InvalidMoveError: If the move was rejected
        """
        if self.error is not None:
            raise self.error
        return self.state
