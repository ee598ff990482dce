"""
Solution Context Module - Shared context for strategy execution.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .board import PuzzleState
from .errors import SolveStatus


# Default wall-clock budget for one search, in seconds
DEFAULT_TIMEOUT_SEC = 30.0


@dataclass
class SolutionContext:
    """
    Shared context passed to strategies containing puzzle state,
    cancellation, deadlines and progress reporting.

    Attributes:
        state: Puzzle state to solve
        cancel_flag: Threading event for cancellation
        timeout_sec: Maximum computation time in seconds (None = no limit)
        max_nodes: Maximum number of expanded states (None = no limit)
        start_time: When computation started
        progress_callback: Optional callback for progress updates
    """
    state: PuzzleState
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    timeout_sec: Optional[float] = DEFAULT_TIMEOUT_SEC
    max_nodes: Optional[int] = None
    start_time: float = field(default_factory=time.monotonic)
    progress_callback: Optional[Callable[[float, str], None]] = None

    def __post_init__(self):
        if not isinstance(self.state, PuzzleState):
            raise TypeError(f"Expected a PuzzleState, got {type(self.state).__name__}")
        if self.timeout_sec is not None and self.timeout_sec < 0:
            raise ValueError(f"timeout_sec must not be negative, got {self.timeout_sec}")
        if self.max_nodes is not None and self.max_nodes < 0:
            raise ValueError(f"max_nodes must not be negative, got {self.max_nodes}")

    def abort_status(self, nodes_expanded: int = 0) -> Optional[SolveStatus]:
        """
        Check whether the search has to stop early.

        Args:
            nodes_expanded: States expanded so far by the caller

        Returns:
            SolveStatus.CANCELLED, SolveStatus.TIMED_OUT, or None to continue
        """
        if self.cancel_flag.is_set():
            return SolveStatus.CANCELLED
        if self.max_nodes is not None and nodes_expanded >= self.max_nodes:
            return SolveStatus.TIMED_OUT
        if self.timeout_sec is not None and self.elapsed_time() > self.timeout_sec:
            return SolveStatus.TIMED_OUT
        return None

    def cancel(self) -> None:
        """Request cancellation of the running search."""
        self.cancel_flag.set()

    def report_progress(self, percent: float, message: str = "") -> None:
        """
        Report progress to UI.

        Args:
            percent: Progress from 0.0 to 1.0
            message: Optional status message
        """
        if self.progress_callback:
            self.progress_callback(percent, message)

    def elapsed_time(self) -> float:
        """
        Get seconds elapsed since computation started.

        Returns:
            Elapsed time in seconds
        """
        return time.monotonic() - self.start_time
