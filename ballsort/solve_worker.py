"""
Solve Worker Module for the Ball Sort engine

Provides a background QThread that runs one solver job off the UI thread.
Communicates with the UI via Qt signals for thread-safe result delivery.
"""

import logging
import threading
from typing import Optional, Tuple

from PyQt5.QtCore import QThread, pyqtSignal

from .solver import (
    DEFAULT_HORIZON, PuzzleState, Solution, SolutionContext,
    create_strategy, get_default_strategy_name
)
from .solver.context import DEFAULT_TIMEOUT_SEC


# Configure module logger
logger = logging.getLogger(__name__)


JOB_HINT = "hint"
JOB_SOLVE = "solve"
JOB_CHECK = "check"
JOB_KINDS = (JOB_HINT, JOB_SOLVE, JOB_CHECK)


class SolveWorker(QThread):
    """
    Background worker thread for solver searches.

    Runs a single job per start():
    - "hint": emits hint_ready with the next Move (None if no plan)
    - "solve": emits plan_ready with the full Solution
    - "check": emits solvability_checked with True/False

    A cancelled or timed-out hint/check is not a verdict, so instead of
    hint_ready/solvability_checked the worker emits search_aborted with
    the Solution. plan_ready always carries the Solution and its status.

    Signals:
        status_changed(str): Emitted when worker status changes
        hint_ready(object): Next Move or None
        plan_ready(object): Solution of a "solve" job
        solvability_checked(bool): Verdict of a "check" job
        search_aborted(object): Solution of a cancelled/timed-out hint or check
        error_occurred(str): Emitted when a job raises

    Example:
        worker = SolveWorker(strategy_name="bfs")
        worker.hint_ready.connect(ui.show_hint)
        worker.submit("hint", session.puzzle)
        # ...
        worker.request_stop()
        worker.wait()
    """

    # Signals for UI updates (thread-safe)
    status_changed = pyqtSignal(str)
    hint_ready = pyqtSignal(object)
    plan_ready = pyqtSignal(object)
    solvability_checked = pyqtSignal(bool)
    search_aborted = pyqtSignal(object)
    error_occurred = pyqtSignal(str)

    def __init__(
        self,
        strategy_name: Optional[str] = None,
        horizon: int = DEFAULT_HORIZON,
        timeout_sec: Optional[float] = DEFAULT_TIMEOUT_SEC,
        max_nodes: Optional[int] = None
    ):
        """
        Initialize the solve worker.

        Args:
            strategy_name: Strategy to search with (default strategy if None)
            horizon: Longest plan searched
            timeout_sec: Time budget per job (None = unlimited)
            max_nodes: Expansion budget per job (None = unlimited)
        """
        super().__init__()
        self.strategy_name = strategy_name or get_default_strategy_name()
        self.horizon = horizon
        self.timeout_sec = timeout_sec
        self.max_nodes = max_nodes

        self._cancel_flag = threading.Event()
        self._job: Optional[Tuple[str, PuzzleState]] = None
        self._last_solution: Optional[Solution] = None

    @property
    def last_solution(self) -> Optional[Solution]:
        return self._last_solution

    def set_job(self, kind: str, state: PuzzleState) -> None:
        """
        Store the job that the next run() executes.

        Args:
            kind: "hint", "solve" or "check"
            state: Puzzle state to search from

        Raises:
            ValueError: If kind is unknown
            TypeError: If state is not a PuzzleState
        """
        if kind not in JOB_KINDS:
            raise ValueError(f"Unknown job kind: {kind}. Expected one of {JOB_KINDS}")
        if not isinstance(state, PuzzleState):
            raise TypeError(f"Expected a PuzzleState, got {type(state).__name__}")
        self._job = (kind, state)
        self._cancel_flag.clear()

    def submit(self, kind: str, state: PuzzleState) -> None:
        """
        Start a job, cancelling the running one first.

        Args:
            kind: "hint", "solve" or "check"
            state: Puzzle state to search from
        """
        if self.isRunning():
            self.request_stop()
            self.wait()
        self.set_job(kind, state)
        self.start()

    def run(self):
        """
        Worker body. Called when thread starts.

        Executes the stored job once and emits its result.
        """
        job = self._job
        self._job = None
        if job is None:
            logger.debug("Solve worker started without a job")
            return

        kind, state = job
        logger.info(f"Solve worker started: {kind} ({self.strategy_name})")
        self.status_changed.emit("Searching")

        try:
            solution = self._search(state)
        except Exception as e:
            logger.exception("Error in solve worker")
            self.error_occurred.emit(str(e))
            self.status_changed.emit("Error")
            return

        self._last_solution = solution
        self._emit_result(kind, solution)
        self.status_changed.emit(solution.status.name)
        logger.info(f"Solve worker finished: {kind} -> {solution.status.name}")

    def _search(self, state: PuzzleState) -> Solution:
        strategy = create_strategy(self.strategy_name)
        context = SolutionContext(
            state=state,
            cancel_flag=self._cancel_flag,
            timeout_sec=self.timeout_sec,
            max_nodes=self.max_nodes
        )
        return strategy.solve(context, self.horizon)

    def _emit_result(self, kind: str, solution: Solution) -> None:
        if kind == JOB_SOLVE:
            self.plan_ready.emit(solution)
            return

        if not solution.status.is_conclusive:
            self.search_aborted.emit(solution)
            return

        if kind == JOB_HINT:
            self.hint_ready.emit(solution.first_move)
        else:
            self.solvability_checked.emit(solution.is_solved)

    def request_stop(self):
        """
        Cancel the running search.

        The search stops at its next cancellation check.
        Use wait() after calling this to block until stopped.
        """
        logger.info("Stop requested")
        self._cancel_flag.set()
