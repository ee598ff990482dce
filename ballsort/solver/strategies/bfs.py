"""
Breadth-First Strategy - Exact shortest-plan search with a fixed tie-break.

Explores the move graph one depth layer at a time. The first won state
generated is reached by a shortest plan, and because successors are
enqueued in PuzzleState.legal_moves() order, equal inputs always give
the same plan.
"""

import logging
import time
from collections import deque
from typing import Deque, Tuple

from ..base import ParentLinks, SolverStrategy
from ..board import CanonicalKey, PuzzleState
from ..context import SolutionContext
from ..errors import SolveStatus
from ..factory import register_strategy
from ..move import Move
from ..solution import Solution

logger = logging.getLogger(__name__)


def is_relabel_move(state: PuzzleState, move: Move) -> bool:
    """
    Check if a move only swaps the contents of two tubes.

    Moving the only ball of a tube into an empty tube leaves the same
    puzzle with two tubes exchanged. With a single shared capacity the
    result is exactly as far from a win as the current state, so the
    move never belongs to a shortest plan.

    Args:
        state: Current state
        move: Legal move from that state

    Returns:
        True if the move is a pure relabeling
    """
    return state.tube(move.source).size == 1 and state.tube(move.target).is_empty


@register_strategy
class BreadthFirstStrategy(SolverStrategy):
    """
    Breadth-first search over puzzle states.

    Algorithm:
        1. Queue the start state at depth 0 and mark its key visited
        2. Dequeue in FIFO order; states at the horizon are not expanded
        3. Enqueue unvisited successors in legal_moves() order, recording
           (parent key, move) links
        4. Stop at the first won successor and rebuild its move trail
        5. An empty queue means no plan exists within the horizon

    Parameters:
        prune_relabels: Skip moves that only swap two tubes when all
            tubes share one capacity (default True)
    """
    name = "bfs"
    description = "Breadth-first (exact) - Shortest plan with fixed move order"

    def __init__(self, prune_relabels: bool = True):
        """
        Initialize breadth-first strategy.

        Args:
            prune_relabels: Enable the tube-swap pruning rule
        """
        self.prune_relabels = prune_relabels

    def solve(self, context: SolutionContext, horizon: int) -> Solution:
        """
        Compute a shortest plan with breadth-first search.

        Args:
            context: Solution context with state and cancellation
            horizon: Maximum plan length

        Returns:
            Solution with status, moves and metrics
        """
        self._validate(context, horizon)
        start_time = time.perf_counter()
        start = context.state

        if start.is_won:
            return self._build_solution(
                SolveStatus.SOLVED, start, [], horizon, 0, 0, 0, start_time
            )

        start_key = start.canonical_key()
        parents: ParentLinks = {start_key: None}
        frontier: Deque[Tuple[PuzzleState, CanonicalKey, int]] = deque([(start, start_key, 0)])
        prune = self.prune_relabels and start.has_uniform_capacity

        dequeued = 0
        expanded = 0
        pruned = 0
        max_depth = 0
        layer = -1

        while frontier:
            state, key, depth = frontier.popleft()
            dequeued += 1

            # Poll once per layer and every check_interval dequeues
            if depth != layer or dequeued % self.check_interval == 0:
                if depth != layer:
                    layer = depth
                    context.report_progress(
                        depth / horizon if horizon else 1.0,
                        f"depth {depth}, {len(parents)} states"
                    )
                status = self._check_abort(context, expanded)
                if status is not None:
                    logger.debug(f"[BFS] Stopped at depth {depth}: {status.name}")
                    return self._build_solution(
                        status, start, [], horizon, expanded, pruned, max_depth, start_time
                    )

            if depth >= horizon:
                continue

            expanded += 1
            for move in state.legal_moves():
                if prune and is_relabel_move(state, move):
                    pruned += 1
                    continue

                child = state.successor(move)
                child_key = child.canonical_key()
                if child_key in parents:
                    pruned += 1
                    continue

                parents[child_key] = (key, move)
                if depth + 1 > max_depth:
                    max_depth = depth + 1

                if child.is_won:
                    moves = self._reconstruct(parents, child_key)
                    return self._build_solution(
                        SolveStatus.SOLVED, start, moves, horizon,
                        expanded, pruned, max_depth, start_time
                    )

                frontier.append((child, child_key, depth + 1))

        return self._build_solution(
            SolveStatus.NO_SOLUTION_WITHIN_HORIZON, start, [], horizon,
            expanded, pruned, max_depth, start_time
        )
