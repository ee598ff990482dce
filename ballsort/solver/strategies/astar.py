"""
A* Strategy - Heuristic shortest-plan search.

Orders states by moves made plus a lower bound on the moves still needed.
The bound never overestimates and changes by at most one per move, so the
first won state taken off the heap is reached by a shortest plan. States
whose bound already exceeds the horizon are dropped, which makes negative
verdicts much cheaper than breadth-first search.
"""

import heapq
import itertools
import logging
import time
from typing import Dict, List, Tuple

from ..base import ParentLinks, SolverStrategy
from ..board import CanonicalKey, PuzzleState
from ..context import SolutionContext
from ..errors import SolveStatus
from ..factory import register_strategy
from ..solution import Solution
from .bfs import is_relabel_move

logger = logging.getLogger(__name__)


def misplaced_items(state: PuzzleState) -> int:
    """
    Count balls that must move at least once.

    A ball resting above a ball of another color can only end up in a
    single-colored tube if it leaves its tube, so every ball above the
    bottom single-color run of its tube costs at least one move.

    Args:
        state: Puzzle state

    Returns:
        Lower bound on the remaining plan length
    """
    return sum(tube.size - tube.bottom_run() for tube in state.tubes)


@register_strategy
class AStarStrategy(SolverStrategy):
    """
    A* search with the misplaced-ball bound.

    Heap entries are ordered by (g + h, h, insertion order), so ties are
    broken deterministically. Returns a plan as short as the breadth-first
    one; when several shortest plans exist it may pick a different one.

    Parameters:
        prune_relabels: Skip moves that only swap two tubes when all
            tubes share one capacity (default True)
    """
    name = "astar"
    description = "A* (fast) - Shortest plan guided by misplaced balls"

    def __init__(self, prune_relabels: bool = True):
        """
        Initialize A* strategy.

        Args:
            prune_relabels: Enable the tube-swap pruning rule
        """
        self.prune_relabels = prune_relabels

    def solve(self, context: SolutionContext, horizon: int) -> Solution:
        """
        Compute a shortest plan with A*.

        Args:
            context: Solution context with state and cancellation
            horizon: Maximum plan length

        Returns:
            Solution with status, moves and metrics
        """
        self._validate(context, horizon)
        start_time = time.perf_counter()
        start = context.state

        start_h = misplaced_items(start)
        if start_h > horizon:
            return self._build_solution(
                SolveStatus.NO_SOLUTION_WITHIN_HORIZON, start, [], horizon, 0, 1, 0, start_time
            )

        start_key = start.canonical_key()
        counter = itertools.count()
        heap: List[Tuple[int, int, int, int, PuzzleState, CanonicalKey]] = [
            (start_h, start_h, next(counter), 0, start, start_key)
        ]
        best_g: Dict[CanonicalKey, int] = {start_key: 0}
        parents: ParentLinks = {start_key: None}
        prune = self.prune_relabels and start.has_uniform_capacity

        popped = 0
        expanded = 0
        pruned = 0
        max_depth = 0

        while heap:
            popped += 1
            if popped % self.check_interval == 1:
                status = self._check_abort(context, expanded)
                if status is not None:
                    logger.debug(f"[A*] Stopped after {expanded} expansions: {status.name}")
                    return self._build_solution(
                        status, start, [], horizon, expanded, pruned, max_depth, start_time
                    )

            _, h, _, g, state, key = heapq.heappop(heap)
            if g > best_g[key]:
                continue  # stale entry

            if h == 0 and state.is_won:
                moves = self._reconstruct(parents, key)
                return self._build_solution(
                    SolveStatus.SOLVED, start, moves, horizon,
                    expanded, pruned, max_depth, start_time
                )

            if g >= horizon:
                continue

            expanded += 1
            child_g = g + 1
            for move in state.legal_moves():
                if prune and is_relabel_move(state, move):
                    pruned += 1
                    continue

                child = state.successor(move)
                child_key = child.canonical_key()
                known = best_g.get(child_key)
                if known is not None and known <= child_g:
                    pruned += 1
                    continue

                child_h = misplaced_items(child)
                if child_g + child_h > horizon:
                    pruned += 1
                    continue

                best_g[child_key] = child_g
                parents[child_key] = (key, move)
                if child_g > max_depth:
                    max_depth = child_g
                heapq.heappush(
                    heap, (child_g + child_h, child_h, next(counter), child_g, child, child_key)
                )

        return self._build_solution(
            SolveStatus.NO_SOLUTION_WITHIN_HORIZON, start, [], horizon,
            expanded, pruned, max_depth, start_time
        )
