"""
Solver Package - Puzzle model and shortest-plan search for the ball sort puzzle.

This package models tubes of colored balls and searches the move graph
for the shortest sequence of moves that sorts every tube. Strategies
are pluggable and selected by name.

Public API:
    - Color, Item: Ball colors and balls
    - Tube: Immutable fixed-capacity stack
    - PuzzleState: Immutable puzzle state
    - Move: Single ball transfer
    - Solution, SolutionMetrics, CachedSolution: Search results
    - SolutionContext: Cancellation and deadlines for one search
    - SolverStrategy: Abstract base for strategies
    - solve(), hint(), is_solvable(), apply_move(): Entry points
    - create_strategy(): Factory function
    - get_strategy_names(): List available strategies
    - get_strategy_info(): Get strategy metadata

Usage:
    from ballsort.solver import PuzzleState, solve

    state = PuzzleState.from_colors([["RED", "BLUE"], ["BLUE", "RED"], []], capacity=2)
    solution = solve(state, horizon=10)

    if solution.is_solved:
        for move in solution.moves:
            print(f"Move top ball {move.source} -> {move.target}")
"""

# Core data structures
from .color import Color, Item
from .tube import Tube
from .move import Move
from .board import PuzzleState, replay
from .errors import (
    BallSortError,
    GenerationOutcome,
    InvalidMoveError,
    LevelLoadError,
    MoveRejection,
    MoveResult,
    SolveStatus,
)
from .solution import CachedSolution, Plan, Solution, SolutionMetrics
from .context import SolutionContext

# Strategy framework
from .base import SolverStrategy
from .factory import (
    create_strategy,
    get_strategy_class,
    get_strategy_names,
    get_strategy_info,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies

from .api import DEFAULT_HORIZON, apply_move, hint, is_solvable, solve

__all__ = [
    # Data structures
    "Color",
    "Item",
    "Tube",
    "Move",
    "PuzzleState",
    "replay",
    "Plan",
    "Solution",
    "SolutionMetrics",
    "CachedSolution",
    "SolutionContext",
    # Errors and outcomes
    "BallSortError",
    "InvalidMoveError",
    "LevelLoadError",
    "MoveRejection",
    "MoveResult",
    "SolveStatus",
    "GenerationOutcome",
    # Strategy framework
    "SolverStrategy",
    "create_strategy",
    "get_strategy_class",
    "get_strategy_names",
    "get_strategy_info",
    "get_default_strategy_name",
    "register_strategy",
    # Entry points
    "DEFAULT_HORIZON",
    "solve",
    "hint",
    "is_solvable",
    "apply_move",
]
