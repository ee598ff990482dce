"""
Ball Sort Engine - Puzzle model, shortest-plan solver and level generation.

Subpackages:
    - solver: Tubes, puzzle states, moves and search strategies
    - levels: Difficulty tiers, generator, level cache, loader and progress

The Qt background worker lives in ballsort.solve_worker and is not
imported here, so the engine can be used without PyQt5 loaded.
"""

__version__ = "1.0.0"

from .solver import (
    Color, Move, MoveResult, PuzzleState, Solution, SolveStatus,
    apply_move, hint, is_solvable, solve
)
from .levels import TIERS, Difficulty, LevelCache, generate, get_cached_level, get_tier
from .session import GameSession, SessionState

__all__ = [
    "Color",
    "Move",
    "MoveResult",
    "PuzzleState",
    "Solution",
    "SolveStatus",
    "apply_move",
    "hint",
    "is_solvable",
    "solve",
    "TIERS",
    "Difficulty",
    "LevelCache",
    "generate",
    "get_cached_level",
    "get_tier",
    "GameSession",
    "SessionState",
]
