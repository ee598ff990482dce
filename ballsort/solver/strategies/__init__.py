"""
Strategies Package - Concrete strategy implementations.

Import this module to register all built-in strategies.
"""

from .bfs import BreadthFirstStrategy
from .astar import AStarStrategy

__all__ = [
    "BreadthFirstStrategy",
    "AStarStrategy",
]
