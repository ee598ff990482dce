"""
Move Module - A single ball transfer between two tubes.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, order=True)
class Move:
    """
    Move the top ball of one tube onto another.

    Ordering follows (source, target), which is the same order
    PuzzleState.legal_moves() enumerates moves in.

    Attributes:
        source: Id of the tube the ball is taken from
        target: Id of the tube the ball is put on
    """
    source: int
    target: int

    @classmethod
    def from_pair(cls, pair: Tuple[int, int]) -> "Move":
        """
        Create a Move from a (source, target) tuple.

        Args:
            pair: Tube id pair

        Returns:
            Move instance
        """
        source, target = pair
        return cls(source=int(source), target=int(target))

    def reversed(self) -> "Move":
        """The move that undoes this one."""
        return Move(source=self.target, target=self.source)

    def as_pair(self) -> Tuple[int, int]:
        return (self.source, self.target)

    def __str__(self) -> str:
        return f"{self.source}->{self.target}"
