"""
Tube Module - Immutable fixed-capacity stack of balls.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .color import Color, Item


@dataclass(frozen=True)
class Tube:
    """
    Immutable LIFO container of balls.

    The last element of `items` is the top of the tube. Operations that
    would change the tube return a new Tube instead.

    Attributes:
        id: Tube identifier, unique within a puzzle
        capacity: Maximum number of balls
        items: Balls from bottom to top
    """
    id: int
    capacity: int
    items: Tuple[Item, ...] = ()

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError(f"Tube {self.id}: capacity must be positive, got {self.capacity}")
        if len(self.items) > self.capacity:
            raise ValueError(
                f"Tube {self.id}: {len(self.items)} balls exceed capacity {self.capacity}"
            )

    @property
    def size(self) -> int:
        """Number of balls in the tube."""
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def is_full(self) -> bool:
        return len(self.items) == self.capacity

    @property
    def is_monochromatic(self) -> bool:
        """True for 0 or 1 balls, otherwise all balls share the top's color."""
        if len(self.items) < 2:
            return True
        top_color = self.items[-1].color
        return all(item.color is top_color for item in self.items)

    @property
    def is_complete(self) -> bool:
        """Full and single-colored."""
        return self.is_full and self.is_monochromatic

    def peek_top(self) -> Optional[Item]:
        """Get the top ball without removing it, or None if empty."""
        return self.items[-1] if self.items else None

    def push(self, item: Optional[Item]) -> Optional["Tube"]:
        """
        Put a ball on top.

        Args:
            item: Ball to add

        Returns:
            New Tube with the ball on top, or None if the tube is full
            or no ball was given
        """
        if item is None or self.is_full:
            return None
        return Tube(id=self.id, capacity=self.capacity, items=self.items + (item,))

    def pop(self) -> Tuple[Optional[Item], "Tube"]:
        """
        Take the top ball off.

        Returns:
            (top ball, tube without it), or (None, self) if empty
        """
        if not self.items:
            return None, self
        return self.items[-1], Tube(id=self.id, capacity=self.capacity, items=self.items[:-1])

    def can_receive_from(self, other: "Tube") -> bool:
        """
        Check whether the top ball of `other` may be moved onto this tube.

        Args:
            other: Source tube

        Returns:
            True if the move is legal
        """
        if other.is_empty or self.is_full or self.id == other.id:
            return False
        if self.is_empty:
            return True
        return self.items[-1].color is other.items[-1].color

    def colors(self) -> Tuple[Color, ...]:
        """Ball colors from bottom to top."""
        return tuple(item.color for item in self.items)

    def bottom_run(self) -> int:
        """
        Length of the single-color run starting at the bottom.

        Returns:
            Number of consecutive balls from the bottom sharing the bottom
            ball's color (0 if empty)
        """
        if not self.items:
            return 0
        base = self.items[0].color
        run = 0
        for item in self.items:
            if item.color is not base:
                break
            run += 1
        return run

    def __str__(self) -> str:
        contents = ", ".join(color.name for color in self.colors()) or "empty"
        return f"[{self.id}] {contents} ({self.size}/{self.capacity})"
