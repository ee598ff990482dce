"""
Color Module - Ball colors and the immutable ball item.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Color(Enum):
    """
    Ball colors in their fixed palette order.

    Each member carries a hex code for renderers and a display name.
    Tiers with N colors always use the first N members.
    """
    RED = ("#FF4444", "Red")
    BLUE = ("#4444FF", "Blue")
    GREEN = ("#44FF44", "Green")
    YELLOW = ("#FFFF44", "Yellow")
    ORANGE = ("#FF8844", "Orange")
    PURPLE = ("#8844FF", "Purple")
    PINK = ("#FF44FF", "Pink")

    def __init__(self, hex_color: str, display_name: str):
        self.hex_color = hex_color
        self.display_name = display_name

    @classmethod
    def from_name(cls, name: str) -> "Color":
        """
        Parse a color from its member name (case-insensitive).

        Args:
            name: Color name such as "red" or "RED"

        Returns:
            Matching Color

        Raises:
            ValueError: If name is empty or unknown
        """
        if name is None or not str(name).strip():
            raise ValueError("Color name must not be empty")
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown color: {name}") from None

    @classmethod
    def palette(cls, count: int) -> Tuple["Color", ...]:
        """
        Get the first `count` colors of the palette.

        Args:
            count: Number of colors (1 to 7)

        Returns:
            Tuple of colors in palette order

        Raises:
            ValueError: If count is out of range
        """
        members = tuple(cls)
        if not 1 <= count <= len(members):
            raise ValueError(f"Color count must be between 1 and {len(members)}, got {count}")
        return members[:count]

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class Item:
    """
    A single colored ball.

    Attributes:
        id: Unique ball number, used for equality and debugging only
        color: Ball color; the only attribute solving logic looks at
    """
    id: int
    color: Color
