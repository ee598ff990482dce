"""
Board State Module - Immutable puzzle state for the ball sort puzzle.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .color import Color, Item
from .errors import InvalidMoveError, MoveRejection, MoveResult
from .move import Move
from .tube import Tube


CanonicalKey = Tuple[Tuple[int, Tuple[Color, ...]], ...]


@dataclass(frozen=True)
class PuzzleState:
    """
    Immutable puzzle state representation.

    Holds the tubes and the number of moves made so far. Applying a move
    returns a new PuzzleState; the original is never modified, so any
    number of readers and searches can share one snapshot.

    Attributes:
        tubes: Tubes of the puzzle; ids must be unique
        move_count: Moves applied since the level started
    """
    tubes: Tuple[Tube, ...]
    move_count: int = 0
    _index: Dict[int, int] = field(default=None, init=False, repr=False, compare=False)
    _ordered: Tuple[Tube, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.tubes, tuple):
            object.__setattr__(self, "tubes", tuple(self.tubes))
        index = {}
        for position, tube in enumerate(self.tubes):
            if tube.id in index:
                raise ValueError(f"Duplicate tube id: {tube.id}")
            index[tube.id] = position
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "_ordered", tuple(sorted(self.tubes, key=lambda t: t.id)))

    @classmethod
    def from_colors(
        cls,
        layout: Sequence[Sequence[Union[Color, str]]],
        capacity: int,
        move_count: int = 0
    ) -> "PuzzleState":
        """
        Create a PuzzleState from per-tube color lists.

        Tube ids follow list position; ball ids are numbered in reading order.

        Args:
            layout: One sequence per tube, bottom to top, of Colors or color names
            capacity: Capacity shared by all tubes
            move_count: Initial move counter

        Returns:
            PuzzleState instance
        """
        tubes = []
        next_id = 0
        for tube_id, colors in enumerate(layout):
            items = []
            for color in colors:
                if not isinstance(color, Color):
                    color = Color.from_name(color)
                items.append(Item(id=next_id, color=color))
                next_id += 1
            tubes.append(Tube(id=tube_id, capacity=capacity, items=tuple(items)))
        return cls(tubes=tuple(tubes), move_count=move_count)

    def tube(self, tube_id: int) -> Optional[Tube]:
        """
        Look up a tube by id.

        Args:
            tube_id: Tube identifier

        Returns:
            Tube, or None if no tube has that id
        """
        position = self._index.get(tube_id)
        return self.tubes[position] if position is not None else None

    @property
    def item_count(self) -> int:
        """Total number of balls in the puzzle."""
        return sum(tube.size for tube in self.tubes)

    @property
    def is_won(self) -> bool:
        """Every tube is empty or full and single-colored."""
        return all(tube.is_empty or tube.is_complete for tube in self.tubes)

    @property
    def has_uniform_capacity(self) -> bool:
        return len({tube.capacity for tube in self.tubes}) <= 1

    def color_counts(self) -> Dict[Color, int]:
        """Number of balls of each color."""
        return dict(Counter(item.color for tube in self.tubes for item in tube.items))

    def legal_moves(self) -> List[Move]:
        """
        Enumerate every legal move.

        Moves come in ascending source id, then ascending target id.
        Search strategies rely on this order for reproducible plans.

        Returns:
            List of legal Move objects
        """
        moves = []
        ordered = self._ordered
        for source in ordered:
            if source.is_empty:
                continue
            for target in ordered:
                if target.can_receive_from(source):
                    moves.append(Move(source.id, target.id))
        return moves

    def check_move(self, move: Move) -> Optional[MoveRejection]:
        """
        Check a move without applying it.

        Args:
            move: Move to check

        Returns:
            None if the move is legal, otherwise the rejection reason
        """
        source = self.tube(move.source)
        target = self.tube(move.target)
        if source is None or target is None:
            return MoveRejection.UNKNOWN_TUBE
        if move.source == move.target:
            return MoveRejection.SAME_TUBE
        if source.is_empty:
            return MoveRejection.SOURCE_EMPTY
        if target.is_full:
            return MoveRejection.TARGET_FULL
        if not target.can_receive_from(source):
            return MoveRejection.COLOR_MISMATCH
        return None

    def apply_move(self, move: Move) -> MoveResult:
        """
        Apply a move to create a new puzzle state.

        The top ball of the source tube is put on the target tube and the
        move counter goes up by one. The original state is unchanged.

        Args:
            move: Move to apply

        Returns:
            MoveResult holding the new state, or the InvalidMoveError
        """
        rejection = self.check_move(move)
        if rejection is not None:
            return MoveResult(error=InvalidMoveError(move, rejection))
        return MoveResult(state=self.successor(move))

    def successor(self, move: Move) -> "PuzzleState":
        """
        Apply a move that is already known to be legal.

        Search strategies call this for moves from legal_moves() and skip
        the checks done by apply_move().

        Args:
            move: Legal move

        Returns:
            New PuzzleState
        """
        source_pos = self._index[move.source]
        target_pos = self._index[move.target]
        item, new_source = self.tubes[source_pos].pop()
        new_target = self.tubes[target_pos].push(item)

        tubes = list(self.tubes)
        tubes[source_pos] = new_source
        tubes[target_pos] = new_target
        return PuzzleState(tubes=tuple(tubes), move_count=self.move_count + 1)

    def canonical_key(self) -> CanonicalKey:
        """
        Key for visited-state deduplication.

        Built from tube ids and their color sequences only, so ball ids
        and the move counter never make two equivalent states differ.

        Returns:
            Hashable tuple of (tube id, colors bottom to top) in id order
        """
        return tuple((tube.id, tube.colors()) for tube in self._ordered)

    def fresh(self) -> "PuzzleState":
        """Same layout with the move counter reset to zero."""
        if self.move_count == 0:
            return self
        return PuzzleState(tubes=self.tubes, move_count=0)

    def to_layout(self) -> List[List[str]]:
        """
        Convert to a JSON-friendly list of color names per tube.

        Returns:
            One list per tube in id order, bottom to top
        """
        return [[color.name for color in tube.colors()] for tube in self._ordered]

    def __str__(self) -> str:
        header = f"PuzzleState[moves={self.move_count}, won={self.is_won}]"
        return "\n".join([header] + [f"  {tube}" for tube in self._ordered])


def replay(state: PuzzleState, moves: Sequence[Move]) -> List[PuzzleState]:
    """
    Apply moves in order and collect every intermediate state.

    Args:
        state: Starting state
        moves: Moves to apply

    Returns:
        States after each move, starting with `state` itself

    Raises:
        InvalidMoveError: If any move is illegal at its turn
    """
    states = [state]
    for move in moves:
        states.append(states[-1].apply_move(move).unwrap())
    return states
