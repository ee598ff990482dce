"""
Tests for the puzzle model and the shortest-plan search.

Covers:
1. Color, Tube, Move and PuzzleState behavior
2. Move validation and MoveResult
3. Concrete search scenarios
4. Minimality against brute-force enumeration
5. Determinism, conservation and capacity over random walks
6. Cancellation and budgets

Usage:
    pytest tests/test_solver.py
"""

import sys
import threading
import time
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ballsort.solver import (
    Color,
    InvalidMoveError,
    Item,
    Move,
    MoveRejection,
    PuzzleState,
    SolutionContext,
    SolverStrategy,
    SolveStatus,
    Tube,
    apply_move,
    create_strategy,
    get_default_strategy_name,
    get_strategy_class,
    get_strategy_names,
    hint,
    is_solvable,
    register_strategy,
    replay,
    solve,
)
from ballsort.solver.strategies.astar import misplaced_items
from ballsort.solver.strategies.bfs import BreadthFirstStrategy, is_relabel_move


R, B, G, Y = "RED", "BLUE", "GREEN", "YELLOW"


def make_state(layout, capacity):
    return PuzzleState.from_colors(layout, capacity=capacity)


def brute_force_min(state, horizon):
    """Shortest plan length found by enumerating every move sequence."""
    def reachable(current, remaining):
        if current.is_won:
            return True
        if remaining == 0:
            return False
        return any(reachable(current.successor(m), remaining - 1) for m in current.legal_moves())

    for length in range(horizon + 1):
        if reachable(state, length):
            return length
    return None


# =============================================================================
# Model
# =============================================================================

def test_color_parsing_and_palette():
    assert Color.from_name("red") is Color.RED
    assert Color.from_name(" Pink ") is Color.PINK
    assert Color.palette(4) == (Color.RED, Color.BLUE, Color.GREEN, Color.YELLOW)
    assert len(Color.palette(7)) == 7
    assert str(Color.RED) == "Red"

    with pytest.raises(ValueError):
        Color.from_name("")
    with pytest.raises(ValueError):
        Color.from_name("teal")
    with pytest.raises(ValueError):
        Color.palette(8)


def test_tube_push_pop_and_predicates():
    tube = Tube(id=0, capacity=2)
    assert tube.is_empty and tube.is_monochromatic and not tube.is_complete
    assert tube.peek_top() is None
    assert tube.pop() == (None, tube)
    assert tube.push(None) is None

    red, blue = Item(0, Color.RED), Item(1, Color.BLUE)
    one = tube.push(red)
    assert one.size == 1 and one.peek_top() == red
    assert tube.is_empty  # original untouched

    full = one.push(blue)
    assert full.is_full and not full.is_monochromatic
    assert full.push(Item(2, Color.RED)) is None

    top, rest = full.pop()
    assert top == blue and rest.colors() == (Color.RED,)
    assert full.bottom_run() == 1
    assert Tube(id=1, capacity=2, items=(red, Item(3, Color.RED))).is_complete


def test_tube_receive_rules():
    red = Tube(id=0, capacity=2, items=(Item(0, Color.RED),))
    blue = Tube(id=1, capacity=2, items=(Item(1, Color.BLUE),))
    empty = Tube(id=2, capacity=2)
    full_red = Tube(id=3, capacity=2, items=(Item(2, Color.RED), Item(3, Color.RED)))

    assert empty.can_receive_from(red)
    assert not red.can_receive_from(empty)
    assert not red.can_receive_from(blue)
    assert red.can_receive_from(full_red)
    assert not full_red.can_receive_from(red)
    assert not red.can_receive_from(red)


def test_tube_rejects_bad_construction():
    with pytest.raises(ValueError):
        Tube(id=0, capacity=0)
    with pytest.raises(ValueError):
        Tube(id=0, capacity=1, items=(Item(0, Color.RED), Item(1, Color.RED)))


def test_move_helpers():
    move = Move.from_pair((2, 5))
    assert move == Move(2, 5)
    assert move.reversed() == Move(5, 2)
    assert move.as_pair() == (2, 5)
    assert str(move) == "2->5"
    assert sorted([Move(1, 0), Move(0, 2), Move(0, 1)]) == [Move(0, 1), Move(0, 2), Move(1, 0)]


def test_state_rejects_duplicate_tube_ids():
    with pytest.raises(ValueError):
        PuzzleState(tubes=(Tube(id=0, capacity=2), Tube(id=0, capacity=2)))


def test_canonical_key_ignores_item_ids_order_and_move_count():
    a = PuzzleState(tubes=(
        Tube(0, 2, (Item(0, Color.RED), Item(1, Color.BLUE))),
        Tube(1, 2, ()),
    ))
    b = PuzzleState(tubes=(
        Tube(1, 2, ()),
        Tube(0, 2, (Item(7, Color.RED), Item(9, Color.BLUE))),
    ), move_count=5)
    assert a.canonical_key() == b.canonical_key()
    assert a.to_layout() == b.to_layout() == [["RED", "BLUE"], []]
    assert b.fresh().move_count == 0


def test_legal_moves_are_ordered():
    state = make_state([[R, B], [B], [], [R]], capacity=2)
    moves = state.legal_moves()
    assert moves == sorted(moves)
    assert moves == [Move(0, 1), Move(0, 2), Move(1, 2), Move(3, 2)]


def test_is_won_is_stable():
    won = make_state([[R, R], [B, B], []], capacity=2)
    assert won.is_won and won.is_won
    assert not make_state([[R], [R], []], capacity=2).is_won


# =============================================================================
# Moves
# =============================================================================

@pytest.mark.parametrize("move, reason", [
    (Move(0, 9), MoveRejection.UNKNOWN_TUBE),
    (Move(0, 0), MoveRejection.SAME_TUBE),
    (Move(2, 0), MoveRejection.SOURCE_EMPTY),
    (Move(3, 0), MoveRejection.TARGET_FULL),
    (Move(3, 1), MoveRejection.COLOR_MISMATCH),
])
def test_invalid_moves_are_returned(move, reason):
    state = make_state([[R, B], [B], [], [R]], capacity=2)
    result = apply_move(state, move)
    assert not result.ok
    assert result.state is None
    assert result.error.reason is reason
    assert result.error.move == move
    with pytest.raises(InvalidMoveError):
        result.unwrap()


def test_apply_move_returns_new_state():
    state = make_state([[R, B], [B], []], capacity=2)
    result = apply_move(state, Move(0, 1))
    assert result.ok
    new_state = result.unwrap()
    assert new_state.move_count == 1
    assert new_state.tube(1).colors() == (Color.BLUE, Color.BLUE)
    assert state.tube(0).colors() == (Color.RED, Color.BLUE)
    assert state.move_count == 0


def test_apply_move_rejects_non_state():
    with pytest.raises(TypeError):
        apply_move(None, Move(0, 1))


def test_replay_raises_on_illegal_move():
    state = make_state([[R, B], [B], []], capacity=2)
    states = replay(state, [Move(0, 1)])
    assert len(states) == 2
    with pytest.raises(InvalidMoveError):
        replay(state, [Move(2, 0)])


# =============================================================================
# Search scenarios
# =============================================================================

def test_already_sorted_single_tube():
    state = make_state([[R, R], []], capacity=2)
    assert state.is_won
    solution = solve(state, 4)
    assert solution.is_solved
    assert solution.plan == ()
    assert hint(state, 4) is None


def test_deadlock_has_no_moves():
    state = make_state([[R, B], [B, R]], capacity=2)
    assert state.legal_moves() == []
    assert not is_solvable(state, 4)
    assert solve(state, 4).status is SolveStatus.NO_SOLUTION_WITHIN_HORIZON


def test_already_sorted_with_spare_tube():
    state = make_state([[R, R], [B, B], []], capacity=2)
    solution = solve(state, 4)
    assert solution.is_solved and solution.move_count == 0


def test_split_pair_solves_in_minimum_moves():
    state = make_state([[R, B], [B, R], []], capacity=2)
    solution = solve(state, 4)
    assert solution.is_solved
    assert solution.move_count == brute_force_min(state, 4) == 3
    final = replay(state, solution.plan)[-1]
    assert final.is_won
    assert final.move_count == 3
    assert solution.final_state.canonical_key() == final.canonical_key()


def test_horizon_cutoff():
    state = make_state([[R, B], [B, R], []], capacity=2)
    solution = solve(state, 2)
    assert solution.status is SolveStatus.NO_SOLUTION_WITHIN_HORIZON
    assert solution.plan is None
    assert solve(state, 3).is_solved


def test_hint_is_first_plan_move():
    state = make_state([[R, B], [B, R], []], capacity=2)
    assert hint(state, 4) == solve(state, 4).first_move


def test_solve_rejects_bad_input():
    state = make_state([[R, R], []], capacity=2)
    with pytest.raises(TypeError):
        solve(None, 4)
    with pytest.raises(ValueError):
        solve(state, -1)
    with pytest.raises(ValueError):
        solve(state, 4, strategy="unknown")


# =============================================================================
# Minimality and strategy agreement
# =============================================================================

MINIMALITY_FIXTURES = [
    ([[R, B], [B, R], []], 2, 6),
    ([[R, B], [R, B], []], 2, 6),
    ([[R, B], [B, G], [G, R], []], 2, 6),
    ([[R, B, R], [B, R, B], [], []], 3, 6),
    ([[B, R], [R], [B], []], 2, 5),
]


@pytest.mark.parametrize("strategy", ["bfs", "astar"])
@pytest.mark.parametrize("layout, capacity, horizon", MINIMALITY_FIXTURES)
def test_plan_length_matches_brute_force(strategy, layout, capacity, horizon):
    state = make_state(layout, capacity)
    expected = brute_force_min(state, horizon)
    solution = solve(state, horizon, strategy=strategy)

    if expected is None:
        assert solution.status is SolveStatus.NO_SOLUTION_WITHIN_HORIZON
    else:
        assert solution.is_solved
        assert solution.move_count == expected
        assert replay(state, solution.plan)[-1].is_won


@pytest.mark.parametrize("layout, capacity, horizon", MINIMALITY_FIXTURES)
def test_pruning_does_not_change_plan_length(layout, capacity, horizon):
    state = make_state(layout, capacity)
    pruned = create_strategy("bfs").solve(SolutionContext(state=state), horizon)
    unpruned = create_strategy("bfs", prune_relabels=False).solve(SolutionContext(state=state), horizon)
    assert pruned.status is unpruned.status
    assert pruned.move_count == unpruned.move_count


def test_relabel_move_detection():
    state = make_state([[R], [], [B, B]], capacity=2)
    assert is_relabel_move(state, Move(0, 1))
    assert not is_relabel_move(state, Move(2, 1))


def test_misplaced_items_bound():
    assert misplaced_items(make_state([[R, R], [B, B], []], capacity=2)) == 0
    assert misplaced_items(make_state([[R, B], [B, R], []], capacity=2)) == 2
    assert misplaced_items(make_state([[R, B, B], [], []], capacity=3)) == 2


def test_strategy_registry():
    assert get_default_strategy_name() == "bfs"
    assert {"bfs", "astar"} <= set(get_strategy_names())
    assert create_strategy(" AStar ").name == "astar"
    assert get_strategy_class("BFS") is BreadthFirstStrategy
    with pytest.raises(ValueError):
        create_strategy("")


def test_registry_rejects_name_clash():
    class Impostor(SolverStrategy):
        name = "bfs"

        def solve(self, context, horizon):
            raise NotImplementedError

    with pytest.raises(ValueError):
        register_strategy(Impostor)
    with pytest.raises(TypeError):
        register_strategy(object)
    assert get_strategy_class("bfs") is BreadthFirstStrategy


# =============================================================================
# Determinism, conservation, capacity
# =============================================================================

def test_solve_is_deterministic():
    state = make_state([[R, B], [B, G], [G, R], []], capacity=2)
    first = solve(state, 8)
    second = solve(state, 8)
    assert first.is_solved
    assert first.moves == second.moves


def test_random_walk_conserves_items_and_capacity():
    rng = np.random.default_rng(1234)
    start = make_state([[R, B, G, Y], [Y, G, B, R], [B, R, Y, G], [G, Y, R, B], [], []], capacity=4)
    counts = start.color_counts()

    state = start
    for _ in range(200):
        moves = state.legal_moves()
        if not moves:
            break
        move = moves[int(rng.integers(len(moves)))]
        state = apply_move(state, move).unwrap()
        assert state.item_count == start.item_count
        assert state.color_counts() == counts
        assert all(tube.size <= tube.capacity for tube in state.tubes)


# =============================================================================
# Cancellation and budgets
# =============================================================================

HARD_LAYOUT = [[R, B, G, Y], [Y, G, B, R], [B, R, Y, G], [G, Y, R, B], [], []]


@pytest.mark.parametrize("strategy", ["bfs", "astar"])
def test_cancelled_search_reports_cancelled(strategy):
    state = make_state(HARD_LAYOUT, capacity=4)
    flag = threading.Event()
    flag.set()
    solution = solve(state, 30, strategy=strategy, cancel_flag=flag)
    assert solution.status is SolveStatus.CANCELLED
    assert solution.was_cancelled
    assert solution.plan is None
    assert not solution.status.is_conclusive


@pytest.mark.parametrize("strategy", ["bfs", "astar"])
def test_node_budget_reports_timed_out(strategy):
    state = make_state(HARD_LAYOUT, capacity=4)
    solution = solve(state, 30, strategy=strategy, max_nodes=0)
    assert solution.status is SolveStatus.TIMED_OUT
    assert solution.timed_out


# Seven colors in nine tubes; far too deep for an exhaustive search to finish quickly
O, P, K = "ORANGE", "PURPLE", "PINK"
SEVEN_COLOR_LAYOUT = [
    [R, B, G, Y], [O, P, K, R], [B, G, Y, O], [P, K, R, B],
    [G, Y, O, P], [K, R, B, G], [Y, O, P, K], [], [],
]


def test_deadline_stops_running_search():
    state = make_state(SEVEN_COLOR_LAYOUT, capacity=4)
    started = time.monotonic()
    solution = solve(state, 40, strategy="bfs", timeout_sec=0.3)
    assert solution.status is SolveStatus.TIMED_OUT
    assert solution.plan is None
    assert solution.metrics.states_explored > 0
    assert time.monotonic() - started < 10


def test_cancel_from_another_thread_stops_running_search():
    state = make_state(SEVEN_COLOR_LAYOUT, capacity=4)
    flag = threading.Event()
    timer = threading.Timer(0.3, flag.set)
    timer.start()
    try:
        solution = solve(state, 40, strategy="bfs", cancel_flag=flag, timeout_sec=None)
    finally:
        timer.cancel()
    assert solution.status is SolveStatus.CANCELLED
    assert solution.metrics.states_explored > 0


def test_context_must_match_state():
    state = make_state([[R, B], [B, R], []], capacity=2)
    other = make_state([[R, R], []], capacity=2)
    with pytest.raises(ValueError):
        solve(state, 4, context=SolutionContext(state=other))


def test_context_validation():
    state = make_state([[R, R], []], capacity=2)
    with pytest.raises(TypeError):
        SolutionContext(state=None)
    with pytest.raises(ValueError):
        SolutionContext(state=state, max_nodes=-1)
    context = SolutionContext(state=state)
    assert context.abort_status() is None
    context.cancel()
    assert context.abort_status() is SolveStatus.CANCELLED
