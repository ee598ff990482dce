"""
Tests for the background SolveWorker.

The worker body is run on the test thread by calling run() directly, so
signals connected to plain callables are delivered immediately.

Usage:
    pytest tests/test_worker.py
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

QtCore = pytest.importorskip("PyQt5.QtCore")

from ballsort.solve_worker import SolveWorker
from ballsort.solver import PuzzleState, Solution, SolveStatus


@pytest.fixture(scope="module")
def qt_app():
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


def split_pair():
    return PuzzleState.from_colors([["RED", "BLUE"], ["BLUE", "RED"], []], capacity=2)


def deadlock():
    return PuzzleState.from_colors([["RED", "BLUE"], ["BLUE", "RED"]], capacity=2)


def record(signal):
    received = []
    signal.connect(received.append)
    return received


def test_hint_job(qt_app):
    worker = SolveWorker(horizon=6)
    hints = record(worker.hint_ready)
    statuses = record(worker.status_changed)

    worker.set_job("hint", split_pair())
    worker.run()

    assert len(hints) == 1
    assert hints[0] == worker.last_solution.first_move
    assert statuses == ["Searching", "SOLVED"]


def test_solve_job_emits_solution(qt_app):
    worker = SolveWorker(strategy_name="astar", horizon=6)
    plans = record(worker.plan_ready)

    worker.set_job("solve", split_pair())
    worker.run()

    assert len(plans) == 1
    assert isinstance(plans[0], Solution)
    assert plans[0].is_solved
    assert plans[0].move_count == 3


def test_check_job(qt_app):
    worker = SolveWorker(horizon=4)
    verdicts = record(worker.solvability_checked)

    worker.set_job("check", deadlock())
    worker.run()
    worker.set_job("check", split_pair())
    worker.run()

    assert verdicts == [False, True]


def test_cancelled_check_is_not_a_verdict(qt_app):
    worker = SolveWorker(horizon=6)
    verdicts = record(worker.solvability_checked)
    aborted = record(worker.search_aborted)

    worker.set_job("check", split_pair())
    worker.request_stop()
    worker.run()

    assert verdicts == []
    assert len(aborted) == 1
    assert aborted[0].status is SolveStatus.CANCELLED


def test_budget_exhausted_hint_is_not_a_verdict(qt_app):
    worker = SolveWorker(horizon=6, max_nodes=0)
    hints = record(worker.hint_ready)
    aborted = record(worker.search_aborted)

    worker.set_job("hint", split_pair())
    worker.run()

    assert hints == []
    assert aborted[0].status is SolveStatus.TIMED_OUT


def test_run_without_job_does_nothing(qt_app):
    worker = SolveWorker()
    statuses = record(worker.status_changed)
    worker.run()
    assert statuses == []


def test_bad_jobs_rejected(qt_app):
    worker = SolveWorker()
    with pytest.raises(ValueError):
        worker.set_job("explode", split_pair())
    with pytest.raises(TypeError):
        worker.set_job("hint", None)
