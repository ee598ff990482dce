"""
Tests for the command line entry point.

Usage:
    pytest tests/test_main.py
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import main


NEAR_SOLVED = [
    ["RED", "RED", "RED", "RED"],
    ["BLUE", "BLUE", "BLUE", "BLUE"],
    ["GREEN", "GREEN", "GREEN", "GREEN"],
    ["YELLOW", "YELLOW", "YELLOW"],
    ["YELLOW"],
    [],
]


def write_levels(tmp_path):
    path = tmp_path / "levels.json"
    path.write_text(json.dumps({"levels": {"EASY": [{"tubes": NEAR_SOLVED}]}}), encoding="utf-8")
    return str(path)


def test_hint_from_levels_file(tmp_path, capsys):
    levels = write_levels(tmp_path)
    config = str(tmp_path / "none.json")
    code = main.main(["--tier", "easy", "--level", "1", "--levels-file", levels,
                      "--config", config, "--hint"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Status: SOLVED" in out
    assert "Hint: 4->3" in out


def test_full_plan_from_levels_file(tmp_path, capsys):
    levels = write_levels(tmp_path)
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"strategy_name": "astar"}), encoding="utf-8")
    code = main.main(["--levels-file", levels, "--config", str(config)])
    out = capsys.readouterr().out
    assert code == 0
    assert "Plan (1 moves):" in out
    assert "astar" in out


def test_missing_level_exits_with_error(tmp_path):
    levels = write_levels(tmp_path)
    code = main.main(["--levels-file", levels, "--level", "2",
                      "--config", str(tmp_path / "none.json")])
    assert code == 2


def test_unknown_tier_exits_with_error(tmp_path):
    code = main.main(["--tier", "nightmare", "--config", str(tmp_path / "none.json")])
    assert code == 2


def test_generated_level_is_solved(tmp_path, capsys):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"generation_max_nodes": 0, "strategy_name": "astar"}),
                      encoding="utf-8")
    code = main.main(["--seed", "3", "--config", str(config)])
    out = capsys.readouterr().out
    assert code == 0
    assert "Status: SOLVED" in out


def test_strategy_help_lists_registered_strategies(capsys):
    text = main.strategy_help()
    assert "bfs: Breadth-first" in text
    assert "astar: A*" in text

    with pytest.raises(SystemExit):
        main.parse_args(["--help"])
    out = capsys.readouterr().out
    assert "bfs:" in out
