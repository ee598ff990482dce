"""
Ball Sort Engine - Entry Point

Builds a level (generated from a seed or read from a levels file), then
prints it together with a hint or the full shortest plan.

Example:
    python main.py --tier easy --level 1
    python main.py --tier hard --level 3 --seed 42 --hint
    python main.py --levels-file levels.json --tier medium --level 2
"""

import sys
import logging
import argparse
from typing import Any, Dict, Optional

from ballsort.levels import LevelCache, LevelLoader, get_tier
from ballsort.settings import load_settings, tiers_from_settings
from ballsort.solver import (
    BallSortError, PuzzleState, Solution, get_strategy_info, get_strategy_names, solve
)


logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure console logging, DEBUG level when debug is on."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler()]
    )


class Application:
    """
    Command line controller.

    Resolves settings and arguments, loads or generates the level and
    runs one search on it.
    """

    def __init__(self, args: argparse.Namespace, settings: Dict[str, Any]):
        """
        Initialize the application.

        Args:
            args: Parsed command line arguments
            settings: Dictionary from load_settings()
        """
        self.args = args
        self.settings = settings
        self.tiers = tiers_from_settings(settings)
        self.tier = get_tier(args.tier, self.tiers)

        # CLI flags override saved settings
        self.strategy_name = args.strategy or settings["strategy_name"]
        self.base_seed = args.seed if args.seed is not None else settings["base_seed"]
        self.horizon = args.horizon if args.horizon is not None else settings["default_horizon"]

    def load_level(self) -> PuzzleState:
        """Read the level from the levels file, or generate it."""
        if self.args.levels_file:
            return LevelLoader(self.args.levels_file).load(self.tier, self.args.level)

        cache = LevelCache(
            base_seed=self.base_seed,
            generator_options={
                "strategy": self.settings["generator_strategy"],
                "max_nodes": self.settings["generation_max_nodes"],
            }
        )
        return cache.get(self.tier, self.args.level)

    def run(self) -> int:
        """
        Run the command.

        Returns:
            Process exit code
        """
        try:
            level = self.load_level()
        except (BallSortError, ValueError) as e:
            logger.error(f"Cannot load level: {e}")
            return 2

        print(f"{self.tier} - level {self.args.level}")
        print(level)
        print()

        solution = solve(
            level,
            self.horizon,
            strategy=self.strategy_name,
            timeout_sec=self.settings["timeout_sec"],
            max_nodes=self.settings["max_nodes"]
        )
        self._print_solution(solution)
        return 0 if solution.is_solved else 1

    def _print_solution(self, solution: Solution) -> None:
        metrics = solution.metrics
        print(f"Status: {solution.status.name}")
        print(f"Explored {metrics.states_explored} states in "
              f"{metrics.computation_time_ms:.0f}ms ({metrics.strategy_name})")

        if not solution.is_solved:
            return
        if self.args.hint:
            move = solution.first_move
            print(f"Hint: {move}" if move else "Already solved")
            return

        print(f"Plan ({solution.move_count} moves):")
        for step, move in enumerate(solution.moves, start=1):
            print(f"  {step:2d}. {move}")


def strategy_help() -> str:
    """Help text for --strategy listing every registered strategy."""
    entries = "; ".join(
        f"{info['name']}: {info['description']}" for info in get_strategy_info()
    )
    return f"Search strategy (default: from settings). {entries}"


def parse_args(argv: Optional[list] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Ball Sort Engine - generate levels and find shortest solutions"
    )
    parser.add_argument(
        "--tier", "-t",
        default="easy",
        help="Difficulty tier: easy, medium or hard (default: easy)"
    )
    parser.add_argument(
        "--level", "-l",
        type=int,
        default=1,
        help="1-based level number within the tier (default: 1)"
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Base seed for level generation (default: from settings)"
    )
    parser.add_argument(
        "--strategy",
        choices=get_strategy_names(),
        default=None,
        help=strategy_help()
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=None,
        help="Longest plan to search for (default: from settings)"
    )
    parser.add_argument(
        "--hint",
        action="store_true",
        help="Only print the next move"
    )
    parser.add_argument(
        "--levels-file",
        default=None,
        help="Read the level from a JSON levels file instead of generating it"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Settings file (default: config.json)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    """Run the Ball Sort Engine command line."""
    args = parse_args(argv)
    settings = load_settings(args.config)

    configure_logging(args.debug or settings.get("debug_enabled", False))

    try:
        application = Application(args, settings)
    except ValueError as e:
        logger.error(str(e))
        return 2
    return application.run()


if __name__ == "__main__":
    sys.exit(main())
