"""Command-line tools for running headless Snake Frenzy games."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass

import numpy as np

from snake_frenzy.config import GameConfig
from snake_frenzy.controls import KeyCode
from snake_frenzy.engine import GameEngine
from snake_frenzy.grid import render_text

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Outcome of a headless run."""

    ticks: int
    length: int
    food_remaining: int
    game_over: bool
    board: str

    def summary(self) -> str:
        status = "game over" if self.game_over else "still alive"
        return (
            f"{status} after {self.ticks} ticks: length={self.length}, "
            f"food on board={self.food_remaining}"
        )


def simulate(
    config: GameConfig,
    ticks: int,
    spawn_every: int = 1,
    turn_probability: float = 0.2,
    obstacles: bool = False,
) -> SimulationResult:
    """Play a game with random key presses, one motion tick at a time.

    The food tick fires once every *spawn_every* motion ticks.
    """
    if ticks < 0:
        raise ValueError("ticks must be >= 0.")
    if spawn_every < 1:
        raise ValueError("spawn_every must be at least 1.")

    engine = GameEngine(config)
    # Separate stream so key choices do not shift food placement.
    keys_rng = np.random.default_rng(
        None if config.seed is None else config.seed + 1,
    )
    keys = list(KeyCode)

    if obstacles:
        engine.randomize_obstacles()
    engine.handle_key(int(keys_rng.choice(keys)))

    for i in range(ticks):
        if engine.game_over:
            break
        if keys_rng.random() < turn_probability:
            engine.handle_key(int(keys_rng.choice(keys)))
        engine.step()
        if (i + 1) % spawn_every == 0:
            engine.spawn_food()

    return SimulationResult(
        ticks=engine.tick,
        length=len(engine.body),
        food_remaining=len(engine.food),
        game_over=engine.game_over,
        board=render_text(engine.board),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-frenzy",
        description="Snake Frenzy headless simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    sim_p = sub.add_parser("simulate", help="Run a game with random input.")
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument("--grid-size", type=int, default=None)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--ticks", type=int, default=500)
    sim_p.add_argument(
        "--spawn-every", type=int, default=1,
        help="Motion ticks per food tick.",
    )
    sim_p.add_argument("--turn-probability", type=float, default=0.2)
    sim_p.add_argument(
        "--obstacles", action="store_true",
        help="Randomize obstacles before the first move.",
    )
    sim_p.add_argument(
        "--no-board", action="store_true",
        help="Print only the summary line.",
    )

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    config = GameConfig.load(args.config) if args.config else GameConfig()
    overrides = {
        name: val
        for name, val in (("grid_size", args.grid_size), ("seed", args.seed))
        if val is not None
    }
    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = GameConfig(**d)

    result = simulate(
        config,
        ticks=args.ticks,
        spawn_every=args.spawn_every,
        turn_probability=args.turn_probability,
        obstacles=args.obstacles,
    )
    if not args.no_board:
        print(result.board)  # noqa: T201
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-frenzy`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
