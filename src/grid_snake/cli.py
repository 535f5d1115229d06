"""CLI for running headless games and dumping configuration."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys

from grid_snake.config import GameConfig
from grid_snake.engine import GameEngine
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

_MOVE_CODES: dict[str, Direction | None] = {
    "L": Direction.LEFT,
    "R": Direction.RIGHT,
    "U": Direction.UP,
    "D": Direction.DOWN,
    ".": None,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-snake",
        description="Grid snake simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Run a headless game on a simulated clock.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags below override it).",
    )
    sim_p.add_argument("--frames", type=int, default=600)
    sim_p.add_argument(
        "--frame-ms", type=float, default=16.0,
        help="Simulated milliseconds per scheduler pass.",
    )
    sim_p.add_argument(
        "--moves", type=str, default="",
        help=(
            "Key held for each movement tick: L, R, U, D, or '.' for none. "
            "Ticks past the end of the script hold no key."
        ),
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--tail-follow", action="store_true", default=None,
        help="Allow the head to enter the cell the tail is leaving.",
    )
    sim_p.add_argument(
        "--food-avoids-snake", action="store_true", default=None,
        help="Only spawn food on unoccupied cells.",
    )

    # --- config ---
    cfg_p = sub.add_parser("config", help="Write the default configuration.")
    cfg_p.add_argument(
        "--output", type=str, default=None,
        help="File to write; prints to stdout when omitted.",
    )

    return parser


def _parse_moves(script: str) -> list[Direction | None]:
    moves: list[Direction | None] = []
    for code in script.upper():
        if code.isspace() or code == ",":
            continue
        if code not in _MOVE_CODES:
            raise ValueError(f"Unknown move code: {code!r}.")
        moves.append(_MOVE_CODES[code])
    return moves


def _run_simulate(args: argparse.Namespace) -> int:
    overrides: dict = {}
    for name in ("seed", "tail_follow", "food_avoids_snake"):
        val = getattr(args, name, None)
        if val is not None:
            overrides[name] = val

    try:
        config = GameConfig.load(args.config) if args.config else GameConfig()
        if overrides:
            config = dataclasses.replace(config, **overrides)
    except (OSError, TypeError, ValueError) as exc:
        logger.error("Invalid config: %s", exc)
        return 2

    try:
        moves = _parse_moves(args.moves)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    engine = GameEngine(config)
    delta = args.frame_ms / 1000.0
    move_index = 0
    for _ in range(args.frames):
        requested = moves[move_index] if move_index < len(moves) else None
        report = engine.update(delta, requested)
        if report.moved:
            move_index += 1
        if report.reset:
            logger.info(
                "Reset after tick %d (%s).",
                engine.ticks,
                ", ".join(c.value for c in report.collisions),
            )

    summary = {"frames": args.frames}
    summary.update(engine.get_state())
    print(json.dumps(summary, indent=2))  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    config = GameConfig()
    if args.output:
        config.save(args.output)
    else:
        print(json.dumps(config.to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``grid-snake`` CLI."""
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
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
