from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import DEGREE_POLICIES, load_settings
from .engine import Level, autoplay
from .errors import GenerationExhausted, InvalidSettings
from .logging_config import configure_logging
from .rng import RandomSource

logger = logging.getLogger(__name__)


def _level_for(verbosity: int) -> int:
    if verbosity == 1:
        return logging.INFO
    if verbosity >= 2:
        return logging.DEBUG
    return logging.WARNING


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crawlmap",
        description="Generate a room-graph dungeon and print its map",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for a reproducible dungeon")
    parser.add_argument("--config", type=str, default=None, help="YAML settings file")
    parser.add_argument("--min-rooms", type=int, default=None)
    parser.add_argument("--max-rooms", type=int, default=None)
    parser.add_argument("--width", type=int, default=None, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=None, help="Grid height in cells")
    parser.add_argument("--attempts", type=int, default=None, help="Generation attempt cap")
    parser.add_argument("--degree-policy", choices=DEGREE_POLICIES, default=None)
    parser.add_argument("--json", action="store_true", help="Print the grid as JSON")
    parser.add_argument(
        "--play",
        action="store_true",
        help="Spawn the level and clear it with the scripted player",
    )
    parser.add_argument("--max-ticks", type=int, default=1000, help="Tick limit for --play")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(_level_for(args.verbose))

    overrides = {
        "seed": args.seed,
        "min_rooms": args.min_rooms,
        "max_rooms": args.max_rooms,
        "grid_width": args.width,
        "grid_height": args.height,
        "generation_attempt_cap": args.attempts,
        "degree_policy": args.degree_policy,
    }
    try:
        settings = load_settings(args.config, overrides=overrides)
        level = Level.generate(settings, RandomSource(settings.seed))
    except InvalidSettings as exc:
        print(f"crawlmap: invalid settings: {exc}", file=sys.stderr)
        return 1
    except GenerationExhausted as exc:
        print(f"crawlmap: {exc}", file=sys.stderr)
        return 2

    grid = level.grid
    report = autoplay(level, args.max_ticks) if args.play else None

    if args.json:
        data = grid.to_dict()
        if report is not None:
            data["play"] = report.as_dict()
        # Sorted keys so runs with the same seed diff cleanly
        print(json.dumps(data, indent=2, sort_keys=True))
    else:
        for line in grid.to_lines():
            print(line)
        if report is not None:
            print(
                f"cleared={report.cleared} boss_slain={report.boss_slain} ticks={report.ticks} "
                f"enemies_slain={report.enemies_slain} rooms={len(report.finished_order)}"
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())
