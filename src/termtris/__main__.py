"""Command line entry point.

Run with: ``python -m termtris`` (or the ``termtris`` console script).

Pass ``--help`` to see options for the board size, file locations and the
front-end.  The terminal front-end logs to a file so log records do not paint
over the game screen.
"""

from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
from typing import Optional, Sequence

from .board import HEIGHT, WIDTH
from .config import GameConfig


LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="termtris", description="Falling-block puzzle game.")
    parser.add_argument("--columns", type=int, default=WIDTH, help="Number of columns on the board.")
    parser.add_argument("--lines", type=int, default=HEIGHT, help="Number of lines on the board.")
    parser.add_argument(
        "--save-file",
        type=Path,
        default=GameConfig.save_path,
        help="Where S saves and L loads the game.",
    )
    parser.add_argument(
        "--high-score-file",
        type=Path,
        default=GameConfig.high_score_path,
        help="File holding the best score.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible piece sequence.")
    parser.add_argument(
        "--frontend",
        choices=("terminal", "pygame"),
        default="terminal",
        help="Draw in the terminal (curses) or in a pygame window.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=Path("termtris.log"),
        help="File receiving log records.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GameConfig:
    return GameConfig(
        width=args.columns,
        height=args.lines,
        save_path=args.save_file,
        high_score_path=args.high_score_file,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        filename=args.log_file,
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = build_config(args)
    except ValueError as exc:
        raise SystemExit(f"termtris: {exc}") from exc
    rng = random.Random(args.seed)
    LOGGER.info("Starting %s front-end", args.frontend)

    if args.frontend == "pygame":
        from .run_pygame import main as run_frontend
    else:
        from .run_terminal import main as run_frontend
    run_frontend(config, rng)


if __name__ == "__main__":
    main()
