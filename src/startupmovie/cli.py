from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import MovieConfig
from .errors import StartupMovieError
from .identifiers import to_level_identifier
from .logging_config import configure_logging
from .slots import SlotPaths
from .state import TransitionState
from .transition import Transitioner

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="startup-movie",
        description="Select the loading-screen clip the engine plays for the next level.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to a YAML config file overriding the built-in defaults.",
    )
    parser.add_argument(
        "--movies-dir",
        type=Path,
        default=None,
        help="Directory holding the clip slots (overrides the config file).",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    sub = parser.add_subparsers(dest="command", required=True)
    switch = sub.add_parser("switch", help="Rotate clips for a level transition.")
    switch.add_argument("leaving", help="Level being left")
    switch.add_argument("loading", help="Level about to load")

    status = sub.add_parser("status", help="Show the persisted level and which slots exist.")
    status.add_argument("levels", nargs="*", help="Levels whose clip slots to check")
    return parser.parse_args(argv)


def _status_lines(config: MovieConfig, levels: List[str]) -> List[str]:
    slots = SlotPaths(config)
    state = TransitionState(slots.state_file, encoding=config.encoding, max_bytes=config.max_identifier_bytes)
    last = state.load()
    lines = [
        f"movies directory: {slots.root}",
        f"last loaded: {last if last is not None else '(none)'}",
        f"active: {'present' if slots.exists(slots.active) else 'MISSING'}",
        f"default clip: {'parked' if slots.exists(slots.default) else 'in active'}",
    ]
    pattern = f"{config.level_prefix}*{config.extension}"
    parked = sorted(p.name for p in slots.root.glob(pattern) if p != slots.active)
    lines.append(f"level clips: {', '.join(parked) if parked else '(none)'}")
    for name in levels:
        level = to_level_identifier(name, config.encoding, config.max_identifier_bytes)
        present = slots.exists(slots.level(level))
        lines.append(f"  {level}: {'available' if present else 'not present'}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    configure_logging(default_level=level)

    try:
        config = MovieConfig.load(user_path=args.config_path)
        if args.movies_dir is not None:
            config = config.with_movies_dir(args.movies_dir)

        if args.command == "status":
            for line in _status_lines(config, args.levels):
                print(line)
            return 0

        outcome = Transitioner(config).switch(args.leaving, args.loading)
    except StartupMovieError as exc:
        logger.error("%s", exc)
        completed = getattr(exc, "completed", ())
        if completed:
            logger.error("Steps applied before the failure: %s", "; ".join(str(a) for a in completed))
        return 1

    print(outcome.summary())
    return 0
