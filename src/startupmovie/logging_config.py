import logging
import os
import sys


def configure_logging(default_level: int = logging.INFO) -> None:
    """Configure the root logger for command-line use.

    Respects STARTUP_MOVIE_LOG_LEVEL if present.
    """
    level_name = os.getenv("STARTUP_MOVIE_LOG_LEVEL")
    level = default_level
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates on repeated calls
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
