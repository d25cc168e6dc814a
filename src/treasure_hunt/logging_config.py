import logging
import sys
from typing import Optional, TextIO


def resolve_level(name: str, default: int = logging.INFO) -> int:
    """Map a level name such as ``"debug"`` to its logging constant."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Configure the root logger with a single stream handler (stdout by default).

    The level is taken as given; callers resolve flags, settings and
    environment before calling.
    """
    handler = logging.StreamHandler(stream=stream or sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates in repeated test runs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
