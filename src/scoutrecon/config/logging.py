"""Logging setup for the command line."""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Per-request chatter from the HTTP stack and migration runner.
NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel", "alembic")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Configure the root logger; ``verbose`` turns on DEBUG for every logger."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)
