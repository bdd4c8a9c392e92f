"""Logging setup for the castsync CLI."""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Log at INFO; ``verbose`` lowers only castsync's own loggers to DEBUG.

    Third-party loggers (SQLAlchemy in particular) stay at INFO either way.
    """

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    logging.getLogger("castsync").setLevel(logging.DEBUG if verbose else logging.INFO)
