"""Process logging setup."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    """Route roomcoord loggers to stderr at the configured level."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("roomcoord").setLevel(level.upper())
