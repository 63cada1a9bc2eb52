"""Logging configuration for the CLI."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class StderrHandler(logging.StreamHandler):
    """StreamHandler that always writes to the current sys.stderr.

    Test runners swap sys.stderr per invocation; binding the stream at
    construction time would keep writing to a stale one.
    """

    def __init__(self):
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def configure_logging(level: Optional[int] = None) -> logging.Logger:
    """Attach a stderr handler to the talikhata logger.

    Args:
        level: Log level; defaults to TALIKHATA_LOG_LEVEL or WARNING

    Returns:
        The configured package logger
    """
    if level is None:
        level_name = os.environ.get("TALIKHATA_LOG_LEVEL", "WARNING").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("talikhata")
    if not any(isinstance(h, StderrHandler) for h in logger.handlers):
        handler = StderrHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
