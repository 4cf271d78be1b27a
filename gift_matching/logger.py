# gift_matching/logger.py
import logging
import sys

from .config import LOG_LEVEL

logger = logging.getLogger("gift_matching")
logger.setLevel(LOG_LEVEL)

# Prevent duplicate handlers if imported multiple times
if not logger.handlers:
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(stream_handler)


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger, e.g. get_logger(__name__)."""
    if name.startswith("gift_matching."):
        name = name[len("gift_matching."):]
    return logger.getChild(name)
