"""Logging setup for the tile engine and the replay CLI."""

import logging
from typing import Optional


ROOT_LOGGER = "tiles"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Send engine log records to stderr.

    Illegal actions and reverted drops are reported as warnings rather than
    raised, so set at least WARNING to see why a dispatch changed nothing.
    DEBUG adds every drag start, dwell firing and off-board release.

    Only the engine's own logger hierarchy is touched; the root logger and
    any handlers an embedding application installed are left alone.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger under the engine's hierarchy.

    Module names such as "src.engine.reducer" become "tiles.engine.reducer"
    so one configure_logging() call covers the whole package.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    parts = name.split(".")
    if parts[0] in ("src", ROOT_LOGGER):
        parts = parts[1:]
    return logging.getLogger(".".join([ROOT_LOGGER, *parts]))
