"""
Logging setup for realuser.

Modules log through children of the ``realuser`` logger. The library stays
silent until an application calls ``configure_logging``.
"""

import logging

from realuser.config import Settings

logger = logging.getLogger("realuser")
logger.addHandler(logging.NullHandler())

_formatter = logging.Formatter(
    "[%(asctime)s] [%(levelname)-5s] [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
_handler: logging.Handler | None = None


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """
    Attach a stderr handler to the ``realuser`` logger.

    Repeated calls only change the level.

    Args:
        level: Level name or number. Defaults to ``REALUSER_LOG_LEVEL``.

    Returns:
        The configured package logger.
    """
    global _handler

    if level is None:
        level = Settings.from_env().log_level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        # Unknown names come back as "Level <name>"
        level = resolved if isinstance(resolved, int) else logging.WARNING

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(_formatter)
        logger.addHandler(_handler)

    logger.setLevel(level)
    _handler.setLevel(level)

    # Prevent duplicate logs through the root logger
    logger.propagate = False
    return logger
