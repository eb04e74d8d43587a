"""Logging setup for hosts and the developer CLI.

Library modules only call ``loguru.logger``; nothing is configured on import.
Hosts that want the grid's ``[GRID]``/``[OVERLAP]``/``[GESTURE]``/``[VIEW]``
messages call ``setup_logger`` once at startup.
"""

import sys
from pathlib import Path

from loguru import logger

from coachcal.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logger(
    level: str | None = None,
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> list[int]:
    """Replace loguru's sinks with a console sink and an optional file sink.

    Args:
        level: Minimum level; defaults to ``COACHCAL_LOG_LEVEL``
        log_file: Optional path of a rotating log file; parent dirs are created
        rotation: When the file sink rotates (e.g. "10 MB", "1 day")
        retention: How long rotated files are kept

    Returns:
        Handler ids of the sinks that were added
    """
    level = (level or settings.log_level).upper()
    logger.remove()

    handlers = [logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Extra kwargs (counts per render pass) only go to the file
        handlers.append(
            logger.add(
                path,
                format=FILE_FORMAT,
                level=level,
                rotation=rotation,
                retention=retention,
                compression="zip",
            )
        )

    logger.debug(f"[LOG] Logging to {len(handlers)} sink(s) at {level}")
    return handlers
