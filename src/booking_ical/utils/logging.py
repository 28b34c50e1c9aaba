"""Loguru sinks for booking-ical."""

import sys
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level: <8} | {extra[name]}:{line} - {message}"

DEFAULT_ROTATION = "10 MB"
DEFAULT_RETENTION = "10 days"

# Records logged before setup_logger() still need extra[name]
logger.configure(extra={"name": "booking_ical"})


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    rotation: str = DEFAULT_ROTATION,
    retention: str = DEFAULT_RETENTION,
) -> None:
    """Replace the loguru sinks with a stderr sink and an optional file sink.

    Attachments may be written from several threads, so the file sink is
    enqueued.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        log_file: Path of a log file. Only stderr is used when None.
        rotation: Loguru rotation condition for the log file, e.g. "10 MB".
        retention: Loguru retention for rotated files, e.g. "10 days".
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level, colorize=True)

    if log_file:
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            enqueue=True,
        )
        logger.debug("Logging to {} (rotation={}, retention={})", log_file, rotation, retention)


def get_logger(name: str):
    """Return the shared logger bound to a module name."""
    return logger.bind(name=name)
