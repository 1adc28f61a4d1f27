import logging
import sys


def setup_logger(level: str | None = None) -> logging.Logger:
    """
    Configure the package logger with a console handler.

    Library code only ever calls logging.getLogger(__name__); applications that
    render frames call this once at startup.
    """
    from .config import settings

    logger = logging.getLogger("frameloom")
    logger.setLevel((level or settings.log_level).upper())

    # Clear existing handlers to prevent duplicate logs if called twice
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(console_handler)
    logger.propagate = False

    logger.debug("Logging initialized at %s", logging.getLevelName(logger.level))
    return logger
