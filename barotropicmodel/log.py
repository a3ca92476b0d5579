"""Logging setup."""

import sys
from loguru import logger


def setup_logging(level: str = "INFO", show_time: bool = True):
    """Configure loguru for the model output.

    Parameters
    ----------
    level : str, default="INFO"
      Logging level (DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL). Per
      iteration diagnostics of the integrator are logged with DEBUG.
    show_time : bool, default=True
      Whether to show timestamps in the output.

    Returns
    -------
    The configured loguru logger.
    """
    logger.remove()

    if show_time:
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
        )
    else:
        log_format = (
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
        )

    logger.add(sys.stderr, format=log_format, level=level, colorize=True)

    return logger
