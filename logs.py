"""
Logging setup for sapprep.

Console output goes through rich; a plain text copy is appended to the log
file so that apply and revert runs can be audited later.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    quiet: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure the sapprep logger.

    Args:
        level: Log level name for both handlers
        log_file: Optional path of a file to append to
        quiet: Only show warnings and errors on the console
        console: Rich console to log to (stderr by default)

    Returns:
        The package logger
    """
    logger = logging.getLogger("sapprep")
    logger.setLevel(level.upper())
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(logging.WARNING if quiet else level.upper())
    logger.addHandler(rich_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            logger.warning("Cannot open log file %s: %s", log_file, e)
        else:
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)

    return logger
