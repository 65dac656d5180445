"""
Logging setup. Modules log through ``logging.getLogger(__name__)``; the shell
calls ``configure_logging`` once to render those records with rich.
"""

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "terminal_draw"


def configure_logging(
    level: Union[int, str] = "INFO", console: Optional[Console] = None
) -> logging.Logger:
    """Attach a single RichHandler to the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
