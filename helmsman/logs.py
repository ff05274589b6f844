"""
Logging setup for helmsman.

Every module logs through ``logging.getLogger(__name__)``; nothing is emitted
until the host either configures logging itself or calls configure(), which
attaches a single rich handler to the package logger.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import isdevelopment
from .utils import *

LOGGER_NAME = "helmsman"


def configure(level=Unset, /, *, console=Unset):
    """
    Attach a RichHandler to the "helmsman" logger (idempotent).

    Parameters
    - level: int | str | Unset
      logger level; DEBUG in development, INFO otherwise.
    - console: rich.console.Console | Unset
      target console; a stderr console when Unset.

    Returns
    - logging.Logger: the configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(coalesce(level, logging.DEBUG if isdevelopment() else logging.INFO))

    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            return logger

    handler = RichHandler(
        console=Console(stderr=True) if console is Unset else console,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = (
    "configure",
)
