import logging
from enum import IntEnum

from rich.logging import RichHandler

from .styles import console

__all__ = ["logger", "Verbosity", "configure", "set_verbosity"]

logger = logging.getLogger("helmsman")


class Verbosity(IntEnum):
    """Error reporting levels, as accepted by the --verbose global option."""
    QUIET = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4

    @property
    def level(self):
        return {
            Verbosity.QUIET: logging.CRITICAL + 1,
            Verbosity.ERROR: logging.ERROR,
            Verbosity.WARN: logging.WARNING,
            Verbosity.INFO: logging.INFO,
            Verbosity.DEBUG: logging.DEBUG,
        }[self]


_handler = None


def configure(verbosity=None, *, colorful=True):
    """Install the package log handler once; later calls only adjust the level when given one."""
    global _handler
    if _handler is None:
        _handler = RichHandler(
            console=console(stderr=True, colorful=colorful),
            show_time=False,
            show_path=False,
        )
        _handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(_handler)
        if verbosity is None and logger.level == logging.NOTSET:
            verbosity = Verbosity.ERROR
    if verbosity is not None:
        set_verbosity(verbosity)
    return logger


def set_verbosity(verbosity):
    logger.setLevel(Verbosity(verbosity).level)
