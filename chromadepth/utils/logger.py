"""Console logging for the chromadepth package.

Every module logs through ``get_logger(__name__)``, which places it under the
``chromadepth`` root logger. ``setup_logger`` attaches one console handler to
that root, so a single call configures the whole package.
"""

import logging
import sys
from typing import Optional
from colorama import Fore, Back, Style, init

init(autoreset=True)

ROOT_LOGGER = "chromadepth"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Back.WHITE + Style.BRIGHT,
}


class ColoredFormatter(logging.Formatter):
    """Color the level name; warnings and errors also color the message."""

    def __init__(self, fmt: str = DEFAULT_FORMAT, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        # Work on a copy: other handlers on the same record must stay plain
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = _paint(record.levelname, LEVEL_COLORS.get(record.levelno, ''))
        if record.levelno >= logging.WARNING:
            color = Fore.RED if record.levelno >= logging.ERROR else Fore.YELLOW
            record.msg = _paint(str(record.msg), color)
        return super().format(record)


def _paint(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if color else text


def setup_logger(
    name: str = ROOT_LOGGER,
    level: str = "INFO",
    fmt: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    Configure console output for a chromadepth logger.

    Calling it again (for example after a settings reload) replaces the
    console handler it installed before instead of stacking a second one.

    Args:
        name: Logger to configure, normally the package root.
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        fmt: logging format string. Defaults to DEFAULT_FORMAT.
        use_colors: Color level names and warning/error messages.

    Returns:
        The configured logger.
    """
    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        if getattr(handler, "_chromadepth_console", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(ColoredFormatter(fmt or DEFAULT_FORMAT, use_colors=use_colors))
    handler._chromadepth_console = True
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; names outside the package are nested under it."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
