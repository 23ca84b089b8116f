import logging
import os
from typing import ClassVar, Optional

from .ansi import Colors

LOG_LEVEL_ENV = "SHELLPIPER_LOG_LEVEL"
_LOGGER_NAME = "shellpiper"


class ColoredFormatter(logging.Formatter):
    level_colors: ClassVar[dict[int, str]] = {
        logging.DEBUG: Colors.GREEN,
        logging.INFO: Colors.BLUE,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.level_colors.get(record.levelno)
        if color:
            return f"{color}{message}{Colors.RESET}"
        return message


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    The level comes from ``level`` or the SHELLPIPER_LOG_LEVEL environment
    variable and defaults to WARNING, which keeps the progress view clean.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    name = (level or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()
    resolved = logging.getLevelName(name)
    logger.setLevel(resolved if isinstance(resolved, int) else logging.WARNING)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(ColoredFormatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
