"""Logging configuration for the connector change detector."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
ROOT_LOGGER = "change_detector"


class ColoredFormatter(logging.Formatter):
    """Formatter with colors for different log levels."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, *args, use_colors: Optional[bool] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def format(self, record):
        if not self.use_colors:
            return super().format(record)
        # Colour a copy so other handlers still see the plain record
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, '')
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        record.name = f"\033[34m{record.name}{self.RESET}"
        return super().format(record)


def setup_logging(log_level: Optional[str] = None) -> None:
    """Configure the package logger once for command-line runs."""

    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    # Reports go to stdout; keep diagnostics off the root handlers
    logger.propagate = False

    configure_external_loggers()


def configure_external_loggers() -> None:
    """Configure logging levels for external libraries."""
    external_loggers = {
        'asyncio': logging.WARNING,
        'concurrent.futures': logging.WARNING,
    }

    for logger_name, level in external_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger under the package namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{module_name}")
