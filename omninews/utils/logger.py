"""Unified logging setup for the API server and command-line scripts.

Both the server and the scripts write to the same daily-rotated log file so
an operator can follow article generation in one place. Timestamps are
rendered in the newsroom's local zone (WIB by default).
"""
import logging
import logging.handlers
import sys
from datetime import datetime

import pytz

from omninews.config import LOG_DIR, LOG_TIMEZONE

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = LOG_DIR / "omninews.log"


class TimezoneFormatter(logging.Formatter):
    """Formatter that converts record times to a fixed timezone."""
    def __init__(self, fmt=None, datefmt=None, tz_name: str = LOG_TIMEZONE):
        super().__init__(fmt, datefmt)
        self.tz = pytz.timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        """Format time in the configured timezone, suffixed with its abbreviation."""
        ct = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return ct.strftime(datefmt)
        return f"{ct.strftime('%Y-%m-%d %H:%M:%S')} {ct.tzname()}"


def _file_handler() -> logging.handlers.TimedRotatingFileHandler:
    handler = logging.handlers.TimedRotatingFileHandler(
        LOG_FILE,
        when='midnight',
        interval=1,
        backupCount=30,  # Keep 30 days of logs
        encoding='utf-8'
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(TimezoneFormatter(LOG_FORMAT))
    return handler


def _console_handler(stream=None) -> logging.StreamHandler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(logging.INFO)
    handler.setFormatter(TimezoneFormatter(LOG_FORMAT))
    return handler


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach file and console handlers to the root logger once."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        root_logger.addHandler(_file_handler())
        root_logger.addHandler(_console_handler())
    return root_logger


def setup_script_logger(name: str = "script") -> logging.Logger:
    """Setup a logger for scripts that writes to the main log file and stderr.

    Args:
        name: Logger name (default: "script")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Don't add handlers if they already exist
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    # Reuse the server's file handler when running in the same process
    file_handler = None
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.handlers.TimedRotatingFileHandler):
            file_handler = handler
            break
    if not file_handler:
        file_handler = _file_handler()

    logger.addHandler(file_handler)
    logger.addHandler(_console_handler(sys.stderr))

    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False

    return logger
