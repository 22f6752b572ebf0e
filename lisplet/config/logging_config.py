"""Logging configuration for the interpreter hosts."""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, logs go to stderr so they
                  do not mix with program output.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    config = {
        'level': numeric_level,
        'format': LOG_FORMAT,
        'force': True,
    }

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        config['filename'] = log_file
    else:
        config['stream'] = sys.stderr

    logging.basicConfig(**config)
    logging.getLogger(__name__).debug("Logging initialized at %s level", level.upper())


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Logger name, typically __name__ from the calling module
    """
    return logging.getLogger(name)
