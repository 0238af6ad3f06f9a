"""
Console/file logging for the command line entry point.

Library modules only call logging.getLogger(__name__); handlers are
installed here, on the package logger, by applications that want output.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = 'math_handwriter'
LOG_FORMAT = '%(asctime)s | %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(verbose: bool = False, log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """Send package log records to stdout (and optionally a file)."""
    level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Clear any existing handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path, encoding='utf-8')
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    # Prevent propagation to root logger
    logger.propagate = False
    return logger
