"""Logging setup for the tournament graphic pipeline.

Every module logs through a child of the 'tgg' logger ('tgg.sprites',
'tgg.rk9_import', ...), so configuring 'tgg' once covers the package.
Console output goes to stderr; stdout is reserved for graphic JSON.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'

# HTTP client loggers that are noisy at DEBUG
QUIET_LOGGERS = ('urllib3', 'charset_normalizer')


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the 'tgg' logger, replacing any handlers set up before.

    Args:
        log_dir: Directory for timestamped log files (default: ./logs)
        level: Logging level (default: INFO)
        log_to_file: Write a detailed log file
        log_to_console: Write short messages to stderr

    Returns:
        The 'tgg' logger

    Example:
        from tgg.logging_config import setup_logging
        logger = setup_logging(log_to_file=False)
        logger.info("Building graphic")
    """
    logger = logging.getLogger('tgg')
    logger.setLevel(level)
    logger.handlers = []

    if log_to_file:
        log_dir = Path(log_dir or 'logs')
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'tgg_{datetime.now():%Y%m%d_%H%M%S}.log'
        logger.addHandler(_handler(logging.FileHandler(log_file, encoding='utf-8'), level, FILE_FORMAT))

    if log_to_console:
        logger.addHandler(_handler(logging.StreamHandler(sys.stderr), level, CONSOLE_FORMAT))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    return logger
