"""
Logging configuration for sigcalc.

Every module logs into the 'sigcalc' logger tree:

    from sigcalc.logging import get_logger
    logger = get_logger(__name__)

The command line entry point calls setup_logging() once. Level and log file
fall back to the 'log_level' and 'log_file' settings (see core.settings).
"""

import logging
import sys
from typing import Optional

DEFAULT_LOG_FILE = '/tmp/sigcalc_debug.log'

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

LOG_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


def level_name(level: str) -> str:
    """Normalize a level name to upper case.

    Raises:
        ValueError: the name is not one of LOG_LEVELS
    """
    name = str(level).upper()
    if name not in LOG_LEVELS:
        raise ValueError(
            f"Unknown log level {level!r} (expected one of {', '.join(LOG_LEVELS)})")
    return name


def _add_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    handler.setLevel(logger.level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    console: bool = False
) -> None:
    """
    Configure the 'sigcalc' logger, replacing any earlier configuration.

    Args:
        level: Log level name; None uses the 'log_level' setting
        log_file: File for DEBUG/INFO output ('' disables it); None uses the
            'log_file' setting
        console: If True, also log to stderr
    """
    if level is None or log_file is None:
        from .core.settings import load_settings
        settings = load_settings()
        if level is None:
            level = settings['log_level']
        if log_file is None:
            log_file = settings['log_file']

    name = level_name(level)
    logger = logging.getLogger('sigcalc')
    logger.setLevel(getattr(logging, name))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Warnings and errors are short-lived CLI output; only trace levels go to a file
    if logger.level <= logging.INFO and log_file:
        _add_handler(logger, logging.FileHandler(log_file, mode='w'))
    if console:
        _add_handler(logger, logging.StreamHandler(sys.stderr))
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.debug(f"Logging configured: level={name}, log_file={log_file!r}, console={console}")


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, parented under 'sigcalc'."""
    if name.startswith('sigcalc'):
        return logging.getLogger(name)
    return logging.getLogger(f'sigcalc.{name}')
