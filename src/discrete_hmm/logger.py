"""
Logging for the discrete HMM engine.

Every package logger lives below ``discrete_hmm``, which owns the handlers:
a console stream on stdout and, when requested, a single log file. Level,
format and file target come from the ``logging`` configuration section; the
CLI adjusts them per invocation.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

from .config import get_config

ROOT_LOGGER_NAME = 'discrete_hmm'
DEFAULT_LOG_FILE = 'discrete_hmm.log'


def _package_logger() -> logging.Logger:
    return logging.getLogger(ROOT_LOGGER_NAME)


def _is_console(handler: logging.Handler) -> bool:
    # FileHandler subclasses StreamHandler
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def _formatter() -> logging.Formatter:
    return logging.Formatter(get_config('logging', 'format'))


def get_logger(name: str = 'main') -> logging.Logger:
    """
    Logger for a package component.

    Module names (``__name__``) are used as given; short names such as
    ``'cli'`` are placed under the package logger.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f'{ROOT_LOGGER_NAME}.{name}'
    return logging.getLogger(name)


def set_log_level(level: Union[str, int]) -> None:
    """Set the level of the package logger and all of its handlers."""
    if isinstance(level, str):
        resolved = getattr(logging, level.upper(), None)
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    root = _package_logger()
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def enable_file_logging(log_file: Optional[str] = None) -> Path:
    """
    Mirror log output into ``log_file`` (default: logging.log_file).

    An existing file handler for another path is replaced; one for the same
    path is kept.

    Returns:
        Path of the active log file
    """
    path = Path(log_file or get_config('logging', 'log_file') or DEFAULT_LOG_FILE)
    root = _package_logger()

    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(path):
            return path

    disable_file_logging()
    path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(path)
    file_handler.setLevel(root.level)
    file_handler.setFormatter(_formatter())
    root.addHandler(file_handler)
    return path


def disable_file_logging() -> None:
    """Detach and close every file handler."""
    root = _package_logger()
    for handler in [h for h in root.handlers if isinstance(h, logging.FileHandler)]:
        root.removeHandler(handler)
        handler.close()


def configure_logging() -> logging.Logger:
    """
    Apply the ``logging`` configuration section to the package logger.

    Safe to call repeatedly: the console handler is created once and only
    reformatted afterwards, and the file handler follows
    ``logging.file_logging``.
    """
    root = _package_logger()
    root.propagate = False

    if not any(_is_console(h) for h in root.handlers):
        root.addHandler(logging.StreamHandler(sys.stdout))

    if get_config('logging', 'file_logging'):
        enable_file_logging(get_config('logging', 'log_file'))
    else:
        disable_file_logging()

    formatter = _formatter()
    for handler in root.handlers:
        handler.setFormatter(formatter)

    set_log_level(get_config('logging', 'level') or 'INFO')
    return root


configure_logging()
