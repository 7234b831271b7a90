"""Logging setup for promoted_demo.

Diagnostics go to stderr so stdout carries only the banner and the ranked
results. LOG_LEVEL, LOG_FORMAT and LOG_FILE come from the configuration
sources; the file, when set, rotates.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from promoted_demo.infrastructure.config.settings import get_config, load_configuration

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3


def resolve_log_level(level_name: Optional[str], default: int = DEFAULT_LOG_LEVEL) -> int:
    """Maps a level name such as 'debug' to its logging constant."""
    if not level_name:
        return default
    level = logging.getLevelName(str(level_name).upper())
    return level if isinstance(level, int) else default


def build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    """Creates the stderr handler plus a rotating file handler if requested.

    Raises:
        OSError: If the log file cannot be opened.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(RotatingFileHandler(
            log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding='utf-8'
        ))
    return handlers


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
) -> None:
    """Replaces the root logger's handlers with the application's.

    An unwritable log file leaves stderr logging in place and is reported there.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    file_error = None
    try:
        handlers = build_handlers(log_file)
    except OSError as e:
        file_error = e
        handlers = build_handlers(None)

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if file_error is not None:
        logging.warning(f"Cannot write log file {log_file}: {file_error}")
    logging.debug(f"Logging configured. Level={logging.getLevelName(log_level)}, file={log_file or 'none'}")


def configure_logging(verbose: bool = False) -> None:
    """Applies logging settings from configuration; verbose forces DEBUG."""
    load_configuration()
    log_level = logging.DEBUG if verbose else resolve_log_level(get_config('LOG_LEVEL'))
    setup_logging(
        log_level=log_level,
        log_format=get_config('LOG_FORMAT', DEFAULT_LOG_FORMAT),
        log_file=get_config('LOG_FILE'),
    )
