"""
Version store logging configuration.

This module sets up logging for the ``versionstore`` logger hierarchy and
provides helpers for statement and lock event logging.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class SafeFormatter(logging.Formatter):
    """Custom formatter that provides default values for missing fields."""

    def format(self, record):
        if not hasattr(record, 'store_context'):
            record.store_context = 'versionstore'
        return super().format(record)


def setup_store_logging(config: Dict[str, Any]) -> logging.Logger:
    """
    Setup version store logging.

    Args:
        config: Configuration dictionary with an optional ``logging`` section
            holding ``level`` and ``file``

    Returns:
        Configured ``versionstore`` logger
    """
    logging_config = config.get('logging', {})
    log_level = str(logging_config.get('level', 'INFO')).upper()

    logger = logging.getLogger('versionstore')
    logger.setLevel(getattr(logging, log_level))

    # Remove any existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = SafeFormatter(
        '%(asctime)s.%(msecs)03d - [%(store_context)s] - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    log_file = logging_config.get('file')
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Prevent propagation to root logger to avoid duplicate messages
    logger.propagate = False

    return logger


def log_statement(logger: LoggerLike, statement: str,
                  params: Optional[Dict[str, Any]] = None,
                  duration: Optional[float] = None) -> None:
    """
    Log an executed statement at DEBUG level.

    Args:
        logger: Store logger or adapter
        statement: SQL statement text
        params: Bound parameters
        duration: Execution time in seconds
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    message = f"Executed: {' '.join(statement.split())}"
    if params:
        message += f" | params={params}"
    if duration is not None:
        message += f" | {duration * 1000:.1f}ms"
    logger.debug(message)


def log_lock_event(logger: LoggerLike, event: str, details: Optional[str] = None) -> None:
    """
    Log a lock event.

    Args:
        logger: Store logger or adapter
        event: Event type ('acquired', 'released', 'skipped', 'error')
        details: Additional event details
    """
    message = f"Database lock {event}"
    if details:
        message += f": {details}"

    if event == 'error':
        logger.error(message)
    elif event == 'skipped':
        logger.debug(message)
    else:
        logger.info(message)


class StoreLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds store context to log messages.

    The context is ``<dialect>:<table>`` and is available to formatters as
    ``%(store_context)s``.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg, kwargs):
        dialect = self.extra.get('dialect', 'unknown')
        table_name = self.extra.get('table_name', 'unknown')

        if 'extra' not in kwargs:
            kwargs['extra'] = {}
        kwargs['extra']['store_context'] = f"{dialect}:{table_name}"

        return msg, kwargs

    def statement(self, statement: str, params: Optional[Dict[str, Any]] = None,
                  duration: Optional[float] = None) -> None:
        """Log an executed statement."""
        log_statement(self, statement, params, duration)

    def lock_event(self, event: str, details: Optional[str] = None) -> None:
        """Log a lock event."""
        log_lock_event(self, event, details)
