"""Application logging: a rotating ``app.log`` plus console output.

Console records below ERROR go to stdout; ERROR and above go to stderr so a
CI log shows failures on the error stream alongside the CLI's own message.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from .settings import _log_dir


LOGGER_NAME = "draftimages"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ERROR_HANDLER_NAME = "draftimages.stderr"

_LOGGER: logging.Logger | None = None


class _BelowLevel(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def configure_logger(logger: logging.Logger, log_dir: Path, level: int = logging.INFO) -> logging.Logger:
    """Attach the file and console handlers to ``logger``, replacing any it had."""

    log_dir.mkdir(parents=True, exist_ok=True)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = RotatingFileHandler(
        log_dir / "app.log", maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(fmt)
    logger.addHandler(file_handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(fmt)
    console.addFilter(_BelowLevel(logging.ERROR))
    logger.addHandler(console)

    errors = logging.StreamHandler(sys.stderr)
    errors.setFormatter(fmt)
    errors.set_name(ERROR_HANDLER_NAME)
    errors.setLevel(logging.ERROR)
    logger.addHandler(errors)

    set_level(level, logger)
    return logger


def set_level(level: int | str, logger: logging.Logger | None = None) -> int:
    """Apply ``level`` to the logger and its file and stdout handlers.

    Accepts a level number or name (``"debug"``, ``"WARNING"``...). The stderr
    handler never drops below ERROR. Raises ``ValueError`` on unknown names.
    """

    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level: {level}")
    else:
        value = level

    target = logger or get_logger()
    target.setLevel(value)
    for handler in target.handlers:
        if handler.get_name() == ERROR_HANDLER_NAME:
            handler.setLevel(max(value, logging.ERROR))
        else:
            handler.setLevel(value)
    return value


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the application logger writing to <log dir>/app.log.

    Configured once per process; later calls return the same logger.
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    base = _log_dir() if log_dir is None else Path(log_dir)
    _LOGGER = configure_logger(logging.getLogger(LOGGER_NAME), base)
    return _LOGGER
