"""Logging setup for the inventory app."""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "apex_inventory"

_CONSOLE_FORMATS = {
    "development": "%(levelname)s %(message)s",
    "test": "%(levelname)s %(message)s",
    "production": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _console_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.FileHandler
        ):
            return handler
    return None


def _has_file_handler(logger: logging.Logger, log_path: Path) -> bool:
    target = os.path.abspath(log_path)
    return any(
        isinstance(handler, RotatingFileHandler) and handler.baseFilename == target
        for handler in logger.handlers
    )


def setup_logger(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    environment: str = "development",
) -> logging.Logger:
    """Configure the package logger with console and optional file output.

    Safe to call more than once. The console handler is attached once and
    its format follows ``environment`` (timestamped in production). A file
    handler is attached the first time a given ``log_file`` is passed.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    console_format = _CONSOLE_FORMATS.get(environment, _CONSOLE_FORMATS["development"])
    console_handler = _console_handler(logger)
    if console_handler is None:
        console_handler = logging.StreamHandler(sys.stdout)
        logger.addHandler(console_handler)
    console_handler.setFormatter(logging.Formatter(console_format))

    if log_file is not None and not _has_file_handler(logger, Path(log_file)):
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["LOGGER_NAME", "setup_logger"]
