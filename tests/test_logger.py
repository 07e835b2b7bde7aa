import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator

import pytest

from apex_inventory.logger import LOGGER_NAME, setup_logger


@pytest.fixture()
def package_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


def _file_handlers(logger: logging.Logger) -> list[RotatingFileHandler]:
    return [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]


def test_repeat_calls_keep_one_console_handler(package_logger: logging.Logger) -> None:
    setup_logger()
    setup_logger("DEBUG")

    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.DEBUG


def test_file_handler_added_on_later_call(
    package_logger: logging.Logger, tmp_path: Path
) -> None:
    log_file = tmp_path / "logs" / "app.log"
    setup_logger()

    setup_logger(log_file=log_file)
    setup_logger(log_file=log_file)
    package_logger.info("Loaded 10 items")
    for handler in package_logger.handlers:
        handler.flush()

    assert len(_file_handlers(package_logger)) == 1
    assert "INFO - Loaded 10 items" in log_file.read_text(encoding="utf-8")


def test_production_console_format_has_timestamps(package_logger: logging.Logger) -> None:
    setup_logger(environment="development")
    console = package_logger.handlers[0]
    assert console.formatter is not None
    assert "asctime" not in console.formatter._fmt

    setup_logger(environment="production")

    assert package_logger.handlers == [console]
    assert "%(asctime)s" in console.formatter._fmt
