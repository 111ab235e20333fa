"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from fintrack.config import TestConfig
from fintrack.constants.categories import Category
from fintrack.logging_config import ROOT_LOGGER_NAME, JSONFormatter, get_logger, setup_logging
from fintrack.models.transaction import TransactionType


@pytest.fixture(autouse=True)
def _detach_handlers():
    yield
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()


def _record(level=logging.INFO, msg="Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits the core record fields."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(logging.ERROR, "Error occurred", exc_info))
    )

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"]


def test_json_formatter_keeps_extra_fields():
    record = _record()
    record.transaction_id = "abc123"
    record.category = "Farmácia"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"transaction_id": "abc123", "category": "Farmácia"}


def test_json_formatter_writes_enum_values():
    record = _record()
    record.category = Category.FARMACIA
    record.kinds = {TransactionType.EXPENSE}

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"category": "Farmácia", "kinds": ["expense"]}


def test_setup_logging(tmp_path):
    """Logging setup writes JSON lines to a rotating file under the data dir."""
    config = TestConfig(tmp_path)
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "fintrack"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "fintrack.log"
    assert log_file.exists()

    get_logger("ledger").warning("Test warning message")
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert len(lines) >= 2
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "fintrack.ledger"


def test_setup_logging_is_idempotent(tmp_path):
    config = TestConfig(tmp_path)

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger():
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")

    assert logger1.name == "fintrack.module1"
    assert logger2.name == "fintrack.module2"
    assert logger1 != logger2


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, dev_mode):
    """Console level drops to WARNING outside dev mode."""
    config = TestConfig(tmp_path)
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected
