"""Tests for logging setup."""

import logging

import pytest

from logger import LOGGER_NAME, setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    log = logging.getLogger(LOGGER_NAME)
    handlers, level = list(log.handlers), log.level
    yield
    for handler in log.handlers:
        handler.close()
    log.handlers = handlers
    log.setLevel(level)


def test_level_from_name(tmp_path):
    log = setup_logging(level="DEBUG", log_dir=tmp_path, console=False)
    assert log.level == logging.DEBUG


def test_unknown_level_falls_back_to_info():
    log = setup_logging(level="CHATTY", log_dir=None, console=False)
    assert log.level == logging.INFO


def test_writes_dated_file(tmp_path):
    log = setup_logging(level="INFO", log_dir=tmp_path, console=False)

    log.info("reminder armed")
    for handler in log.handlers:
        handler.flush()

    files = list(tmp_path.glob("*.log"))
    assert len(files) == 1
    assert "reminder armed" in files[0].read_text(encoding="utf-8")


def test_without_file_or_console_has_no_handlers():
    log = setup_logging(level="INFO", log_dir=None, console=False)
    assert log.handlers == []


def test_console_handler():
    log = setup_logging(level="INFO", log_dir=None, console=True)
    assert [type(h) for h in log.handlers] == [logging.StreamHandler]
