"""Unit tests for logging.py"""

import logging

import pytest

from mipsync.config import Settings
from mipsync.logging import configure_logging, get_logger


@pytest.fixture(name="root_logger", autouse=True)
def root_logger_fixture():
    """Restore the mipsync logger after each test."""
    logger = logging.getLogger("mipsync")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_get_logger_is_under_mipsync():
    assert get_logger("pipeline").name == "mipsync.pipeline"
    assert get_logger("pipeline").parent is logging.getLogger("mipsync")


def test_configure_logging_console_only(root_logger):
    configure_logging(Settings())
    assert [type(h) for h in root_logger.handlers] == [logging.StreamHandler]
    assert root_logger.level == logging.INFO
    assert root_logger.propagate is False


def test_configure_logging_verbose(root_logger):
    configure_logging(Settings(), verbose=True)
    assert root_logger.level == logging.DEBUG


def test_configure_logging_replaces_handlers(root_logger, tmp_path):
    settings = Settings(log_file=str(tmp_path / "sync.log"))
    configure_logging(settings)
    configure_logging(settings)
    assert len(root_logger.handlers) == 2


def test_configure_logging_writes_log_file(tmp_path):
    path = tmp_path / "sync.log"
    configure_logging(Settings(log_file=str(path)))

    get_logger("pipeline").info("Pulled origin/master: %d tracked file(s)", 3)
    get_logger("pipeline").debug("not written at INFO")
    for handler in logging.getLogger("mipsync").handlers:
        handler.flush()

    text = path.read_text(encoding="utf-8")
    assert "INFO mipsync.pipeline: Pulled origin/master: 3 tracked file(s)" in text
    assert "not written" not in text
