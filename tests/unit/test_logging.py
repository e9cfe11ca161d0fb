"""Unit tests for logging configuration."""

import logging

import pytest

from rssbrief.utils.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_file_output_writes_records(tmp_path):
    log_file = tmp_path / "logs" / "rssbrief.log"
    configure_logging(level="debug", output="file", file_path=str(log_file), log_format="text")

    get_logger("rssbrief.test").debug("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    contents = log_file.read_text(encoding="utf-8")
    assert "DEBUG | rssbrief.test | hello from test" in contents


def test_stdout_output_single_handler():
    configure_logging(level="WARNING", output="stdout")
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.StreamHandler)


def test_module_level_override():
    configure_logging(level="ERROR", output="stdout", module="rssbrief.fetchers")
    assert logging.getLogger("rssbrief.fetchers").level == logging.ERROR
    logging.getLogger("rssbrief.fetchers").setLevel(logging.NOTSET)
