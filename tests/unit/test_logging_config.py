"""Tests for kill_on_startup/logging_config.py."""

import logging

import pytest

from kill_on_startup.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_console_only_without_log_dir():
    setup_logging()

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.StreamHandler)
    assert root.level == logging.INFO


def test_file_handler_under_log_dir(tmp_path):
    setup_logging("coordinator", log_dir=tmp_path / "logs")

    root = logging.getLogger()
    file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert (tmp_path / "logs" / "coordinator.log").exists()


def test_log_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("KILL_ON_STARTUP_LOG_DIR", str(tmp_path / "envlogs"))
    monkeypatch.setenv("KILL_ON_STARTUP_QUIET_CONSOLE", "1")

    setup_logging("coordinator")

    root = logging.getLogger()
    console = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]
    assert console[0].level > logging.CRITICAL
    assert (tmp_path / "envlogs" / "coordinator.log").exists()
