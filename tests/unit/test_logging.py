"""Tests for logging setup."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from trustgate.config import get_settings
from trustgate.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    handlers = list(logging.root.handlers)
    level = logging.root.level
    get_settings.cache_clear()
    yield
    for handler in logging.root.handlers:
        if handler not in handlers:
            handler.close()
    logging.root.handlers = handlers
    logging.root.setLevel(level)
    get_settings.cache_clear()


class TestSetupLogging:
    def test_console_only(self, monkeypatch):
        monkeypatch.setenv("LOG_TO_FILE", "false")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        setup_logging()
        assert not any(isinstance(h, RotatingFileHandler) for h in logging.root.handlers)
        assert any(h.level == logging.DEBUG for h in logging.root.handlers)

    def test_file_logging(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOG_TO_FILE", "true")
        monkeypatch.setenv("LOG_DIRECTORY", str(tmp_path / "logs"))
        setup_logging()
        file_handlers = [h for h in logging.root.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert (tmp_path / "logs").is_dir()

    def test_aiohttp_access_log_quieted(self, monkeypatch):
        monkeypatch.setenv("LOG_TO_FILE", "false")
        setup_logging()
        assert logging.getLogger("aiohttp.access").level == logging.WARNING


class TestGetLogger:
    def test_returns_usable_logger(self):
        log = get_logger("trustgate.test")
        log.info("test_event", key="value")
