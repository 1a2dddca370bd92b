from __future__ import annotations

import logging

import pytest
from pythonjsonlogger import jsonlogger

from roster_browser.logging_config import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_is_default(restore_root_logger, monkeypatch):
    monkeypatch.delenv("ROSTER_BROWSER_LOG_FORMAT", raising=False)
    monkeypatch.delenv("ROSTER_BROWSER_LOG_LEVEL", raising=False)

    configure_logging()

    root = restore_root_logger
    assert root.level == logging.INFO
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert logging.getLogger("httpx").level == logging.WARNING


def test_plain_format_and_env_level(restore_root_logger, monkeypatch):
    monkeypatch.setenv("ROSTER_BROWSER_LOG_FORMAT", "plain")
    monkeypatch.setenv("ROSTER_BROWSER_LOG_LEVEL", "debug")

    configure_logging()

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert not isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)


def test_force_format_wins_over_env(restore_root_logger, monkeypatch):
    monkeypatch.setenv("ROSTER_BROWSER_LOG_FORMAT", "plain")

    configure_logging(level=logging.WARNING, force_format="json")

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
