"""Unit tests for logging_setup.py"""

import logging

from rich.logging import RichHandler

from mdsite.logging_setup import configure_logging


def _managed(root):
    return [h for h in root.handlers if getattr(h, "_mdsite_managed", False)]


def test_configure_logging_installs_one_handler(monkeypatch):
    monkeypatch.delenv("MDSITE_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    configure_logging()
    configure_logging()
    handlers = _managed(root)
    assert len(handlers) == 1
    assert isinstance(handlers[0], RichHandler)
    assert root.level == logging.INFO


def test_configure_logging_level_from_env(monkeypatch):
    monkeypatch.setenv("MDSITE_LOG_LEVEL", "debug")
    configure_logging()
    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_unknown_level_falls_back(monkeypatch):
    monkeypatch.setenv("MDSITE_LOG_LEVEL", "chatty")
    configure_logging()
    assert logging.getLogger().level == logging.INFO
