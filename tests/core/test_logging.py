from __future__ import annotations

import logging

import pytest

from easel.core.logging import setup_default_logging


def test_setup_default_logging_is_noop_when_handlers_exist(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    handler = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [handler])
    level = root.level

    setup_default_logging("DEBUG")

    assert root.handlers == [handler]
    assert root.level == level


def test_setup_default_logging_configures_root_once(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", logging.WARNING)

    setup_default_logging("debug")

    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
