from __future__ import annotations

import logging

from atelier.utils import logging as log_utils


def test_env_level_overrides_gui_toggle(monkeypatch) -> None:
    monkeypatch.setenv("ATELIER_LOG_LEVEL", "WARNING")
    monkeypatch.delenv("ATELIER_DEBUG", raising=False)

    assert log_utils.apply_gui_preferences(True) == logging.WARNING
    assert not log_utils.env_requests_debug()


def test_debug_flag_forces_debug(monkeypatch) -> None:
    monkeypatch.delenv("ATELIER_LOG_LEVEL", raising=False)
    monkeypatch.setenv("ATELIER_DEBUG", "yes")

    assert log_utils.env_requests_debug()
    assert log_utils.apply_gui_preferences(False) == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.INFO


def test_gui_toggle_without_env(monkeypatch) -> None:
    monkeypatch.delenv("ATELIER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ATELIER_DEBUG", raising=False)

    assert log_utils.apply_gui_preferences(True) == logging.DEBUG
    assert log_utils.apply_gui_preferences(False) == logging.INFO
    assert log_utils.level_name(logging.INFO) == "INFO"
