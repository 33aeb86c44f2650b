from __future__ import annotations

import pytest

from atelier.viewmodels.settings_vm import SettingsVM, default_settings_payload


def test_apply_dict_round_trips_to_dict() -> None:
    saved = []
    vm = SettingsVM(on_save=saved.append)

    vm.apply_dict(
        {
            "api_key": "  secret ",
            "api_base_url": "https://proxy.test/v1/",
            "request_timeout_s": "30",
            "video_timeout_s": 300,
            "export_dir": "  ",
            "product_prefix": "summer",
            "debug_logging": "yes",
        }
    )
    vm.cmd_save()

    payload = saved[-1]
    assert payload["api_key"] == "secret"
    assert payload["api_base_url"] == "https://proxy.test/v1"
    assert payload["request_timeout_s"] == 30
    assert payload["video_timeout_s"] == 300
    assert payload["export_dir"] == "."
    assert payload["product_prefix"] == "summer"
    assert payload["debug_logging"] is True
    assert vm.has_api_key()


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported settings keys: theme"):
        SettingsVM().apply_dict({"theme": "dark"})


def test_invalid_values_are_rejected() -> None:
    vm = SettingsVM()

    with pytest.raises(ValueError):
        vm.apply_dict({"api_base_url": "ftp://nope"})
    with pytest.raises(ValueError):
        vm.apply_dict({"request_timeout_s": 0})
    with pytest.raises(ValueError):
        vm.apply_dict({"image_model": " "})


def test_poll_interval_longer_than_timeout_blocks_save() -> None:
    vm = SettingsVM()
    vm.apply_dict({"video_timeout_s": 5, "video_poll_interval_s": 10})

    assert not vm.is_valid()
    with pytest.raises(ValueError, match="Settings invalid"):
        vm.cmd_save()


def test_default_payload_has_no_key(monkeypatch) -> None:
    monkeypatch.delenv("ATELIER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ATELIER_DEBUG", raising=False)

    payload = default_settings_payload()

    assert payload["api_key"] == ""
    assert payload["debug_logging"] is False
    assert payload["request_timeout_s"] == 120
    assert payload["video_timeout_s"] == 600
