"""Thin web-facing viewmodels for NiceGUI bindings.

These viewmodels hold browser form state and translate to/from existing core
viewmodels without adding I/O or orchestration logic.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any, Dict, Mapping

from atelier.viewmodels.settings_vm import SettingsConfig, SettingsVM


_DEFAULTS = SettingsConfig()


def _as_int(value: Any, default: int) -> int:
    """Convert mixed values to int with deterministic fallback."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


@dataclass
class WebSettingsVM:
    """Browser-editable settings projection for NiceGUI forms."""

    api_key: str = ""
    api_base_url: str = _DEFAULTS.api_base_url
    image_model: str = _DEFAULTS.image_model
    video_model: str = _DEFAULTS.video_model
    request_timeout_s: int = _DEFAULTS.request_timeout_s
    video_timeout_s: int = _DEFAULTS.video_timeout_s
    video_poll_interval_s: int = _DEFAULTS.video_poll_interval_s
    export_dir: str = _DEFAULTS.export_dir
    product_prefix: str = _DEFAULTS.product_prefix
    debug_logging: bool = False

    @classmethod
    def from_settings_vm(cls, settings_vm: SettingsVM) -> "WebSettingsVM":
        """Build browser form state from the core ``SettingsVM`` snapshot."""
        return cls.from_payload(settings_vm.to_dict())

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WebSettingsVM":
        """Build browser form state from a payload shaped like ``SettingsVM.to_dict``."""
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping.")
        return cls(
            api_key=str(payload.get("api_key") or ""),
            api_base_url=str(payload.get("api_base_url") or _DEFAULTS.api_base_url),
            image_model=str(payload.get("image_model") or _DEFAULTS.image_model),
            video_model=str(payload.get("video_model") or _DEFAULTS.video_model),
            request_timeout_s=_as_int(payload.get("request_timeout_s"), _DEFAULTS.request_timeout_s),
            video_timeout_s=_as_int(payload.get("video_timeout_s"), _DEFAULTS.video_timeout_s),
            video_poll_interval_s=_as_int(
                payload.get("video_poll_interval_s"), _DEFAULTS.video_poll_interval_s
            ),
            export_dir=str(payload.get("export_dir") or "."),
            product_prefix=str(payload.get("product_prefix") or _DEFAULTS.product_prefix),
            debug_logging=bool(payload.get("debug_logging")),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize browser form state using ``SettingsVM`` payload shape."""
        return {
            "api_key": str(self.api_key or "").strip(),
            "api_base_url": str(self.api_base_url or _DEFAULTS.api_base_url),
            "image_model": str(self.image_model or _DEFAULTS.image_model),
            "video_model": str(self.video_model or _DEFAULTS.video_model),
            "request_timeout_s": _as_int(self.request_timeout_s, _DEFAULTS.request_timeout_s),
            "video_timeout_s": _as_int(self.video_timeout_s, _DEFAULTS.video_timeout_s),
            "video_poll_interval_s": _as_int(self.video_poll_interval_s, _DEFAULTS.video_poll_interval_s),
            "export_dir": str(self.export_dir or "."),
            "product_prefix": str(self.product_prefix or _DEFAULTS.product_prefix),
            "debug_logging": bool(self.debug_logging),
        }

    def apply_to_settings_vm(self, settings_vm: SettingsVM) -> None:
        """Push browser form values into the core settings viewmodel."""
        settings_vm.apply_dict(self.to_payload())


def parse_settings_json(text: str) -> Dict[str, Any]:
    """Parse imported settings JSON into a mapping payload."""
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Imported settings must be a JSON object.")
    return dict(raw)
