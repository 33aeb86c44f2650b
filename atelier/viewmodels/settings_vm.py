from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional

from ..domain.naming import DEFAULT_PRODUCT_PREFIX
from ..utils.logging import env_requests_debug

SETTINGS_KEY = "settings"
DEFAULT_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via the preference port."""

    api_base_url: str = DEFAULT_API_BASE_URL
    image_model: str = "gemini-2.5-flash-image"
    video_model: str = "veo-3.0-fast-generate-001"
    request_timeout_s: int = 120
    video_timeout_s: int = 600
    video_poll_interval_s: int = 10
    export_dir: str = "."
    product_prefix: str = DEFAULT_PRODUCT_PREFIX


def _default_debug_logging() -> bool:
    return env_requests_debug()


class SettingsVM:
    """Keeps studio settings UI state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save

        self.api_key: str = ""
        self.debug_logging: bool = _default_debug_logging()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def api_base_url(self) -> str:
        return self.config.api_base_url

    @api_base_url.setter
    def api_base_url(self, value: str) -> None:
        self.config = replace(self.config, api_base_url=self._coerce_url(value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: int) -> None:
        coerced = self._coerce_int("request_timeout_s", value, minimum=1)
        self.config = replace(self.config, request_timeout_s=coerced)

    @property
    def video_timeout_s(self) -> int:
        return self.config.video_timeout_s

    @video_timeout_s.setter
    def video_timeout_s(self, value: int) -> None:
        coerced = self._coerce_int("video_timeout_s", value, minimum=1)
        self.config = replace(self.config, video_timeout_s=coerced)

    @property
    def export_dir(self) -> str:
        return self.config.export_dir

    @export_dir.setter
    def export_dir(self, value: str) -> None:
        self.config = replace(self.config, export_dir=self._coerce_dir(value))

    @property
    def product_prefix(self) -> str:
        return self.config.product_prefix

    @product_prefix.setter
    def product_prefix(self, value: str) -> None:
        self.config = replace(self.config, product_prefix=self._coerce_prefix(value))

    # ------------------------------------------------------------------
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    def is_valid(self) -> bool:
        if not self.config.image_model or not self.config.video_model:
            return False
        if self.config.video_poll_interval_s > self.config.video_timeout_s:
            return False
        return True

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_flat_keys = {
            *SettingsConfig.__annotations__.keys(),
            "api_key",
            "debug_logging",
        }

        unknown = set(payload.keys()) - allowed_flat_keys
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates: Dict[str, Any] = {}
        for cfg_key in SettingsConfig.__annotations__.keys():
            if cfg_key in payload:
                updates[cfg_key] = self._coerce_config_value(cfg_key, payload[cfg_key])

        if updates:
            self.config = replace(self.config, **updates)

        if "api_key" in payload:
            self.api_key = self._coerce_optional_str(payload["api_key"])

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot.update(
            {
                "api_key": self.api_key,
                "debug_logging": bool(self.debug_logging),
            }
        )
        return snapshot

    def set_api_key(self, value: str) -> None:
        self.api_key = self._coerce_optional_str(value)

    def set_debug_logging(self, enabled: bool) -> None:
        self.debug_logging = self._coerce_bool(enabled)

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key == "api_base_url":
            return self._coerce_url(raw)
        if key in {"image_model", "video_model"}:
            return self._coerce_required_str(key, raw)
        if key in {"request_timeout_s", "video_timeout_s", "video_poll_interval_s"}:
            return self._coerce_int(key, raw, minimum=1)
        if key == "export_dir":
            return self._coerce_dir(raw)
        if key == "product_prefix":
            return self._coerce_prefix(raw)
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_url(value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("api_base_url must be a string.")
        normalized = value.strip().rstrip("/")
        if not normalized.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://.")
        return normalized

    @staticmethod
    def _coerce_dir(value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("export_dir must be a string path.")
        normalized = value.strip() or "."
        return normalized

    @staticmethod
    def _coerce_prefix(value: Any) -> str:
        if value is None:
            return DEFAULT_PRODUCT_PREFIX
        return str(value).strip() or DEFAULT_PRODUCT_PREFIX

    @staticmethod
    def _coerce_required_str(name: str, value: Any) -> str:
        text = "" if value is None else str(value).strip()
        if not text:
            raise ValueError(f"{name} must not be empty.")
        return text

    @staticmethod
    def _coerce_optional_str(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, minimum: Optional[int] = None) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if minimum is not None and coerced < minimum:
            raise ValueError(f"{name} must be at least {minimum}.")
        return coerced


def default_settings_payload() -> dict:
    """Return a fresh snapshot containing the default settings payload."""
    return SettingsVM().to_dict()
