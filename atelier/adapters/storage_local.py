from __future__ import annotations
import json, os, tempfile
from typing import Any, Dict

from atelier.domain.ports import PreferencePort


class StorageLocal(PreferencePort):
    """Local filesystem storage for named user preferences (one JSON object)."""

    FILENAME = "preferences.json"

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir

    @property
    def path(self) -> str:
        return os.path.join(self.root, self.FILENAME)

    # ---- PreferencePort ----
    def get(self, name: str, default: Any = None) -> Any:
        return self._load().get(name, default)

    def set(self, name: str, value: Any) -> None:
        data = self._load()
        data[name] = value
        self._dump(data)

    # ---- JSON file ----
    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Corrupt preferences file: {self.path}") from exc
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, Any]) -> None:
        os.makedirs(self.root, exist_ok=True)
        # temp file + atomic replace
        fd, tmp_path = tempfile.mkstemp(prefix="preferences_", suffix=".tmp", dir=self.root)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
