from __future__ import annotations

import json
from typing import Any, MutableMapping, Optional

from atelier.domain.ports import PreferencePort


class MappingPreferences(PreferencePort):
    """Preference store backed by any mutable mapping.

    Backs the in-memory store of ``atelier-web --ephemeral`` and the tests,
    both with a plain dict. Values are copied through JSON so callers can
    never mutate the stored state in place and non-serializable values fail
    early, like they would with ``StorageLocal``.
    """

    def __init__(self, mapping: Optional[MutableMapping[str, Any]] = None, *, namespace: str = "") -> None:
        self.mapping: MutableMapping[str, Any] = mapping if mapping is not None else {}
        self.namespace = namespace

    def _key(self, name: str) -> str:
        return f"{self.namespace}{name}"

    def get(self, name: str, default: Any = None) -> Any:
        key = self._key(name)
        if key not in self.mapping:
            return default
        return json.loads(json.dumps(self.mapping[key]))

    def set(self, name: str, value: Any) -> None:
        self.mapping[self._key(name)] = json.loads(json.dumps(value))


__all__ = ["MappingPreferences"]
