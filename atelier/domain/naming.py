from __future__ import annotations

"""Naming helpers for exported files."""

import re
from datetime import datetime, timezone
from typing import Optional

from .entities import ArtifactState

_SANITIZE_PATTERN = re.compile(r"[^A-Za-z0-9_-]+")
DEFAULT_PRODUCT_PREFIX = "atelier"


def _sanitize_component(raw: str) -> str:
    """Return a sanitized token containing only `[A-Za-z0-9_-]`, collapsing sequences."""

    cleaned = _SANITIZE_PATTERN.sub("_", (raw or "").strip())
    cleaned = re.sub(r"_+", "_", cleaned).strip("_")
    cleaned = cleaned.strip("-")
    return cleaned or DEFAULT_PRODUCT_PREFIX


def _timestamp_ms(when: Optional[datetime]) -> int:
    moment = when or datetime.now(timezone.utc)
    return int(moment.timestamp() * 1000)


def make_export_filename(
    prefix: str, artifact: ArtifactState, when: Optional[datetime] = None
) -> str:
    """Compose `{productPrefix}_{timestampMs}.{ext}`; `mp4` for video, `png`/`jpg` for images."""

    return f"{_sanitize_component(prefix)}_{_timestamp_ms(when)}.{artifact.extension}"


def make_page_filename(prefix: str, when: Optional[datetime] = None, ext: str = "pdf") -> str:
    """Compose `{productPrefix}_techpack_{timestampMs}.{ext}` for printed pages."""

    return f"{_sanitize_component(prefix)}_techpack_{_timestamp_ms(when)}.{ext.lstrip('.')}"


__all__ = ["DEFAULT_PRODUCT_PREFIX", "make_export_filename", "make_page_filename"]
