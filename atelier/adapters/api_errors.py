from __future__ import annotations

import json
from typing import Any, Optional

from atelier.domain.errors import GENERIC_FAILURE_MESSAGE


class ApiError(RuntimeError):
    """Base class for remote service adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the remote service."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=status, payload=payload, context=context)


class ApiServerError(ApiError):
    """HTTP 5xx from the remote service."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=status, payload=payload, context=context)


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context)


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of the raw error body without raising.

    The body is kept string-encoded; ``extract_service_message`` decodes it.
    """
    snippet = getattr(resp, "text", "")
    if snippet:
        return snippet[:2000]
    try:
        return json.dumps(resp.json())
    except Exception:
        return None


def build_error_message(ctx: str, status: int) -> str:
    return f"{ctx}: HTTP {status}"


def _envelope_message(raw: str) -> Optional[str]:
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(parsed, dict):
        return None
    error = parsed.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def extract_service_message(error: Any) -> str:
    """Derive the user-facing message for a failed remote call.

    Order: structured ``{"error": {"message"}}`` envelope, raw error string,
    the error object's own message, generic fallback.
    """
    raw = error if isinstance(error, str) else getattr(error, "payload", None)
    if isinstance(raw, dict):
        raw = json.dumps(raw)
    if isinstance(raw, str) and raw.strip():
        envelope = _envelope_message(raw)
        if envelope:
            return envelope
        return raw.strip()
    if isinstance(error, BaseException):
        own = str(error).strip()
        if own:
            envelope = _envelope_message(own)
            return envelope or own
    return GENERIC_FAILURE_MESSAGE


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "build_error_message",
    "extract_service_message",
    "parse_error_payload",
]
