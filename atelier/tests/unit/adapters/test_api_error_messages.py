from __future__ import annotations

import json

from atelier.adapters.api_errors import (
    ApiClientError,
    ApiError,
    build_error_message,
    extract_service_message,
    parse_error_payload,
)
from atelier.domain.errors import GENERIC_FAILURE_MESSAGE


class _Resp:
    def __init__(self, text: str = "", payload=None) -> None:
        self.text = text
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_envelope_message_wins() -> None:
    raw = json.dumps({"error": {"message": "Quota exceeded"}})
    err = ApiClientError("ctx: HTTP 429", status=429, payload=raw)

    assert extract_service_message(err) == "Quota exceeded"
    assert extract_service_message(raw) == "Quota exceeded"


def test_raw_string_used_when_not_an_envelope() -> None:
    assert extract_service_message("  upstream exploded ") == "upstream exploded"
    assert extract_service_message(ApiError("ignored", payload="body text")) == "body text"


def test_exception_message_used_without_payload() -> None:
    assert extract_service_message(RuntimeError("boom")) == "boom"


def test_generic_fallback() -> None:
    assert extract_service_message(None) == GENERIC_FAILURE_MESSAGE
    assert extract_service_message(RuntimeError("")) == GENERIC_FAILURE_MESSAGE


def test_parse_error_payload_prefers_text() -> None:
    assert parse_error_payload(_Resp(text="x" * 3000)) == "x" * 2000
    assert parse_error_payload(_Resp(payload={"a": 1})) == '{"a": 1}'
    assert parse_error_payload(_Resp()) is None
    assert build_error_message("transform_image", 500) == "transform_image: HTTP 500"
