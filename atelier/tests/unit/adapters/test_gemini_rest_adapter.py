from __future__ import annotations

import base64
import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from atelier.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    extract_service_message,
)
from atelier.adapters.gemini_rest import GeminiRestAdapter
from atelier.domain.entities import ArtifactState

_BASE = "https://example.test/v1beta"
_SOURCE = ArtifactState(payload=b"source-bytes", mime_type="image/jpeg")


class _FakeResponse:
    def __init__(
        self,
        status_code: int,
        payload: Any = None,
        *,
        text: str = "",
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = content
        self.headers = headers or {}

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class _FakeSession:
    def __init__(self, responses: List[_FakeResponse]) -> None:
        self._responses = list(responses)
        self.calls: List[Tuple[str, str, Any]] = []

    def post(self, url: str, *, json_body: Any = None, timeout: Any = None) -> _FakeResponse:
        self.calls.append(("POST", url, json_body))
        return self._responses.pop(0)

    def get(
        self,
        url: str,
        *,
        params: Any = None,
        accept: str = "application/json",
        timeout: Any = None,
    ) -> _FakeResponse:
        self.calls.append(("GET", url, accept))
        return self._responses.pop(0)


class _ManualClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def _adapter(responses: List[_FakeResponse], clock: Optional[_ManualClock] = None, **kwargs: Any):
    clock = clock or _ManualClock()
    adapter = GeminiRestAdapter(
        "key-123",
        base_url=_BASE + "/",
        image_model="img-model",
        video_model="vid-model",
        sleep=clock.sleep,
        clock=clock,
        **kwargs,
    )
    session = _FakeSession(responses)
    adapter.session = session
    return adapter, session


def _image_answer(data: bytes, mime: str = "image/png") -> Dict[str, Any]:
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here you go"},
                        {"inlineData": {"mimeType": mime, "data": base64.b64encode(data).decode()}},
                    ]
                }
            }
        ]
    }


def test_requires_api_key() -> None:
    with pytest.raises(ValueError):
        GeminiRestAdapter("  ")


def test_transform_image_posts_inline_source_and_instruction() -> None:
    adapter, session = _adapter([_FakeResponse(200, _image_answer(b"edited"))])

    result = adapter.transform_image(_SOURCE, "Remove background")

    assert result == ArtifactState(b"edited", "image/png")
    method, url, body = session.calls[0]
    assert method == "POST"
    assert url == f"{_BASE}/models/img-model:generateContent"
    parts = body["contents"][0]["parts"]
    assert parts[0]["inlineData"] == {
        "mimeType": "image/jpeg",
        "data": base64.b64encode(b"source-bytes").decode(),
    }
    assert parts[1] == {"text": "Remove background"}


def test_transform_image_without_image_part_reports_model_text() -> None:
    answer = {"candidates": [{"content": {"parts": [{"text": "I cannot do that"}]}}]}
    adapter, _ = _adapter([_FakeResponse(200, answer)])

    with pytest.raises(ApiError) as excinfo:
        adapter.transform_image(_SOURCE, "x")

    assert str(excinfo.value) == "The model returned no image: I cannot do that"


def test_transform_image_blocked_prompt() -> None:
    adapter, _ = _adapter([_FakeResponse(200, {"promptFeedback": {"blockReason": "SAFETY"}})])

    with pytest.raises(ApiError, match="SAFETY"):
        adapter.transform_image(_SOURCE, "x")


def test_client_error_keeps_envelope_text_for_message_extraction() -> None:
    body = json.dumps({"error": {"code": 400, "message": "API key not valid."}})
    adapter, _ = _adapter([_FakeResponse(400, text=body)])

    with pytest.raises(ApiClientError) as excinfo:
        adapter.transform_image(_SOURCE, "x")

    assert excinfo.value.status == 400
    assert extract_service_message(excinfo.value) == "API key not valid."


def test_server_error_is_typed() -> None:
    adapter, _ = _adapter([_FakeResponse(503, text="overloaded")])

    with pytest.raises(ApiServerError) as excinfo:
        adapter.transform_image(_SOURCE, "x")

    assert extract_service_message(excinfo.value) == "overloaded"


def test_generate_video_polls_until_done_then_downloads() -> None:
    clock = _ManualClock()
    done = {
        "name": "models/vid-model/operations/op1",
        "done": True,
        "response": {
            "generateVideoResponse": {
                "generatedSamples": [{"video": {"uri": "https://files.test/video.mp4"}}]
            }
        },
    }
    adapter, session = _adapter(
        [
            _FakeResponse(200, {"name": "models/vid-model/operations/op1"}),
            _FakeResponse(200, {"name": "models/vid-model/operations/op1", "done": False}),
            _FakeResponse(200, done),
            _FakeResponse(200, content=b"mp4-bytes", headers={"Content-Type": "video/mp4; codecs=avc1"}),
        ],
        clock=clock,
        poll_interval_s=5,
    )

    video = adapter.generate_video("catwalk", _SOURCE)

    assert video == ArtifactState(b"mp4-bytes", "video/mp4")
    assert clock.sleeps == [5.0, 5.0]
    start = session.calls[0]
    assert start[1] == f"{_BASE}/models/vid-model:predictLongRunning"
    instance = start[2]["instances"][0]
    assert instance["prompt"] == "catwalk"
    assert instance["image"]["mimeType"] == "image/jpeg"
    assert session.calls[1][1] == f"{_BASE}/models/vid-model/operations/op1"
    assert session.calls[3] == ("GET", "https://files.test/video.mp4", "*/*")


def test_generate_video_decodes_inline_sample() -> None:
    done = {
        "done": True,
        "response": {"videos": [{"bytesBase64Encoded": base64.b64encode(b"v").decode()}]},
    }
    adapter, session = _adapter([_FakeResponse(200, done)])

    video = adapter.generate_video("prompt")

    assert video == ArtifactState(b"v", "video/mp4")
    assert "image" not in session.calls[0][2]["instances"][0]


def test_generate_video_times_out() -> None:
    pending = {"name": "operations/op2", "done": False}
    adapter, _ = _adapter(
        [_FakeResponse(200, pending)] + [_FakeResponse(200, pending) for _ in range(5)],
        video_timeout_s=20,
        poll_interval_s=10,
    )

    with pytest.raises(ApiTimeoutError, match="timed out after 20s"):
        adapter.generate_video("prompt")


def test_generate_video_operation_error_surfaces_service_message() -> None:
    failed = {"name": "operations/op3", "done": True, "error": {"code": 3, "message": "Prompt rejected."}}
    adapter, _ = _adapter([_FakeResponse(200, failed)])

    with pytest.raises(ApiError) as excinfo:
        adapter.generate_video("prompt")

    assert extract_service_message(excinfo.value) == "Prompt rejected."
