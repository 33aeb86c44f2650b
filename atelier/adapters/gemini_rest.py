"""REST adapter implementing the image-edit and video-generation ports.

Talks to the Gemini REST API (``generativelanguage.googleapis.com``):

- image edits: ``POST /models/{image_model}:generateContent`` with the source
  image as inline data plus the instruction text; the first inline image part
  of the answer becomes the new artifact.
- video: ``POST /models/{video_model}:predictLongRunning`` followed by polling
  ``GET /{operation}`` until ``done``, then a download of the sample URI.

Non-2xx answers raise ``ApiClientError``/``ApiServerError`` carrying the raw
body text, i.e. the string-encoded ``{"error": {"message": ...}}`` envelope.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from atelier.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    build_error_message,
    parse_error_payload,
)
from atelier.adapters.http_client import HttpConfig, RetryingSession
from atelier.domain.entities import ArtifactState
from atelier.domain.ports import TransformPort, VideoPort

LOGGER = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_VIDEO_MODEL = "veo-3.0-fast-generate-001"
_DEFAULT_VIDEO_MIME = "video/mp4"


class GeminiRestAdapter(TransformPort, VideoPort):
    """HTTP adapter for Gemini image edits and Veo video generation."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        video_model: str = DEFAULT_VIDEO_MODEL,
        request_timeout_s: int = 120,
        video_timeout_s: int = 600,
        poll_interval_s: float = 10.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not str(api_key or "").strip():
            raise ValueError("GeminiRestAdapter requires an API key")
        self.base_url = str(base_url or DEFAULT_API_BASE_URL).rstrip("/")
        self.image_model = image_model or DEFAULT_IMAGE_MODEL
        self.video_model = video_model or DEFAULT_VIDEO_MODEL
        self.video_timeout_s = int(video_timeout_s)
        self.poll_interval_s = float(poll_interval_s)
        self.cfg = HttpConfig(
            request_timeout_s=int(request_timeout_s),
            download_timeout_s=int(request_timeout_s),
        )
        self.session = RetryingSession(str(api_key).strip(), self.cfg)
        self._sleep = sleep
        self._clock = clock

    # ---------- TransformPort ----------

    def transform_image(self, source: ArtifactState, instruction: str) -> ArtifactState:
        """Send one edit request and return the edited image."""
        url = self._make_url(f"/models/{self.image_model}:generateContent")
        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"inlineData": {"mimeType": source.mime_type, "data": source.to_base64()}},
                        {"text": instruction},
                    ],
                }
            ],
            "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]},
        }
        LOGGER.debug("transform_image model=%s bytes=%d", self.image_model, len(source.payload))
        resp = self.session.post(url, json_body=body, timeout=self.cfg.request_timeout_s)
        self._ensure_ok(resp, "transform_image")
        return self._parse_image(self._json_dict(resp))

    # ---------- VideoPort ----------

    def generate_video(
        self, prompt: str, source: Optional[ArtifactState] = None
    ) -> ArtifactState:
        """Start a long-running video job, wait for it, and download the result."""
        instance: Dict[str, Any] = {"prompt": prompt}
        if source is not None and not source.is_video:
            instance["image"] = {
                "bytesBase64Encoded": source.to_base64(),
                "mimeType": source.mime_type,
            }
        url = self._make_url(f"/models/{self.video_model}:predictLongRunning")
        resp = self.session.post(
            url, json_body={"instances": [instance]}, timeout=self.cfg.request_timeout_s
        )
        self._ensure_ok(resp, "generate_video")
        operation = self._wait_for_operation(self._json_dict(resp))
        return self._fetch_video(operation)

    # ------------------------------------------------------------------
    def _wait_for_operation(self, operation: Dict[str, Any]) -> Dict[str, Any]:
        """Poll the operation until it reports ``done`` or the deadline passes."""
        name = str(operation.get("name") or "").strip()
        if not operation.get("done") and not name:
            raise ApiError("Video generation did not return an operation name.")
        deadline = self._clock() + self.video_timeout_s
        while not operation.get("done"):
            if self._clock() >= deadline:
                raise ApiTimeoutError(
                    f"Video generation timed out after {self.video_timeout_s}s",
                    context=f"poll {name}",
                )
            self._sleep(self.poll_interval_s)
            resp = self.session.get(self._make_url(f"/{name}"), timeout=self.cfg.request_timeout_s)
            self._ensure_ok(resp, "poll_video_operation")
            operation = self._json_dict(resp)
            LOGGER.debug("video operation %s done=%s", name, bool(operation.get("done")))
        error = operation.get("error")
        if error:
            raise ApiError(
                "Video generation failed.",
                payload=json.dumps({"error": error}),
                context=f"operation {name}",
            )
        return operation

    def _fetch_video(self, operation: Dict[str, Any]) -> ArtifactState:
        response = operation.get("response") or {}
        samples = self._video_samples(response)
        if not samples:
            raise ApiError("Video generation finished without a video.", context="generate_video")
        video = samples[0].get("video") or {}
        inline = video.get("bytesBase64Encoded")
        if inline:
            mime = video.get("mimeType") or _DEFAULT_VIDEO_MIME
            return self._decode(inline, mime)
        uri = str(video.get("uri") or "").strip()
        if not uri:
            raise ApiError("Video sample has neither data nor a download URI.", context="generate_video")
        resp = self.session.get(uri, accept="*/*", timeout=self.cfg.download_timeout_s)
        self._ensure_ok(resp, "download_video")
        mime = str(resp.headers.get("Content-Type") or "").split(";")[0].strip().lower()
        if not mime.startswith("video/"):
            mime = _DEFAULT_VIDEO_MIME
        return ArtifactState(payload=resp.content, mime_type=mime)

    @staticmethod
    def _video_samples(response: Dict[str, Any]) -> List[Dict[str, Any]]:
        wrapped = response.get("generateVideoResponse")
        if isinstance(wrapped, dict):
            samples = wrapped.get("generatedSamples")
            if isinstance(samples, list):
                return [s for s in samples if isinstance(s, dict)]
        samples = response.get("generatedVideos") or response.get("videos")
        if isinstance(samples, list):
            return [s if "video" in s else {"video": s} for s in samples if isinstance(s, dict)]
        return []

    def _parse_image(self, payload: Dict[str, Any]) -> ArtifactState:
        texts: List[str] = []
        for candidate in payload.get("candidates") or []:
            parts = ((candidate or {}).get("content") or {}).get("parts") or []
            for part in parts:
                inline = part.get("inlineData") or part.get("inline_data")
                if isinstance(inline, dict) and inline.get("data"):
                    mime = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                    return self._decode(inline["data"], mime)
                text = part.get("text")
                if isinstance(text, str) and text.strip():
                    texts.append(text.strip())
        feedback = payload.get("promptFeedback") or {}
        reason = feedback.get("blockReason")
        if reason:
            raise ApiError(f"Request blocked by the model ({reason}).", context="transform_image")
        detail = f": {texts[0]}" if texts else "."
        raise ApiError(f"The model returned no image{detail}", context="transform_image")

    @staticmethod
    def _decode(data: str, mime: str) -> ArtifactState:
        try:
            raw = base64.b64decode(data)
        except (binascii.Error, ValueError) as exc:
            raise ApiError("The model returned undecodable media.") from exc
        return ArtifactState(payload=raw, mime_type=mime)

    def _make_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        """Raise typed adapter errors for non-2xx responses."""
        if 200 <= resp.status_code < 300:
            return
        status = resp.status_code
        payload = parse_error_payload(resp)
        message = build_error_message(ctx, status)
        if 400 <= status < 500:
            raise ApiClientError(message, status=status, payload=payload, context=ctx)
        if 500 <= status < 600:
            raise ApiServerError(message, status=status, payload=payload, context=ctx)
        raise ApiError(message, status=status, payload=payload, context=ctx)

    @staticmethod
    def _json_dict(resp: requests.Response) -> Dict[str, Any]:
        try:
            payload = resp.json()
        except ValueError as exc:
            raise ApiError("Invalid JSON in service response.") from exc
        if not isinstance(payload, dict):
            raise ApiError("Unexpected service response shape.")
        return payload


__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_IMAGE_MODEL",
    "DEFAULT_VIDEO_MODEL",
    "GeminiRestAdapter",
]
