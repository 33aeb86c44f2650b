"""Shared HTTP transport for the Gemini REST adapter.

A thin wrapper around ``requests.Session`` that owns the API-key header, the
timeout policy and connection-level retries. Status codes are left to the
caller: ``GeminiRestAdapter._ensure_ok`` maps non-2xx answers to typed errors.

Dependencies:
    - ``requests`` for network I/O.
    - ``atelier.adapters.api_errors.ApiTimeoutError`` for typed transport failures.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from atelier.adapters.api_errors import ApiTimeoutError

LOGGER = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for one edit or status call.
        download_timeout_s: Timeout in seconds for media downloads.
        retries: Connection-level retry attempts after the initial request.
            Edit calls are not idempotent, so the default is to surface the
            first failure and let the user retry.
    """

    request_timeout_s: int = 120
    download_timeout_s: int = 120
    retries: int = 0


class RetryingSession:
    """``requests.Session`` wrapper adding the Gemini key header and retry loop."""

    API_KEY_HEADER = "x-goog-api-key"

    def __init__(self, api_key: Optional[str], cfg: HttpConfig) -> None:
        self.session = requests.Session()
        self.api_key = api_key
        self.cfg = cfg

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        accept: str = "application/json",
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """GET ``url``; media downloads pass ``accept="*/*"``."""
        return self._send("GET", url, params=params, accept=accept, timeout=timeout)

    def post(
        self,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """POST ``json_body`` serialized with ``json.dumps``."""
        data = None if json_body is None else json.dumps(json_body)
        return self._send("POST", url, data=data, timeout=timeout)

    # ------------------------------------------------------------------
    def _headers(self, accept: str, has_body: bool) -> Dict[str, str]:
        headers = {"Accept": accept}
        if self.api_key:
            headers[self.API_KEY_HEADER] = self.api_key
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[str] = None,
        accept: str = "application/json",
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Run one request, retrying only timeouts and connection failures.

        Raises:
            ApiTimeoutError: If every attempt fails at the transport level.
        """
        headers = self._headers(accept, data is not None)
        attempts = max(0, int(self.cfg.retries)) + 1
        for attempt in range(1, attempts + 1):
            try:
                return self.session.request(
                    method,
                    url,
                    params=params,
                    data=data,
                    headers=headers,
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                LOGGER.debug("%s %s attempt %d/%d failed: %s", method, url, attempt, attempts, exc)
        raise ApiTimeoutError(f"Timeout contacting {url}", context=f"{method} {url}")


__all__ = ["HttpConfig", "RetryingSession"]
