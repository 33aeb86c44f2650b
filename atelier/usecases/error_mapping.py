"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from atelier.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    extract_service_message,
)
from atelier.domain.errors import GENERIC_FAILURE_MESSAGE, ServiceFailureError
from atelier.domain.ports import UseCaseError


def map_service_error(
    exc: Exception,
    *,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map a failed remote call to a ``ServiceFailureError``.

    ``UseCaseError`` instances pass through untouched. Everything else is
    reduced to a single message following the extraction order of
    ``extract_service_message`` (parsed envelope, raw body, the exception's
    own text, generic fallback).
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return ServiceFailureError(_timeout_message(exc))
    if isinstance(exc, (ApiClientError, ApiServerError)):
        message = extract_service_message(exc)
        if message == GENERIC_FAILURE_MESSAGE and exc.status:
            message = f"Request failed (HTTP {exc.status})."
        return ServiceFailureError(message)
    if isinstance(exc, ApiError):
        return ServiceFailureError(extract_service_message(exc))

    message = extract_service_message(exc)
    if message == GENERIC_FAILURE_MESSAGE and default_message:
        message = default_message
    return ServiceFailureError(message)


def _timeout_message(exc: ApiTimeoutError) -> str:
    text = str(exc).strip()
    if text:
        return text
    return "The request timed out. Check your connection and try again."


__all__ = ["map_service_error"]
