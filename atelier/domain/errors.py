"""Domain-level error types for use-case and adapter mapping.

Every error is a ``UseCaseError`` with a stable code so views can render it
without knowing which layer raised it. None of them is fatal to the session.
"""
from __future__ import annotations

from .ports import UseCaseError

GENERIC_FAILURE_MESSAGE = "An unexpected error occurred."


class BusyError(UseCaseError):
    """Another transformation is still in flight; the request is rejected, not queued."""

    def __init__(self, message: str = "Another operation is still running.") -> None:
        super().__init__("BUSY", message)


class NoSourceArtifactError(UseCaseError):
    def __init__(self, message: str = "Upload an image before applying an edit.") -> None:
        super().__init__("NO_SOURCE_ARTIFACT", message)


class ServiceFailureError(UseCaseError):
    """The remote call failed or answered with an error envelope."""

    def __init__(self, message: str) -> None:
        super().__init__("SERVICE_FAILURE", message or GENERIC_FAILURE_MESSAGE)


class CapabilityUnavailableError(UseCaseError):
    """An optional platform feature is missing; surfaced as a dismissible notice."""

    def __init__(self, capability: str, message: str = "") -> None:
        super().__init__(
            "CAPABILITY_UNAVAILABLE",
            message or f"{capability} is not supported on this platform.",
        )
        self.capability = capability


class NothingToRetryError(UseCaseError):
    def __init__(self, message: str = "There is no failed operation to retry.") -> None:
        super().__init__("NOTHING_TO_RETRY", message)


class NothingToExportError(UseCaseError):
    def __init__(self, message: str = "There is nothing to export yet.") -> None:
        super().__init__("NOTHING_TO_EXPORT", message)


__all__ = [
    "BusyError",
    "CapabilityUnavailableError",
    "GENERIC_FAILURE_MESSAGE",
    "NoSourceArtifactError",
    "NothingToExportError",
    "NothingToRetryError",
    "ServiceFailureError",
    "UseCaseError",
]
