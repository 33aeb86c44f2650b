from __future__ import annotations

"""Single-flight orchestration of remote transformations over the edit history."""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from atelier.domain.entities import ArtifactState
from atelier.domain.errors import (
    BusyError,
    CapabilityUnavailableError,
    NoSourceArtifactError,
    NothingToRetryError,
)
from atelier.domain.history import HistoryStore
from atelier.domain.operations import (
    OperationDescriptor,
    build_instruction,
    describe,
    is_video_operation,
)
from atelier.domain.ports import TransformPort, VideoPort
from atelier.domain.processing import IDLE, Failed, Idle, ProcessingStatus, Requesting
from atelier.usecases.error_mapping import map_service_error

LOGGER = logging.getLogger(__name__)


def _noop(*_: object, **__: object) -> None:
    """Default no-op callback used for hooks."""


@dataclass
class OrchestratorHooks:
    """Optional callbacks triggered on significant orchestration events."""

    on_status_changed: Callable[[ProcessingStatus], None] = _noop
    on_committed: Callable[[ArtifactState], None] = _noop
    on_origin_changed: Callable[[ArtifactState], None] = _noop
    on_video_ready: Callable[[ArtifactState], None] = _noop

    def __post_init__(self) -> None:
        self.on_status_changed = self.on_status_changed or _noop
        self.on_committed = self.on_committed or _noop
        self.on_origin_changed = self.on_origin_changed or _noop
        self.on_video_ready = self.on_video_ready or _noop


class TransformationOrchestrator:
    """Runs one operation at a time against the current artifact.

    The orchestrator is the only writer of the ``HistoryStore``. Synchronous
    rejections (busy, no source, nothing to retry) raise ``UseCaseError``
    subclasses; remote failures never raise out of ``apply`` and are kept in
    ``status`` as ``Failed`` until dismissed or retried.
    """

    def __init__(
        self,
        history: HistoryStore,
        transform_port: TransformPort,
        video_port: Optional[VideoPort] = None,
        hooks: Optional[OrchestratorHooks] = None,
    ) -> None:
        self.history = history
        self.transform_port = transform_port
        self.video_port = video_port
        self.hooks = hooks or OrchestratorHooks()
        self._status: ProcessingStatus = IDLE
        self._generated_video: Optional[ArtifactState] = None
        self._last_descriptor: Optional[OperationDescriptor] = None
        self._lock = threading.RLock()

    # ---- Read model ----
    @property
    def status(self) -> ProcessingStatus:
        return self._status

    @property
    def is_busy(self) -> bool:
        return isinstance(self._status, Requesting)

    @property
    def generated_video(self) -> Optional[ArtifactState]:
        return self._generated_video

    @property
    def last_descriptor(self) -> Optional[OperationDescriptor]:
        return self._last_descriptor

    def displayed(self) -> Optional[ArtifactState]:
        """Artifact the main viewer shows: a generated video wins over the history."""
        if self._generated_video is not None:
            return self._generated_video
        return self.history.current()

    # ---- Commands ----
    def apply(self, descriptor: OperationDescriptor) -> ProcessingStatus:
        """Run ``descriptor`` and return the resulting status (``Idle`` or ``Failed``)."""
        with self._lock:
            if isinstance(self._status, Requesting):
                raise BusyError()
            source = self.history.current()
            video = is_video_operation(descriptor)
            if source is None and not video:
                raise NoSourceArtifactError()
            self._last_descriptor = descriptor
            self._set_status(Requesting(descriptor))

        LOGGER.info("Applying %s", describe(descriptor))
        try:
            if video:
                result = self._require_video_port().generate_video(
                    build_instruction(descriptor), source
                )
            else:
                result = self.transform_port.transform_image(
                    source, build_instruction(descriptor)
                )
        except Exception as exc:
            error = map_service_error(exc)
            LOGGER.warning("%s failed: %s", describe(descriptor), error.message)
            LOGGER.debug("Transformation failure detail", exc_info=True)
            with self._lock:
                self._set_status(Failed(error.message, descriptor))
            return self._status

        with self._lock:
            if video:
                self._generated_video = result
            else:
                pointer = self.history.commit(result)
                self._generated_video = None
                LOGGER.debug("Committed %r at pointer %d", result, pointer)
            self._set_status(IDLE)

        if video:
            self.hooks.on_video_ready(result)
        else:
            self.hooks.on_committed(result)
        return self._status

    def retry(self) -> ProcessingStatus:
        """Replay the descriptor of the last failed operation."""
        with self._lock:
            status = self._status
            if isinstance(status, Requesting):
                raise BusyError()
            if not isinstance(status, Failed):
                raise NothingToRetryError()
            descriptor = status.descriptor
            self._set_status(IDLE)
        LOGGER.info("Retrying %s", describe(descriptor))
        return self.apply(descriptor)

    def dismiss_error(self) -> None:
        with self._lock:
            if isinstance(self._status, Failed):
                self._set_status(IDLE)

    def set_origin(self, artifact: ArtifactState) -> None:
        """Install a freshly uploaded source artifact and start a new history."""
        with self._lock:
            if isinstance(self._status, Requesting):
                raise BusyError("Wait for the current operation before uploading.")
            self.history.set_origin(artifact)
            self._generated_video = None
            if not isinstance(self._status, Idle):
                self._set_status(IDLE)
        LOGGER.info("New origin %r", artifact)
        self.hooks.on_origin_changed(artifact)

    def undo(self) -> bool:
        with self._lock:
            if isinstance(self._status, Requesting):
                raise BusyError()
            moved = self.history.undo()
        if moved:
            LOGGER.debug("Undo -> pointer %d", self.history.pointer)
        return moved

    def redo(self) -> bool:
        with self._lock:
            if isinstance(self._status, Requesting):
                raise BusyError()
            moved = self.history.redo()
        if moved:
            LOGGER.debug("Redo -> pointer %d", self.history.pointer)
        return moved

    def clear_video(self) -> None:
        self._generated_video = None

    # ------------------------------------------------------------------
    def _set_status(self, status: ProcessingStatus) -> None:
        self._status = status
        self.hooks.on_status_changed(status)

    def _require_video_port(self) -> VideoPort:
        if self.video_port is None:
            raise CapabilityUnavailableError(
                "Video generation", "No video generation service is configured."
            )
        return self.video_port


__all__ = ["OrchestratorHooks", "TransformationOrchestrator"]
