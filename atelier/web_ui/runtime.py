"""NiceGUI runtime orchestration for Atelier Studio.

This module composes ports, use cases and viewmodels for the web runtime.
Views call the methods below and re-render from the viewmodels; nothing in
here touches NiceGUI so the whole editor flow can be driven from tests.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from atelier.adapters.export_local import ExportLocal
from atelier.adapters.gemini_rest import GeminiRestAdapter
from atelier.adapters.page_renderer import PdfPrintAdapter
from atelier.adapters.storage_local import StorageLocal
from atelier.adapters.transform_mock import TransformMock
from atelier.domain.entities import ArtifactState
from atelier.domain.errors import BusyError
from atelier.domain.history import HistoryStore
from atelier.domain.operations import OperationDescriptor, is_video_operation
from atelier.domain.page import PageComposition
from atelier.domain.ports import (
    ColorSamplerPort,
    ExportPort,
    PreferencePort,
    PrintPort,
    TransformPort,
    UseCaseError,
    VideoPort,
)
from atelier.domain.processing import Failed, ProcessingStatus
from atelier.usecases.export_artifact import ExportArtifact
from atelier.usecases.manage_palette import DeleteColor, LoadPalette, SaveColor
from atelier.usecases.print_page import PrintPage
from atelier.usecases.sample_color import SampleColor
from atelier.usecases.transformation_orchestrator import (
    OrchestratorHooks,
    TransformationOrchestrator,
)
from atelier.utils.logging import apply_gui_preferences
from atelier.viewmodels.canvas_vm import CanvasVM
from atelier.viewmodels.palette_vm import PaletteVM
from atelier.viewmodels.settings_vm import SETTINGS_KEY, SettingsVM
from atelier.viewmodels.studio_vm import StudioVM
from atelier.viewmodels.viewport_vm import ViewportVM


LOGGER = logging.getLogger(__name__)


class StudioRuntime:
    """Orchestration state used by NiceGUI views.

    Ports can be injected for tests; otherwise they are built from settings:
    the Gemini adapter when an API key is configured (settings or
    ``GEMINI_API_KEY``), the offline ``TransformMock`` when not.
    """

    def __init__(
        self,
        preferences: Optional[PreferencePort] = None,
        *,
        transform_port: Optional[TransformPort] = None,
        video_port: Optional[VideoPort] = None,
        export_port: Optional[ExportPort] = None,
        print_port: Optional[PrintPort] = None,
        sampler: Optional[ColorSamplerPort] = None,
        canvas_reference: Optional[int] = None,
    ) -> None:
        self.status_message = "Ready."
        self.revision = 0
        self.last_export_path: Optional[str] = None
        self.last_print_path: Optional[str] = None

        self.preferences = preferences or StorageLocal(
            root_dir=os.environ.get("ATELIER_STORAGE_ROOT") or "."
        )
        self.settings_vm = SettingsVM(on_save=self._persist_settings)
        self._load_settings_defaults()

        self._injected_remote = transform_port is not None
        self._injected_files = export_port is not None or print_port is not None

        self.history = HistoryStore()
        self.viewport_vm = ViewportVM()
        self.studio_vm = StudioVM()
        canvas_kwargs: Dict[str, Any] = {"on_print": self._print_composition}
        if canvas_reference is not None:
            canvas_kwargs["reference"] = canvas_reference
        self.canvas_vm = CanvasVM(**canvas_kwargs)

        remote_image, remote_video = self._build_remote_ports()
        self.orchestrator = TransformationOrchestrator(
            self.history,
            transform_port or remote_image,
            video_port or (remote_video if transform_port is None else None),
            hooks=OrchestratorHooks(
                on_status_changed=self._on_status_changed,
                on_committed=self._on_committed,
                on_origin_changed=self._on_origin_changed,
                on_video_ready=self._on_video_ready,
            ),
        )

        self.export_port = export_port or ExportLocal(self.settings_vm.export_dir)
        self.print_port = print_port or PdfPrintAdapter(self.settings_vm.export_dir)
        self.uc_export = ExportArtifact(self.export_port, prefix=self.settings_vm.product_prefix)
        self.uc_print = PrintPage(self.print_port, prefix=self.settings_vm.product_prefix)

        self.uc_load_palette = LoadPalette(self.preferences)
        self.uc_save_color = SaveColor(self.preferences)
        self.uc_delete_color = DeleteColor(self.preferences)
        self.uc_sample_color = SampleColor(sampler)

        self.palette_vm = PaletteVM(
            on_save_color=self.uc_save_color,
            on_delete_color=self.uc_delete_color,
        )
        self.palette_vm.load(self.uc_load_palette())
        self.studio_vm.on_apply_requested = self.apply_descriptor
        self.studio_vm.on_retry_requested = self.retry
        self.studio_vm.on_dismiss_requested = self.dismiss_error

    # ------------------------------------------------------------------
    # Basic projections
    # ------------------------------------------------------------------
    @property
    def status(self) -> ProcessingStatus:
        return self.orchestrator.status

    def displayed(self) -> Optional[ArtifactState]:
        return self.viewport_vm.displayed(self.orchestrator.displayed(), self.history.origin)

    def has_source(self) -> bool:
        return self.history.current() is not None

    def can_undo(self) -> bool:
        return not self.orchestrator.is_busy and self.history.can_undo()

    def can_redo(self) -> bool:
        return not self.orchestrator.is_busy and self.history.can_redo()

    def saved_colors(self) -> List[str]:
        return list(self.palette_vm.saved)

    def settings_payload(self) -> Dict[str, Any]:
        return self.settings_vm.to_dict()

    def uses_remote_service(self) -> bool:
        return isinstance(self.orchestrator.transform_port, GeminiRestAdapter)

    # ------------------------------------------------------------------
    # Settings workflows
    # ------------------------------------------------------------------
    def apply_settings_payload(self, payload: Mapping[str, Any]) -> None:
        """Validate, persist and activate a settings payload."""
        if self.orchestrator.is_busy:
            raise BusyError("Wait for the current operation before changing settings.")
        self.settings_vm.apply_dict(payload)
        self.settings_vm.cmd_save()
        apply_gui_preferences(self.settings_vm.debug_logging)
        if not self._injected_remote:
            image_port, video_port = self._build_remote_ports()
            self.orchestrator.transform_port = image_port
            self.orchestrator.video_port = video_port
        if not self._injected_files:
            self.export_port = ExportLocal(self.settings_vm.export_dir)
            self.print_port = PdfPrintAdapter(self.settings_vm.export_dir)
            self.uc_export.export_port = self.export_port
            self.uc_print.print_port = self.print_port
        self.uc_export.prefix = self.settings_vm.product_prefix
        self.uc_print.prefix = self.settings_vm.product_prefix
        self.status_message = "Settings applied."
        self._touch()

    # ------------------------------------------------------------------
    # Editor workflows
    # ------------------------------------------------------------------
    def upload(self, payload: bytes, mime_type: str) -> ArtifactState:
        if not (mime_type or "").startswith("image/"):
            raise UseCaseError("UNSUPPORTED_UPLOAD", f"Unsupported file type '{mime_type}'. Upload an image.")
        artifact = ArtifactState(payload=bytes(payload), mime_type=mime_type)
        self.orchestrator.set_origin(artifact)
        self.status_message = "Image loaded."
        return artifact

    def upload_data_url(self, url: str) -> ArtifactState:
        artifact = ArtifactState.from_data_url(url)
        return self.upload(artifact.payload, artifact.mime_type)

    def build_descriptor(self) -> OperationDescriptor:
        try:
            return self.studio_vm.build_descriptor(self.palette_vm.color)
        except ValueError as exc:
            raise UseCaseError("INVALID_OPERATION", str(exc))

    def apply(self) -> ProcessingStatus:
        """Build the descriptor from the editor form and run it (blocking)."""
        return self.apply_descriptor(self.build_descriptor())

    def apply_descriptor(self, descriptor: OperationDescriptor) -> ProcessingStatus:
        status = self.orchestrator.apply(descriptor)
        self._status_line(status)
        return status

    def retry(self) -> ProcessingStatus:
        status = self.orchestrator.retry()
        self._status_line(status)
        return status

    def dismiss_error(self) -> None:
        self.orchestrator.dismiss_error()
        self._touch()

    def undo(self) -> bool:
        moved = self.orchestrator.undo()
        self._touch()
        return moved

    def redo(self) -> bool:
        moved = self.orchestrator.redo()
        self._touch()
        return moved

    def clear_video(self) -> None:
        self.orchestrator.clear_video()
        self._touch()

    def download(self) -> str:
        path = self.uc_export(self.history.current(), self.orchestrator.generated_video)
        self.last_export_path = path
        self.status_message = f"Saved {os.path.basename(path)}."
        self._touch()
        return path

    # ------------------------------------------------------------------
    # Palette workflows
    # ------------------------------------------------------------------
    def select_color(self, value: str) -> str:
        try:
            return self.palette_vm.select(value)
        except ValueError as exc:
            raise UseCaseError("INVALID_COLOR", str(exc))

    def save_current_color(self) -> List[str]:
        return list(self.palette_vm.cmd_save_current())

    def delete_color(self, value: str) -> List[str]:
        return list(self.palette_vm.cmd_delete(value))

    async def sample_color(self) -> Optional[str]:
        picked = await self.uc_sample_color()
        if picked:
            self.palette_vm.select(picked)
            self._touch()
        return picked

    # ------------------------------------------------------------------
    # Tech pack workflows
    # ------------------------------------------------------------------
    def compose_page(self) -> PageComposition:
        return self.canvas_vm.compose(
            self.history.origin,
            self.history.current(),
            self.studio_vm.target,
            self.palette_vm.color,
        )

    def print_page(self) -> str:
        self.last_print_path = None
        self.canvas_vm.cmd_print(
            self.history.origin,
            self.history.current(),
            self.studio_vm.target,
            self.palette_vm.color,
        )
        if self.last_print_path is None:
            raise UseCaseError("PRINT_FAILED", "The page could not be printed.")
        return self.last_print_path

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _load_settings_defaults(self) -> None:
        try:
            payload = self.preferences.get(SETTINGS_KEY)
        except ValueError as exc:
            LOGGER.warning("Ignoring unreadable preferences: %s", exc)
            payload = None
        if payload:
            try:
                self.settings_vm.apply_dict(payload)
            except ValueError as exc:
                LOGGER.warning("Ignoring stored settings: %s", exc)
        if not self.settings_vm.has_api_key():
            self.settings_vm.set_api_key(os.environ.get("GEMINI_API_KEY", ""))
        apply_gui_preferences(self.settings_vm.debug_logging)

    def _persist_settings(self, payload: Dict[str, Any]) -> None:
        self.preferences.set(SETTINGS_KEY, payload)

    def _build_remote_ports(self):
        cfg = self.settings_vm.config
        if not self.settings_vm.has_api_key():
            LOGGER.info("No API key configured; using the offline transform mock.")
            mock = TransformMock()
            return mock, mock
        adapter = GeminiRestAdapter(
            self.settings_vm.api_key,
            base_url=cfg.api_base_url,
            image_model=cfg.image_model,
            video_model=cfg.video_model,
            request_timeout_s=cfg.request_timeout_s,
            video_timeout_s=cfg.video_timeout_s,
            poll_interval_s=float(cfg.video_poll_interval_s),
        )
        return adapter, adapter

    def _print_composition(self, composition: PageComposition) -> None:
        self.last_print_path = self.uc_print(composition)
        self.status_message = f"Tech pack saved as {os.path.basename(self.last_print_path)}."
        self._touch()

    def _status_line(self, status: ProcessingStatus) -> None:
        if isinstance(status, Failed):
            self.status_message = status.message
        elif is_video_operation(self.orchestrator.last_descriptor):
            self.status_message = "Video ready."
        else:
            self.status_message = "Done."
        self._touch()

    def _on_status_changed(self, status: ProcessingStatus) -> None:
        self.studio_vm.set_status(status)
        self._touch()

    def _on_committed(self, artifact: ArtifactState) -> None:
        self.viewport_vm.reset()

    def _on_origin_changed(self, artifact: ArtifactState) -> None:
        self.viewport_vm.release_compare()
        self.viewport_vm.reset()

    def _on_video_ready(self, artifact: ArtifactState) -> None:
        self.viewport_vm.release_compare()

    def _touch(self) -> None:
        self.revision += 1
