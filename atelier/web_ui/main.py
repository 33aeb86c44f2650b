"""NiceGUI entrypoint for the Atelier Studio web runtime."""

from __future__ import annotations

import argparse
import json
import os
from typing import Any, Callable, Dict, Optional

from nicegui import run, ui

from atelier.adapters.storage_memory import MappingPreferences
from atelier.domain.entities import Point
from atelier.domain.errors import CapabilityUnavailableError
from atelier.domain.operations import TARGET_PRESETS
from atelier.domain.page import (
    FOOTER_HEIGHT_PX,
    HEADER_HEIGHT_PX,
    ITEM_CAPTIONS,
    ITEM_DETAILS,
    PAGE_HEIGHT_PX,
    PAGE_WIDTH_PX,
)
from atelier.domain.ports import UseCaseError
from atelier.utils.logging import configure_root
from atelier.viewmodels.studio_vm import ToolMode
from atelier.web_ui.runtime import StudioRuntime
from atelier.web_ui.viewmodels import WebSettingsVM, parse_settings_json

_POINTER_ARGS = ["clientX", "clientY", "button"]
_TOOL_LABELS = {
    ToolMode.RECOLOR.value: "Recolor",
    ToolMode.REMOVE_BG.value: "Remove BG",
    ToolMode.CUSTOM.value: "Custom",
    ToolMode.VIDEO.value: "Video",
}


class BrowserColorSampler:
    """``ColorSamplerPort`` backed by the browser EyeDropper API."""

    async def is_available(self) -> bool:
        return bool(await ui.run_javascript("return 'EyeDropper' in window;"))

    async def pick(self) -> Optional[str]:
        result = await ui.run_javascript(
            """
try {
  const picked = await new EyeDropper().open();
  return picked.sRGBHex;
} catch (err) {
  return null;
}
""",
            timeout=120.0,
        )
        return str(result) if result else None


def _install_theme() -> None:
    """Install global CSS/theme tokens for the web runtime."""
    ui.add_head_html(
        """
<style>
:root {
  --atelier-bg: #0a0a0a;
  --atelier-panel: #121212;
  --atelier-border: #222222;
  --atelier-accent: #0ea5e9;
  --atelier-muted: #9ca3af;
  --atelier-danger: #b42318;
}
body { background: var(--atelier-bg); color: #f3f4f6; }
.atelier-panel {
  background: var(--atelier-panel);
  border: 1px solid var(--atelier-border);
  border-radius: 14px;
}
.atelier-stage {
  position: relative;
  overflow: hidden;
  height: 72vh;
  background: #050505;
  border-radius: 14px;
  cursor: grab;
  user-select: none;
}
.atelier-stage img, .atelier-stage video { pointer-events: none; max-height: 70vh; }
.atelier-swatch {
  width: 28px; height: 28px; border-radius: 8px;
  border: 1px solid rgba(255, 255, 255, 0.15); cursor: pointer;
}
.atelier-page {
  position: relative; background: white; color: black; overflow: hidden;
  box-shadow: 0 25px 50px rgba(0, 0, 0, 0.5);
}
.atelier-page img { pointer-events: none; user-select: none; max-width: 300px; display: block; }
.atelier-item { position: absolute; cursor: move; transform-origin: top left; }
.atelier-item.active { outline: 2px solid var(--atelier-accent); outline-offset: 2px; }
.atelier-mono { font-family: monospace; }
</style>
        """
    )


def _notify_error(exc: Exception) -> None:
    """Render exceptions as concise NiceGUI toasts."""
    message = getattr(exc, "message", None) or str(exc)
    ui.notify(message, color="negative", close_button="OK")


def _build_ui(runtime: StudioRuntime) -> None:
    """Register the NiceGUI pages for the runtime."""

    @ui.page("/")
    async def index() -> None:
        settings_vm = WebSettingsVM.from_settings_vm(runtime.settings_vm)
        seen = {"revision": -1}
        refs: Dict[str, Any] = {}

        def _invoke(action: Callable[[], Any], *refreshers: Callable[[], None]) -> None:
            try:
                action()
            except (UseCaseError, ValueError) as exc:
                _notify_error(exc)
                render_status.refresh()
                return
            for refresh in refreshers:
                refresh()

        def refresh_all() -> None:
            seen["revision"] = runtime.revision
            render_status.refresh()
            render_media.refresh()
            render_history_bar.refresh()
            render_palette.refresh()
            render_apply.refresh()
            render_error.refresh()
            apply_transform()

        def apply_transform() -> None:
            box = refs.get("transform_box")
            if box is not None:
                box.style(f"transform: {runtime.viewport_vm.css_transform()}")

        # ---- Renderers ----
        @ui.refreshable
        def render_status() -> None:
            with ui.row().classes("w-full justify-between items-center atelier-panel q-pa-md"):
                ui.label("Atelier Studio").classes("text-h5")
                source = "Gemini" if runtime.uses_remote_service() else "Offline mock"
                with ui.row().classes("items-center q-gutter-sm"):
                    ui.badge(source, color="primary" if runtime.uses_remote_service() else "grey-7")
                    ui.label(runtime.studio_vm.status_message or runtime.status_message).classes(
                        "atelier-mono text-caption"
                    )

        @ui.refreshable
        def render_media() -> None:
            artifact = runtime.displayed()
            if artifact is None:
                ui.label("Upload an image to start.").classes("text-grey-6")
                return
            if artifact.is_video:
                with ui.element("div").classes("relative-position"):
                    ui.video(artifact.to_data_url(), autoplay=True, loop=True).style("max-height: 68vh")
                    ui.button(icon="close", on_click=close_video).props("round dense flat").classes(
                        "absolute-top-right"
                    )
                return
            ui.image(artifact.to_data_url()).props("fit=contain no-spinner").style(
                "width: 60vw; max-height: 70vh"
            )

        @ui.refreshable
        def render_history_bar() -> None:
            with ui.row().classes("items-center q-gutter-sm"):
                ui.button(icon="undo", on_click=undo).props("flat" if runtime.can_undo() else "flat disable")
                ui.button(icon="redo", on_click=redo).props("flat" if runtime.can_redo() else "flat disable")
                compare = ui.button("Hold to compare", icon="compare").props(
                    "outline" if runtime.history.origin is not None else "outline disable"
                )
                compare.on("mousedown", press_compare)
                compare.on("touchstart", press_compare)
                compare.on("mouseup", release_compare)
                compare.on("mouseleave", release_compare)
                compare.on("touchend", release_compare)
                ui.button("Reset view", icon="center_focus_strong", on_click=reset_view).props("flat")
                ui.button("Download", icon="download", on_click=download).props("flat")
                ui.link("Tech pack", "/techpack").classes("text-primary q-ml-md")
                ui.label(f"Version {runtime.history.pointer + 1} / {len(runtime.history)}").classes(
                    "atelier-mono text-caption text-grey-6"
                )

        @ui.refreshable
        def render_palette() -> None:
            palette = runtime.palette_vm
            with ui.row().classes("q-gutter-xs"):
                for preset in palette.presets:
                    ui.element("div").classes("atelier-swatch").style(
                        f"background: {preset.hex}"
                    ).tooltip(preset.name).on("click", lambda _, c=preset.hex: choose_color(c))
            with ui.row().classes("items-center q-gutter-sm q-mt-sm"):
                refs["current_swatch"] = ui.element("div").classes("atelier-swatch").style(
                    f"background: {palette.color}"
                )
                ui.input("Hex", value=palette.hex_text, on_change=on_hex_change).classes(
                    "atelier-mono"
                ).props("dense dark")
                ui.button(icon="colorize", on_click=sample_color).props("flat dense").tooltip("Pick from screen")
                ui.button(icon="bookmark_add", on_click=save_color).props("flat dense").tooltip("Save color")
            if palette.saved:
                ui.label("Saved colors").classes("text-caption text-grey-6 q-mt-sm")
                with ui.row().classes("q-gutter-xs"):
                    for color in palette.saved:
                        with ui.element("div").classes("atelier-swatch relative-position").style(
                            f"background: {color}"
                        ).on("click", lambda _, c=color: choose_color(c)):
                            ui.button(
                                icon="close", on_click=lambda _, c=color: delete_color(c)
                            ).props("round dense size=6px").classes("absolute-top-right")

        @ui.refreshable
        def render_apply() -> None:
            studio = runtime.studio_vm
            enabled = studio.can_apply(runtime.has_source())
            label = "Generate video" if studio.mode is ToolMode.VIDEO else "Apply"
            with ui.button(on_click=apply_edit).classes("w-full q-mt-md").props(
                "color=primary" if enabled else "color=primary disable"
            ):
                if studio.is_loading:
                    ui.spinner(size="sm").classes("q-mr-sm")
                    ui.label(studio.status_message)
                else:
                    ui.label(label)

        @ui.refreshable
        def render_error() -> None:
            message = runtime.studio_vm.error_message
            if not message:
                return
            with ui.card().classes("fixed-bottom-right q-ma-lg bg-red-10 text-white").style("max-width: 380px"):
                ui.label("Processing error").classes("text-overline")
                ui.label(message).classes("text-body2")
                with ui.row().classes("q-gutter-sm"):
                    ui.button("Close", on_click=dismiss_error).props("flat color=white")
                    ui.button("Retry", on_click=retry).props("outline color=white")

        # ---- Event handlers ----
        def on_upload(event) -> None:
            _invoke(
                lambda: runtime.upload(event.content.read(), event.type or "image/png"),
                refresh_all,
            )

        def set_mode(value: str) -> None:
            runtime.studio_vm.set_mode(value)
            render_tool_options.refresh()
            render_apply.refresh()

        def choose_color(value: str) -> None:
            _invoke(lambda: runtime.select_color(value), render_palette.refresh)

        def on_hex_change(event) -> None:
            typed = str(event.value or "")
            filtered = runtime.palette_vm.on_hex_input(typed)
            if filtered != typed:
                event.sender.value = filtered
            swatch = refs.get("current_swatch")
            if swatch is not None:
                swatch.style(f"background: {runtime.palette_vm.color}")

        def save_color() -> None:
            _invoke(runtime.save_current_color, render_palette.refresh)

        def delete_color(value: str) -> None:
            _invoke(lambda: runtime.delete_color(value), render_palette.refresh)

        async def sample_color() -> None:
            try:
                await runtime.sample_color()
            except CapabilityUnavailableError as exc:
                ui.notify(exc.message, color="warning")
                return
            except UseCaseError as exc:
                _notify_error(exc)
                return
            render_palette.refresh()

        async def apply_edit() -> None:
            try:
                descriptor = runtime.build_descriptor()
            except UseCaseError as exc:
                _notify_error(exc)
                return
            try:
                await run.io_bound(runtime.apply_descriptor, descriptor)
            except UseCaseError as exc:
                _notify_error(exc)
            refresh_all()

        async def retry() -> None:
            try:
                await run.io_bound(runtime.retry)
            except UseCaseError as exc:
                _notify_error(exc)
            refresh_all()

        def dismiss_error() -> None:
            _invoke(runtime.dismiss_error, refresh_all)

        def undo() -> None:
            _invoke(runtime.undo, refresh_all)

        def redo() -> None:
            _invoke(runtime.redo, refresh_all)

        def close_video() -> None:
            _invoke(runtime.clear_video, refresh_all)

        def download() -> None:
            try:
                path = runtime.download()
            except UseCaseError as exc:
                _notify_error(exc)
                return
            ui.download(path)
            render_status.refresh()

        def press_compare() -> None:
            runtime.viewport_vm.press_compare()
            render_media.refresh()

        def release_compare() -> None:
            if runtime.viewport_vm.comparing:
                runtime.viewport_vm.release_compare()
                render_media.refresh()

        def reset_view() -> None:
            runtime.viewport_vm.reset()
            apply_transform()

        def on_wheel(event) -> None:
            runtime.viewport_vm.on_wheel(float(event.args.get("deltaY") or 0.0))
            apply_transform()

        def on_stage_down(event) -> None:
            args = event.args
            runtime.viewport_vm.on_drag_start(
                Point(float(args["clientX"]), float(args["clientY"])), int(args.get("button", 0))
            )

        def on_stage_move(event) -> None:
            args = event.args
            if runtime.viewport_vm.on_drag_move(Point(float(args["clientX"]), float(args["clientY"]))):
                apply_transform()

        def on_stage_up(_event=None) -> None:
            runtime.viewport_vm.on_drag_end()

        def on_stage_leave(_event=None) -> None:
            runtime.viewport_vm.on_drag_cancel()

        # ---- Settings dialog ----
        def sync_settings_inputs() -> None:
            for key, element in settings_inputs.items():
                element.value = getattr(settings_vm, key)

        def save_settings() -> None:
            def action() -> None:
                for key, element in settings_inputs.items():
                    setattr(settings_vm, key, element.value)
                runtime.apply_settings_payload(settings_vm.to_payload())
                ui.notify("Settings saved.", color="positive")
                settings_dialog.close()

            _invoke(action, refresh_all)

        def export_settings_json() -> None:
            payload = settings_vm.to_payload()
            payload.pop("api_key", None)
            ui.download(
                json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8"),
                filename="atelier_settings.json",
            )

        def on_import_settings(event) -> None:
            def action() -> None:
                nonlocal settings_vm
                payload = parse_settings_json(event.content.read().decode("utf-8-sig"))
                merged = {**settings_vm.to_payload(), **payload}
                settings_vm = WebSettingsVM.from_payload(merged)
                sync_settings_inputs()
                ui.notify("Imported settings JSON.", color="positive")

            try:
                action()
            except (UseCaseError, ValueError) as exc:
                _notify_error(exc)

        settings_inputs: Dict[str, Any] = {}
        with ui.dialog() as settings_dialog, ui.card().classes("q-pa-md").style("min-width: 460px"):
            ui.label("Settings").classes("text-h6")
            settings_inputs["api_key"] = ui.input("Gemini API key", password=True, password_toggle_button=True)
            settings_inputs["api_base_url"] = ui.input("API base URL")
            settings_inputs["image_model"] = ui.input("Image model")
            settings_inputs["video_model"] = ui.input("Video model")
            settings_inputs["request_timeout_s"] = ui.number("Request timeout (s)", min=1, format="%d")
            settings_inputs["video_timeout_s"] = ui.number("Video timeout (s)", min=1, format="%d")
            settings_inputs["video_poll_interval_s"] = ui.number("Video poll interval (s)", min=1, format="%d")
            settings_inputs["export_dir"] = ui.input("Export folder")
            settings_inputs["product_prefix"] = ui.input("File name prefix")
            settings_inputs["debug_logging"] = ui.switch("Debug logging")
            with ui.row().classes("q-gutter-sm q-mt-md"):
                ui.button("Save", on_click=save_settings, color="primary")
                ui.button("Export JSON", on_click=export_settings_json).props("flat")
                ui.upload(on_upload=on_import_settings, auto_upload=True, label="Import JSON").props(
                    "accept=.json flat"
                )
                ui.button("Close", on_click=settings_dialog.close).props("flat")

        # ---- Layout ----
        @ui.refreshable
        def render_tool_options() -> None:
            studio = runtime.studio_vm
            if studio.mode is ToolMode.RECOLOR:
                ui.select(
                    {preset.value: preset.label for preset in TARGET_PRESETS},
                    value=studio.target,
                    label="Target area",
                    on_change=lambda e: studio.set_target(str(e.value or "")),
                ).classes("w-full").props("dark")
                render_palette()
            elif studio.mode is ToolMode.REMOVE_BG:
                ui.label("Removes the background and keeps the subject.").classes("text-grey-6")
            elif studio.mode is ToolMode.CUSTOM:
                ui.textarea(
                    "Instruction",
                    value=studio.custom_prompt,
                    on_change=lambda e: studio.set_custom_prompt(str(e.value or "")),
                ).classes("w-full").props("dark autogrow")
            else:
                ui.textarea(
                    "Video prompt",
                    value=studio.video_prompt,
                    on_change=lambda e: studio.set_video_prompt(str(e.value or "")),
                ).classes("w-full").props("dark autogrow")

        with ui.column().classes("w-full q-pa-md q-gutter-md"):
            render_status()
            with ui.row().classes("w-full no-wrap q-gutter-md items-start"):
                with ui.column().classes("atelier-panel q-pa-md").style("width: 340px"):
                    ui.upload(on_upload=on_upload, auto_upload=True, label="Upload image").props(
                        "accept=image/* dark"
                    ).classes("w-full")
                    ui.toggle(_TOOL_LABELS, value=runtime.studio_vm.mode.value, on_change=lambda e: set_mode(e.value))
                    render_tool_options()
                    render_apply()
                    ui.button("Settings", icon="settings", on_click=lambda: (sync_settings_inputs(), settings_dialog.open())).props(
                        "flat"
                    ).classes("q-mt-sm")
                with ui.column().classes("col q-gutter-sm"):
                    render_history_bar()
                    stage = ui.element("div").classes("atelier-stage w-full")
                    stage.on("wheel", on_wheel, ["deltaY"])
                    stage.on("mousedown", on_stage_down, _POINTER_ARGS)
                    stage.on("mousemove", on_stage_move, ["clientX", "clientY"], throttle=0.02)
                    stage.on("mouseup", on_stage_up)
                    stage.on("mouseleave", on_stage_leave)
                    with stage:
                        # absolute-center owns its own transform, so pan/zoom goes on an inner box
                        with ui.element("div").classes("absolute-center"):
                            with ui.element("div").style("transform-origin: center") as transform_box:
                                render_media()
                        refs["transform_box"] = transform_box
            render_error()

        apply_transform()

        def periodic_refresh() -> None:
            if runtime.revision != seen["revision"]:
                refresh_all()

        ui.timer(0.5, periodic_refresh)

    @ui.page("/techpack")
    async def techpack() -> None:
        canvas = runtime.canvas_vm
        item_elements: Dict[str, Any] = {}

        def item_style(item_id: str) -> str:
            item = canvas.item(item_id)
            style = f"left: {item.x:g}px; top: {item.y:g}px;"
            if item.is_image:
                style += f" transform: scale({item.scale:g});"
            return style

        def sync_items() -> None:
            for item_id, element in item_elements.items():
                element.style(item_style(item_id))
                if item_id == canvas.selected_id:
                    element.classes(add="active")
                else:
                    element.classes(remove="active")
            render_toolbar.refresh()

        def on_item_down(item_id: str, event) -> None:
            args = event.args
            if int(args.get("button", 0)) != 0:
                return
            canvas.begin_drag(item_id, Point(float(args["clientX"]), float(args["clientY"])))
            sync_items()

        def on_page_move(event) -> None:
            args = event.args
            if canvas.on_pointer_move(Point(float(args["clientX"]), float(args["clientY"]))):
                sync_items()

        def on_page_up(_event=None) -> None:
            canvas.end_drag()

        def on_page_leave(_event=None) -> None:
            canvas.on_pointer_leave()

        def grow() -> None:
            canvas.cmd_grow()
            sync_items()

        def shrink() -> None:
            canvas.cmd_shrink()
            sync_items()

        def reset_layout() -> None:
            canvas.reset_layout()
            sync_items()

        def print_page() -> None:
            try:
                path = runtime.print_page()
            except UseCaseError as exc:
                _notify_error(exc)
                return
            ui.download(path)

        @ui.refreshable
        def render_toolbar() -> None:
            with ui.row().classes("w-full justify-between items-center atelier-panel q-pa-md"):
                ui.label("Tech Pack View").classes("text-h6")
                with ui.row().classes("items-center q-gutter-sm"):
                    if canvas.can_resize_selection:
                        ui.label("Resize selected:").classes("text-caption text-grey-6")
                        ui.button("-", on_click=shrink).props("dense flat")
                        ui.button("+", on_click=grow).props("dense flat")
                    ui.button("Reset layout", on_click=reset_layout).props("flat")
                    ui.button("Print", icon="print", on_click=print_page, color="primary")
                    ui.link("Close", "/").classes("text-grey-5 q-ml-sm")

        composition = runtime.compose_page()
        render_toolbar()
        with ui.element("div").classes("w-full flex justify-center q-pa-lg"):
            page = ui.element("div").classes("atelier-page").style(
                f"width: {PAGE_WIDTH_PX}px; height: {PAGE_HEIGHT_PX}px;"
                f" min-width: {PAGE_WIDTH_PX}px; min-height: {PAGE_HEIGHT_PX}px;"
            )
            page.on("mousemove", on_page_move, ["clientX", "clientY"], throttle=0.02)
            page.on("mouseup", on_page_up)
            page.on("mouseleave", on_page_leave)
            with page:
                header = composition.header
                with ui.row().classes("absolute-top w-full justify-between items-center q-px-lg").style(
                    f"height: {HEADER_HEIGHT_PX}px; border-bottom: 2px solid black; pointer-events: none"
                ):
                    with ui.column().classes("q-gutter-none"):
                        ui.label(header.title.upper()).classes("text-h5 text-weight-bold")
                        ui.label(header.subtitle).classes("text-grey-7")
                    with ui.column().classes("items-end q-gutter-none atelier-mono text-caption text-grey-6"):
                        ui.label(f"DATE: {header.date.strftime('%d/%m/%Y') if header.date else ''}")
                        ui.label(f"REF: {header.reference}")

                for placed in composition.items:
                    item_id = placed.item.id
                    with ui.element("div").classes("atelier-item").style(item_style(item_id)) as element:
                        if item_id == ITEM_DETAILS and composition.details is not None:
                            details = composition.details
                            with ui.card().classes("q-pa-md").style("width: 320px; border: 2px solid black"):
                                ui.label(details.title.upper()).classes("text-weight-bold")
                                ui.label("TARGET OBJECT").classes("text-caption text-grey-7")
                                ui.label(details.target or "N/A")
                                ui.label("COLOR CODE").classes("text-caption text-grey-7")
                                with ui.row().classes("items-center q-gutter-sm"):
                                    ui.element("div").style(
                                        f"width: 16px; height: 16px; background: {details.color_hex};"
                                        " border: 1px solid #d1d5db"
                                    )
                                    ui.label(details.color_hex).classes("atelier-mono")
                                ui.label("NOTES").classes("text-caption text-grey-7")
                                ui.label(details.notes_placeholder).classes("text-caption text-grey-5 text-italic")
                        elif placed.artifact is not None:
                            with ui.element("div").classes("q-pa-sm").style("background: #f3f4f6; border: 1px solid #e5e7eb"):
                                ui.label(ITEM_CAPTIONS.get(item_id, "").upper()).classes(
                                    "text-caption text-grey-6 text-center"
                                )
                                ui.html(f'<img src="{placed.artifact.to_data_url()}" draggable="false">')
                    element.on("mousedown", lambda e, i=item_id: on_item_down(i, e), _POINTER_ARGS)
                    item_elements[item_id] = element

                with ui.row().classes("absolute-bottom w-full justify-center items-center").style(
                    f"height: {FOOTER_HEIGHT_PX}px; border-top: 1px solid #d1d5db; pointer-events: none"
                ):
                    ui.label(composition.footer.title).classes("text-caption text-grey-6")
        sync_items()


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the Atelier Studio web UI.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument(
        "--ephemeral",
        action="store_true",
        help="Keep preferences in memory instead of the preferences file.",
    )
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    configure_root()
    preferences = MappingPreferences() if args.ephemeral else None
    runtime = StudioRuntime(preferences, sampler=BrowserColorSampler())
    if args.smoke_test:
        payload = runtime.settings_payload()
        print("web-smoke-ok", sorted(key for key in payload if key != "api_key"))
        return
    _install_theme()
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="Atelier Studio",
        dark=True,
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("ATELIER_WEB_STORAGE_SECRET", "atelier-web-ui-secret"),
    )


if __name__ == "__main__":
    main()
