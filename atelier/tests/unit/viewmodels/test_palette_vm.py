from __future__ import annotations

from atelier.viewmodels.palette_vm import PaletteVM


def test_select_normalizes_and_syncs_text() -> None:
    vm = PaletteVM()

    assert vm.select("#ABCDEF") == "#abcdef"
    assert vm.hex_text == "#abcdef"
    assert len(vm.presets) == 10


def test_hex_input_filters_and_commits_complete_values() -> None:
    vm = PaletteVM()

    assert vm.on_hex_input("#12x") == "#12"
    assert vm.color == "#000000"

    assert vm.on_hex_input("#12AB34") == "#12AB34"
    assert vm.color == "#12ab34"

    assert vm.on_hex_input("#12AB345") == "#12AB34"
    assert vm.color == "#12ab34"


def test_save_and_delete_mirror_callback_results() -> None:
    stored = []

    def save(color):
        if color not in stored:
            stored.append(color)
        return list(stored)

    def delete(color):
        if color in stored:
            stored.remove(color)
        return list(stored)

    vm = PaletteVM(on_save_color=save, on_delete_color=delete)
    vm.select("#ff0000")

    assert vm.cmd_save_current() == ("#ff0000",)
    assert vm.cmd_save_current() == ("#ff0000",)
    assert vm.is_saved("#FF0000")
    assert vm.cmd_delete("#ff0000") == ()


def test_load_skips_invalid_entries() -> None:
    vm = PaletteVM()

    vm.load(["#AABBCC", "bad"])

    assert vm.saved == ("#aabbcc",)
