from __future__ import annotations

import pytest

from atelier.domain.entities import ArtifactState, Point
from atelier.viewmodels.viewport_vm import MAX_SCALE, MIN_SCALE, ViewportTransform, ViewportVM


def test_wheel_zooms_and_clamps() -> None:
    vm = ViewportVM()

    assert vm.on_wheel(-100) == pytest.approx(1.15)
    assert vm.on_wheel(-100000) == MAX_SCALE
    assert vm.on_wheel(100000) == MIN_SCALE


def test_drag_pans_relative_to_anchor() -> None:
    changes = []
    vm = ViewportVM(on_changed=changes.append)

    assert vm.on_drag_start(Point(10, 10)) is True
    assert vm.on_drag_move(Point(40, 30)) is True
    vm.on_drag_end()

    assert vm.translate == Point(30, 20)
    assert changes[-1] == ViewportTransform(1.0, Point(30, 20))

    vm.on_drag_start(Point(100, 100))
    vm.on_drag_move(Point(110, 100))
    assert vm.translate == Point(40, 20)


def test_move_without_drag_is_ignored() -> None:
    vm = ViewportVM()

    assert vm.on_drag_move(Point(50, 50)) is False
    assert vm.translate == Point(0, 0)


def test_pointer_leave_ends_drag() -> None:
    vm = ViewportVM()
    vm.on_drag_start(Point(0, 0))

    vm.on_drag_cancel()

    assert not vm.drag.dragging
    assert vm.on_drag_move(Point(80, 80)) is False


def test_only_primary_button_starts_drag() -> None:
    vm = ViewportVM()

    assert vm.on_drag_start(Point(0, 0), button=2) is False
    assert not vm.drag.dragging


def test_reset_restores_identity() -> None:
    vm = ViewportVM()
    vm.on_wheel(-200)
    vm.on_drag_start(Point(0, 0))
    vm.on_drag_move(Point(5, 5))

    vm.reset()

    assert vm.scale == 1.0
    assert vm.translate == Point(0, 0)
    assert not vm.drag.dragging
    assert vm.css_transform() == "translate(0px, 0px) scale(1)"


def test_compare_shows_origin_only_while_held() -> None:
    vm = ViewportVM()
    origin = ArtifactState(b"o", "image/png")
    current = ArtifactState(b"c", "image/png")

    vm.press_compare()
    assert vm.displayed(current, origin) == origin
    assert vm.displayed(current, None) == current

    vm.release_compare()
    assert vm.displayed(current, origin) == current
