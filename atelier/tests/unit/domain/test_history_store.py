from __future__ import annotations

import random

import pytest

from atelier.domain.entities import ArtifactState
from atelier.domain.history import HistoryStore


def _art(tag: str) -> ArtifactState:
    return ArtifactState(payload=tag.encode("utf-8"), mime_type="image/png")


def test_empty_store_has_no_current_and_no_navigation() -> None:
    store = HistoryStore()

    assert store.current() is None
    assert store.pointer == -1
    assert not store.can_undo()
    assert not store.can_redo()


def test_set_origin_resets_timeline() -> None:
    store = HistoryStore()
    store.set_origin(_art("a"))
    store.commit(_art("b"))

    store.set_origin(_art("c"))

    assert store.origin == _art("c")
    assert store.timeline == ()
    assert store.pointer == -1
    assert store.current() == _art("c")


def test_commit_appends_and_moves_pointer() -> None:
    store = HistoryStore()
    store.set_origin(_art("o"))

    assert store.commit(_art("1")) == 0
    assert store.commit(_art("2")) == 1
    assert store.current() == _art("2")
    assert len(store) == 2


def test_undo_to_origin_then_redo() -> None:
    store = HistoryStore()
    store.set_origin(_art("o"))
    store.commit(_art("1"))

    assert store.undo() is True
    assert store.current() == _art("o")
    assert store.undo() is False
    assert store.redo() is True
    assert store.current() == _art("1")
    assert store.redo() is False


def test_commit_after_undo_truncates_redo_branch() -> None:
    store = HistoryStore()
    store.set_origin(_art("o"))
    store.commit(_art("1"))
    store.commit(_art("2"))
    store.commit(_art("3"))
    store.undo()
    store.undo()

    store.commit(_art("x"))

    assert store.timeline == (_art("1"), _art("x"))
    assert store.pointer == 1
    assert not store.can_redo()


def test_undo_redo_never_change_timeline_contents() -> None:
    store = HistoryStore()
    store.set_origin(_art("o"))
    for tag in ("1", "2", "3"):
        store.commit(_art(tag))
    snapshot = store.timeline

    store.undo()
    store.undo()
    store.redo()

    assert store.timeline == snapshot
    assert -1 <= store.pointer < len(store)


@pytest.mark.parametrize("seed", range(5))
def test_random_walk_keeps_pointer_in_bounds(seed: int) -> None:
    rng = random.Random(seed)
    store = HistoryStore()
    store.set_origin(_art("origin"))
    expected = []
    pointer = -1

    for step in range(300):
        action = rng.choice(("commit", "undo", "redo"))
        if action == "commit":
            art = _art(f"s{step}")
            del expected[pointer + 1:]
            expected.append(art)
            pointer += 1
            assert store.commit(art) == pointer
        elif action == "undo":
            moved = store.undo()
            assert moved == (pointer >= 0)
            if moved:
                pointer -= 1
        else:
            moved = store.redo()
            assert moved == (pointer < len(expected) - 1)
            if moved:
                pointer += 1

        assert -1 <= store.pointer < len(store.timeline)
        assert store.pointer == pointer
        assert list(store.timeline) == expected
        assert store.can_undo() == (pointer >= 0)
        assert store.can_redo() == (pointer < len(expected) - 1)
        assert store.current() == (expected[pointer] if pointer >= 0 else _art("origin"))
