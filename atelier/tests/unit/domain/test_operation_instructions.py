from __future__ import annotations

import pytest

from atelier.domain.operations import (
    DEFAULT_TARGET,
    REMOVE_BACKGROUND_INSTRUCTION,
    TARGET_PRESETS,
    CustomPrompt,
    GenerateVideo,
    Recolor,
    RemoveBackground,
    build_instruction,
    describe,
    is_video_operation,
)


def test_target_presets_map_labels_to_english_values() -> None:
    values = [preset.value for preset in TARGET_PRESETS]

    assert len(TARGET_PRESETS) == 9
    assert values[0] == DEFAULT_TARGET
    assert "Background" in values


def test_recolor_instruction_mentions_target_and_normalized_hex() -> None:
    text = build_instruction(Recolor("Shirt", "#FF0000"))

    assert text.startswith("Recolor Shirt to hex #ff0000.")
    assert "realistic textures" in text


def test_recolor_requires_target_and_valid_hex() -> None:
    with pytest.raises(ValueError):
        Recolor("  ", "#ff0000")
    with pytest.raises(ValueError):
        Recolor("Dress", "red")


def test_other_instructions() -> None:
    assert build_instruction(RemoveBackground()) == REMOVE_BACKGROUND_INSTRUCTION
    assert build_instruction(CustomPrompt("make it denim")) == "make it denim"
    assert build_instruction(GenerateVideo("catwalk")) == "catwalk"


def test_empty_prompts_are_rejected() -> None:
    with pytest.raises(ValueError):
        CustomPrompt("   ")
    with pytest.raises(ValueError):
        GenerateVideo("")


def test_only_video_descriptor_is_video_operation() -> None:
    assert is_video_operation(GenerateVideo("x"))
    assert not is_video_operation(RemoveBackground())
    assert describe(Recolor("Bag", "#000000")) == "recolor Bag #000000"


def test_build_instruction_rejects_unknown_descriptor() -> None:
    with pytest.raises(TypeError):
        build_instruction("recolor")
