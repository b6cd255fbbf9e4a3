from __future__ import annotations

import re

from sfbank.naming import sanitize_preset_name


def test_replaces_disallowed_characters() -> None:
    assert sanitize_preset_name("Kick Drum #1.wav") == "Kick_Drum__1"


def test_uses_base_name_without_extension() -> None:
    assert sanitize_preset_name("/some/dir/bass-01_a.wav") == "bass-01_a"
    assert sanitize_preset_name("pad.take2.wav") == "pad_take2"


def test_truncates_to_128_characters() -> None:
    name = sanitize_preset_name("x" * 300 + ".wav")
    assert len(name) == 128


def test_only_legal_characters_remain() -> None:
    name = sanitize_preset_name("Ünïcødé (äöü) [v2] ~ 100%.wav")
    assert re.fullmatch(r"[A-Za-z0-9_-]*", name)
    assert len(name) <= 128


def test_empty_base_name_is_empty_string() -> None:
    assert sanitize_preset_name("") == ""
