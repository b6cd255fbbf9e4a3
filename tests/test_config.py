from __future__ import annotations

import json
from pathlib import Path

import pytest

from sfbank.config import BankInfo, BuildOptions
from sfbank.errors import ConfigError


def test_defaults() -> None:
    info = BankInfo()
    assert (info.sound_engine, info.bank_name, info.rom_name) == ("EMU8000", "Chipsound", "ROM")
    assert info.version_tuple == (2, 1)

    options = BuildOptions()
    assert options.strict
    assert options.exclude_header_only
    assert not options.abort_on_error
    assert not BuildOptions(strict=False).exclude_header_only


def test_load_info_json(tmp_path: Path) -> None:
    path = tmp_path / "info.json"
    path.write_text(json.dumps({"bank_name": "Chips", "engineer": "me", "unknown": 1}), encoding="utf-8")

    info = BankInfo.load(path)
    assert info.bank_name == "Chips"
    assert info.engineer == "me"
    assert info.sound_engine == "EMU8000"


@pytest.mark.parametrize("content", ["not json", "[1, 2]", json.dumps({"version": "3.01"})])
def test_bad_info_json(tmp_path: Path, content: str) -> None:
    path = tmp_path / "info.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        BankInfo.load(path)


def test_missing_info_json(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        BankInfo.load(tmp_path / "nope.json")


@pytest.mark.parametrize("kwargs", [
    {"failure_policy": "retry"},
    {"pitch_correction": 200},
    {"root_key": 128},
    {"reverb_send": 2000},
    {"jobs": 0},
])
def test_invalid_options(kwargs: dict) -> None:
    with pytest.raises(ConfigError):
        BuildOptions(**kwargs)


@pytest.mark.parametrize("content", [
    {"rom_version": "one"},
    {"version": "2.70000"},
    {"rom_version": "1.2.3"},
])
def test_versions_must_fit_info_chunks(tmp_path: Path, content: dict) -> None:
    path = tmp_path / "info.json"
    path.write_text(json.dumps(content), encoding="utf-8")
    with pytest.raises(ConfigError):
        BankInfo.load(path)


def test_null_values_keep_defaults(tmp_path: Path) -> None:
    path = tmp_path / "info.json"
    path.write_text(json.dumps({"bank_name": None, "comment": None, "engineer": "me"}), encoding="utf-8")

    info = BankInfo.load(path)
    assert info.bank_name == "Chipsound"
    assert info.comment is None
    assert info.engineer == "me"
