from __future__ import annotations

import os
import stat
import struct
from pathlib import Path

import numpy as np
import pytest

from sfbank.assembler import assemble_bank, collect_candidates
from sfbank.config import BankInfo
from sfbank.constants import SAMPLE_PADDING
from sfbank.errors import BankStateError, OutputOpenError, SerializationError
from sfbank.model import Bank, Instrument, InstrumentZone, Preset, PresetZone, SampleRecord
from sfbank.reader import SoundFontReader
from sfbank.serializer import verify_bank_file, write_bank
from sfbank.writer import SoundFontWriter, split_offset


def _single_triple(points: int = 32, loop_start: int = 0, loop_end: int | None = None):
    sample = SampleRecord(name="one", data=np.arange(points, dtype=np.int16))
    zone = InstrumentZone(sample=sample, generators={"sampleModes": 1}, loop_start=loop_start,
                          loop_end=points if loop_end is None else loop_end)
    instrument = Instrument(name="one", zones=[zone])
    preset = Preset(name="one", bank=0, program=0, zones=[PresetZone(instrument=instrument)])
    return sample, instrument, preset


def _single_bank(points: int = 32, **zone_kwargs) -> Bank:
    bank = Bank()
    bank.add(*_single_triple(points, **zone_kwargs))
    bank.freeze()
    return bank


def test_round_trip_preserves_presets_and_samples(sample_dir: Path, tmp_path: Path) -> None:
    bank, _ = assemble_bank(collect_candidates(sample_dir))
    out = tmp_path / "out.sf2"

    assert write_bank(bank, out) == 4
    reader = SoundFontReader(out).parse()

    presets = reader.get_preset_headers()
    assert [(h["bank"], h["preset"]) for h in presets] == [p.slot for p in bank.presets]
    assert [h["name"] for h in presets] == ["Hat_Open", "Kick", "Snare", "Tom__2"]

    headers = reader.get_sample_headers()
    assert len(headers) == 4
    for header, sample in zip(headers, bank.samples):
        assert header["end"] - header["start"] == len(sample)
        assert header["start_loop"] == header["start"]
        assert header["end_loop"] == header["end"]
        assert header["sample_rate"] == 44100
        assert header["original_key"] == 60
        assert header["correction"] == 0
        assert header["sample_type"] == 1
        np.testing.assert_array_equal(reader.get_sample_points(header), sample.data)

    # Samples are separated by the mandatory zero padding
    assert headers[1]["start"] == headers[0]["end"] + SAMPLE_PADDING

    for idx, preset in enumerate(presets):
        assert reader.get_preset_zones(idx) == [{"instrument": idx}]
        assert reader.get_instrument_zones(idx) == [
            {"sampleModes": 1, "reverbEffectsSend": 618, "sampleID": idx}
        ]


def test_info_list(tmp_path: Path) -> None:
    bank = _single_bank()
    bank.info = BankInfo(bank_name="Drums", comment="made in tests", software="sfbank")
    out = tmp_path / "info.sf2"
    write_bank(bank, out)

    info = SoundFontReader(out).parse().info_data
    assert info["version"] == "2.01"
    assert info["sound_engine"] == "EMU8000"
    assert info["bank_name"] == "Drums"
    assert info["rom_name"] == "ROM"
    assert info["rom_version"] == "1.00"
    assert info["comment"] == "made in tests"
    assert info["software"] == "sfbank"


def test_riff_size_matches_file(tmp_path: Path) -> None:
    out = tmp_path / "size.sf2"
    write_bank(_single_bank(points=33), out)

    raw = out.read_bytes()
    assert raw[:4] == b"RIFF"
    assert raw[8:12] == b"sfbk"
    assert struct.unpack("<I", raw[4:8])[0] == len(raw) - 8
    assert len(raw) % 2 == 0


def test_zone_loop_differing_from_sample_emits_offsets(tmp_path: Path) -> None:
    out = tmp_path / "loop.sf2"
    write_bank(_single_bank(points=100, loop_start=10, loop_end=90), out)

    zones = SoundFontReader(out).parse().get_instrument_zones(0)
    assert zones[0]["startloopAddrsOffset"] == 10
    assert zones[0]["endloopAddrsOffset"] == -10
    assert zones[0]["sampleID"] == 0


def test_split_offset() -> None:
    assert split_offset(-10) == (0, -10)
    assert split_offset(40000) == (1, 40000 - 32768)
    coarse, fine = split_offset(-40000)
    assert coarse * 32768 + fine == -40000


def test_invalid_bank_is_not_written(tmp_path: Path) -> None:
    _, instrument, preset = _single_triple()
    # The instrument points at a sample the bank does not hold
    bank = Bank(instruments=[instrument], presets=[preset])
    bank.freeze()
    out = tmp_path / "bad.sf2"

    with pytest.raises(SerializationError):
        write_bank(bank, out)
    assert not out.exists()
    assert list(tmp_path.iterdir()) == []


def test_output_in_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(OutputOpenError):
        write_bank(_single_bank(), tmp_path / "missing" / "out.sf2")


def test_output_is_a_directory(tmp_path: Path) -> None:
    with pytest.raises(OutputOpenError):
        write_bank(_single_bank(), tmp_path)


def test_verify_detects_mismatch(sample_dir: Path, tmp_path: Path) -> None:
    bank, _ = assemble_bank(collect_candidates(sample_dir))
    out = tmp_path / "v.sf2"
    write_bank(bank, out)

    assert verify_bank_file(out, bank) == 4

    other = _single_bank()
    with pytest.raises(SerializationError):
        verify_bank_file(out, other)


def test_writer_reports_size(tmp_path: Path) -> None:
    out = tmp_path / "w.sf2"
    with open(out, "wb") as f:
        size = SoundFontWriter(_single_bank()).write(f)
    assert size == out.stat().st_size


def test_unfinalized_bank_is_rejected(tmp_path: Path) -> None:
    bank = Bank()
    bank.add(*_single_triple())
    out = tmp_path / "open.sf2"

    with pytest.raises(BankStateError):
        write_bank(bank, out)
    assert not out.exists()


def test_finalized_bank_lists_are_read_only() -> None:
    bank = _single_bank()
    assert isinstance(bank.samples, tuple)
    assert isinstance(bank.instruments, tuple)
    assert isinstance(bank.presets, tuple)


@pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
def test_output_mode_follows_umask(tmp_path: Path) -> None:
    out = tmp_path / "mode.sf2"
    old_umask = os.umask(0o022)
    try:
        write_bank(_single_bank(), out)
    finally:
        os.umask(old_umask)

    assert stat.S_IMODE(out.stat().st_mode) == 0o644
