from __future__ import annotations

import numpy as np
import pytest

from sfbank.config import BuildOptions
from sfbank.constants import SAMPLE_MODE_LOOP_CONTINUOUSLY
from sfbank.errors import EmptyAudioError
from sfbank.model import AudioBuffer, SampleRecord
from sfbank.zones import build_sample_record, build_zones


def _audio(frames: int, sample_rate: int = 44100) -> AudioBuffer:
    return AudioBuffer(samples=np.ones(frames, dtype=np.int16), channels=1, frames=frames,
                       sample_rate=sample_rate)


@pytest.mark.parametrize("frames", [1, 7, 1000, 70000])
def test_loop_spans_whole_sample(frames: int) -> None:
    sample = build_sample_record("s", _audio(frames))
    instrument, preset_zone = build_zones(sample)

    zone = instrument.zones[0]
    assert zone.loop_start == 0
    assert zone.loop_end == frames
    assert sample.loop_start == 0
    assert sample.loop_end == frames
    assert preset_zone.instrument is instrument


def test_fixed_playback_policy() -> None:
    sample = build_sample_record("s", _audio(10, sample_rate=22050))
    instrument, _ = build_zones(sample)

    assert sample.original_key == 60
    assert sample.correction == 0
    assert sample.sample_rate == 44100
    assert instrument.zones[0].generators["sampleModes"] == SAMPLE_MODE_LOOP_CONTINUOUSLY
    assert instrument.zones[0].generators["reverbEffectsSend"] == 618
    assert instrument.name == "s"


def test_options_are_applied() -> None:
    options = BuildOptions(pitch_correction=-12, reverb_send=0, native_rate=True, root_key=48)
    sample = build_sample_record("s", _audio(10, sample_rate=22050), options)
    instrument, _ = build_zones(sample, options)

    assert sample.correction == -12
    assert sample.original_key == 48
    assert sample.sample_rate == 22050
    assert "reverbEffectsSend" not in instrument.zones[0].generators


def test_record_owns_a_copy() -> None:
    audio = _audio(10)
    sample = build_sample_record("s", audio)
    audio.samples[0] = 1234
    assert sample.data[0] == 1


def test_empty_sample_is_rejected() -> None:
    with pytest.raises(EmptyAudioError):
        build_zones(SampleRecord(name="e", data=np.zeros(0, dtype=np.int16)))


def test_audio_buffer_invariants() -> None:
    with pytest.raises(ValueError):
        AudioBuffer(samples=np.zeros(0, dtype=np.int16), channels=1, frames=0)
    with pytest.raises(ValueError):
        AudioBuffer(samples=np.zeros(3, dtype=np.int16), channels=2, frames=1)
