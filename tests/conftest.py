from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf


def make_tone(frames: int, channels: int = 1, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    shape = (frames,) if channels == 1 else (frames, channels)
    return rng.integers(-20000, 20000, size=shape, dtype=np.int16)


@pytest.fixture
def write_wav():
    """Writes a WAV file and returns its path."""

    def _write(path: Path, frames: int = 64, channels: int = 1, subtype: str = "PCM_16",
               samplerate: int = 44100, seed: int = 0) -> Path:
        data = make_tone(frames, channels, seed)
        sf.write(str(path), data, samplerate, subtype=subtype, format="WAV")
        return path

    return _write


@pytest.fixture
def sample_dir(tmp_path: Path, write_wav) -> Path:
    """A directory with four valid mono samples."""
    d = tmp_path / "samples"
    d.mkdir()
    for i, name in enumerate(["Kick.wav", "Snare.wav", "Hat Open.wav", "Tom #2.wav"]):
        write_wav(d / name, frames=100 + i * 10, seed=i)
    return d
