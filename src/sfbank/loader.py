# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Sample loading - decodes audio files into 16-bit buffers with soundfile.

Two modes are supported:
- strict: the file must be a WAV container with PCM_16 data, and every frame
  announced by the header must be read.
- lenient: anything soundfile can decode is read and converted to int16.
"""

import soundfile as sf

from .errors import EmptyAudioError, FormatError, OpenError, ReadError
from .model import AudioBuffer

STRICT_FORMAT = "WAV"
STRICT_SUBTYPE = "PCM_16"


def load_sample(audio_path, strict=True):
    """
    Reads an audio file into an AudioBuffer.

    Args:
        audio_path: The path to the audio file.
        strict: Validate the format tag and sample count.

    Returns:
        The decoded AudioBuffer, with the decoder-reported frame count,
        channel count and sample rate.

    Raises:
        OpenError: If the file cannot be opened or decoded at all.
        FormatError: In strict mode, if the file is not 16-bit PCM WAV.
        ReadError: In strict mode, if fewer frames are read than announced.
        EmptyAudioError: If the file holds no frames.
    """
    try:
        snd = sf.SoundFile(str(audio_path))
    except (RuntimeError, OSError) as e:
        # LibsndfileError derives from RuntimeError
        raise OpenError(audio_path, str(e)) from e

    with snd:
        if strict and (snd.format != STRICT_FORMAT or snd.subtype != STRICT_SUBTYPE):
            raise FormatError(audio_path, f"{snd.format}/{snd.subtype}, expected {STRICT_FORMAT}/{STRICT_SUBTYPE}")

        declared_frames = snd.frames
        channels = snd.channels
        sample_rate = snd.samplerate

        try:
            data = snd.read(dtype="int16", always_2d=True)
        except (RuntimeError, OSError) as e:
            raise ReadError(audio_path, str(e)) from e

    if strict and len(data) != declared_frames:
        raise ReadError(audio_path, f"read {len(data)} of {declared_frames} frames")

    if data.size == 0:
        raise EmptyAudioError(audio_path)

    return AudioBuffer(
        samples=data.reshape(-1),
        channels=channels,
        frames=len(data),
        sample_rate=sample_rate,
    )
