# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Zone building - turns a decoded sample into the sample/instrument/preset
objects of one playable program.
"""

from .config import BuildOptions
from .constants import DEFAULT_SAMPLE_RATE, SAMPLE_MODE_LOOP_CONTINUOUSLY
from .errors import EmptyAudioError
from .model import Instrument, InstrumentZone, Preset, PresetZone, SampleRecord


def build_sample_record(name, audio, options=None, source=None):
    """
    Creates a SampleRecord owning a copy of the decoded audio.

    The loop spans the whole sample.

    Args:
        name: The sample name.
        audio: The decoded AudioBuffer.
        options: BuildOptions with the root key, pitch correction and rate policy.
        source: Path reported if the audio is empty.
    """
    options = options or BuildOptions()

    if len(audio) == 0:
        raise EmptyAudioError(source or name)

    sample_rate = audio.sample_rate if options.native_rate else DEFAULT_SAMPLE_RATE

    return SampleRecord(
        name=name,
        data=audio.samples,
        sample_rate=sample_rate,
        original_key=options.root_key,
        correction=options.pitch_correction,
        loop_start=0,
        loop_end=len(audio.samples),
    )


def build_zones(sample, options=None):
    """
    Wraps a sample in a single-zone instrument and a preset zone.

    The instrument zone loops the sample continuously from its loop start to
    its loop end and optionally carries a reverb send.

    Args:
        sample: A SampleRecord.
        options: BuildOptions with the reverb send amount.

    Returns:
        A tuple of (instrument, preset_zone).
    """
    options = options or BuildOptions()

    if len(sample) == 0:
        raise EmptyAudioError(sample.name)

    generators = {"sampleModes": SAMPLE_MODE_LOOP_CONTINUOUSLY}
    if options.reverb_send:
        generators["reverbEffectsSend"] = options.reverb_send

    inst_zone = InstrumentZone(
        sample=sample,
        generators=generators,
        loop_start=sample.loop_start,
        loop_end=sample.loop_end,
    )

    instrument = Instrument(name=sample.name, zones=[inst_zone])
    return instrument, PresetZone(instrument=instrument)


def build_preset(name, bank, program, preset_zone):
    return Preset(name=name, bank=bank, program=program, zones=[preset_zone])
