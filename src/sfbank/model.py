# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
In-memory SoundFont bank: samples, instruments and presets.

A Bank owns its samples, instruments and presets. Instrument zones refer to
samples and preset zones refer to instruments by object, and the writer turns
those references into indices.
"""

from dataclasses import dataclass, field

import numpy as np

from .config import BankInfo
from .constants import (
    DEFAULT_ROOT_KEY,
    DEFAULT_SAMPLE_RATE,
    MAX_PRESETS_PER_BANK,
    PITCH_CORRECTION_NONE,
    SAMPLE_TYPE_MONO,
)
from .errors import BankStateError, SerializationError


@dataclass
class AudioBuffer:
    """
    Decoded 16-bit audio, interleaved by channel.

    Attributes:
        samples: One-dimensional int16 array of `frames * channels` values.
        channels: Channel count reported by the decoder.
        frames: Frame count reported by the decoder.
        sample_rate: Sample rate reported by the decoder.
    """

    samples: np.ndarray
    channels: int
    frames: int
    sample_rate: int = DEFAULT_SAMPLE_RATE

    def __post_init__(self):
        self.samples = np.ascontiguousarray(self.samples, dtype=np.int16).reshape(-1)
        if self.channels < 1:
            raise ValueError(f"Channel count must be positive, got {self.channels}")
        if len(self.samples) == 0:
            raise ValueError("Audio buffer is empty")
        if len(self.samples) % self.channels:
            raise ValueError(
                f"Buffer length {len(self.samples)} is not a multiple of {self.channels} channels"
            )

    def __len__(self):
        return len(self.samples)


@dataclass(eq=False)
class SampleRecord:
    """
    A named sample with its playback metadata, as stored in the shdr chunk.

    Loop points are relative to the start of the sample.
    """

    name: str
    data: np.ndarray
    sample_rate: int = DEFAULT_SAMPLE_RATE
    original_key: int = DEFAULT_ROOT_KEY
    correction: int = PITCH_CORRECTION_NONE
    loop_start: int = 0
    loop_end: int | None = None
    sample_type: int = SAMPLE_TYPE_MONO

    def __post_init__(self):
        # The record owns its data
        self.data = np.array(self.data, dtype=np.int16).reshape(-1)
        if self.loop_end is None:
            self.loop_end = len(self.data)

    def __len__(self):
        return len(self.data)


@dataclass(eq=False)
class InstrumentZone:
    """
    One zone of an instrument: a sample plus its generator values.

    `loop_start` and `loop_end` are the loop bounds this zone plays; when they
    differ from the sample's own loop points the writer emits loop offset
    generators for the difference.
    """

    sample: SampleRecord
    generators: dict = field(default_factory=dict)
    loop_start: int = 0
    loop_end: int = 0


@dataclass(eq=False)
class Instrument:
    name: str
    zones: list = field(default_factory=list)


@dataclass(eq=False)
class PresetZone:
    instrument: Instrument
    generators: dict = field(default_factory=dict)


@dataclass(eq=False)
class Preset:
    name: str
    bank: int
    program: int
    zones: list = field(default_factory=list)

    @property
    def slot(self):
        return self.bank, self.program


@dataclass(eq=False)
class Bank:
    """
    The root aggregate handed to the writer.
    """

    info: BankInfo = field(default_factory=BankInfo)
    samples: list = field(default_factory=list)
    instruments: list = field(default_factory=list)
    presets: list = field(default_factory=list)
    frozen: bool = False

    def add(self, sample, instrument, preset):
        """
        Registers a sample, its instrument and its preset as one unit.

        Everything is checked before the first list is touched, so a rejected
        triple leaves the bank unchanged.

        Raises:
            BankStateError: If the bank is frozen, the preset slot is taken or
                the triple does not reference itself consistently.
        """
        if self.frozen:
            raise BankStateError("Cannot add to a finalized bank")

        if any(p.slot == preset.slot for p in self.presets):
            raise BankStateError(
                f"Preset slot {preset.bank}:{preset.program} is already used"
            )
        if self.presets_in_bank(preset.bank) >= MAX_PRESETS_PER_BANK:
            raise BankStateError(
                f"Bank {preset.bank} already holds {MAX_PRESETS_PER_BANK} presets"
            )
        if not all(zone.instrument is instrument for zone in preset.zones):
            raise BankStateError(f"Preset \"{preset.name}\" does not reference its instrument")
        if not all(zone.sample is sample for zone in instrument.zones):
            raise BankStateError(f"Instrument \"{instrument.name}\" does not reference its sample")

        self.samples.append(sample)
        self.instruments.append(instrument)
        self.presets.append(preset)

    def presets_in_bank(self, bank_number):
        return sum(1 for p in self.presets if p.bank == bank_number)

    def freeze(self):
        """
        Makes the bank read-only; the entity lists become tuples.
        """
        self.samples = tuple(self.samples)
        self.instruments = tuple(self.instruments)
        self.presets = tuple(self.presets)
        self.frozen = True

    def validate(self):
        """
        Checks the structural invariants the writer relies on.

        Raises:
            SerializationError: On the first violated invariant.
        """
        sample_ids = {id(s) for s in self.samples}
        instrument_ids = {id(i) for i in self.instruments}

        slots = set()
        per_bank = {}
        for preset in self.presets:
            if preset.slot in slots:
                raise SerializationError(
                    f"Duplicate preset slot {preset.bank}:{preset.program}"
                )
            slots.add(preset.slot)
            per_bank[preset.bank] = per_bank.get(preset.bank, 0) + 1
            if per_bank[preset.bank] > MAX_PRESETS_PER_BANK:
                raise SerializationError(
                    f"Bank {preset.bank} holds more than {MAX_PRESETS_PER_BANK} presets"
                )
            for zone in preset.zones:
                if id(zone.instrument) not in instrument_ids:
                    raise SerializationError(
                        f"Preset \"{preset.name}\" references an unregistered instrument"
                    )

        for instrument in self.instruments:
            for zone in instrument.zones:
                if id(zone.sample) not in sample_ids:
                    raise SerializationError(
                        f"Instrument \"{instrument.name}\" references an unregistered sample"
                    )
                if not 0 <= zone.loop_start <= zone.loop_end <= len(zone.sample):
                    raise SerializationError(
                        f"Instrument \"{instrument.name}\" has loop bounds outside its sample"
                    )
