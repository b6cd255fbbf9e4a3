# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Bank metadata and build options.

`BankInfo` mirrors the keys of an `info.json` metadata file. `BuildOptions`
collects the policy switches of the assembly pipeline.
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path

from .constants import (
    DEFAULT_BANK_NUMBER,
    DEFAULT_REVERB_SEND,
    DEFAULT_ROOT_KEY,
    PITCH_CORRECTION_NONE,
)
from .errors import ConfigError

FAILURE_SKIP = "skip"
FAILURE_ABORT = "abort"
FAILURE_POLICIES = (FAILURE_SKIP, FAILURE_ABORT)


@dataclass(frozen=True)
class BankInfo:
    """
    Process-wide metadata written to the INFO list of the bank.
    """

    sound_engine: str = "EMU8000"
    bank_name: str = "Chipsound"
    rom_name: str | None = "ROM"
    rom_version: str = "1.00"
    version: str = "2.01"
    creation_date: str | None = None
    engineer: str | None = None
    product: str | None = None
    copyright: str | None = None
    comment: str | None = None
    software: str | None = "sfbank"

    def __post_init__(self):
        major, _ = _parse_version(self.version, "SoundFont version")
        if major != 2:
            raise ConfigError(f"Only SoundFont 2.x banks can be written, got {self.version}")
        _parse_version(self.rom_version, "ROM version")

    @property
    def version_tuple(self):
        return _parse_version(self.version, "SoundFont version")

    @property
    def rom_version_tuple(self):
        return _parse_version(self.rom_version, "ROM version")

    @classmethod
    def load(cls, info_path):
        """
        Loads bank metadata from a JSON file.

        Keys that are not fields of BankInfo are ignored, and null values
        keep the field's default.

        Args:
            info_path: Path to the JSON file.

        Returns:
            A BankInfo instance.
        """
        info_path = Path(info_path)
        if not info_path.exists():
            raise ConfigError(f"Info file not found: {info_path}")

        try:
            with open(info_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read info file {info_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Info file {info_path} must contain a JSON object")

        known = {field.name for field in fields(cls)}
        values = {
            key: str(value) for key, value in data.items()
            if key in known and value is not None
        }
        return cls(**values)


def _parse_version(text, label):
    """
    Parses a "major.minor" string whose parts fit in the unsigned 16-bit
    fields of an ifil/iver chunk.
    """
    try:
        major, minor = (int(part) for part in str(text).split("."))
    except ValueError:
        raise ConfigError(f"Invalid {label} \"{text}\"")

    if not (0 <= major <= 0xFFFF and 0 <= minor <= 0xFFFF):
        raise ConfigError(f"{label} \"{text}\" does not fit in 16-bit fields")
    return major, minor


@dataclass(frozen=True)
class BuildOptions:
    """
    Policy switches for loading samples and assembling the bank.

    Attributes:
        strict: Validate the WAV/PCM_16 format tag and the read sample count.
        failure_policy: "skip" logs a failed file and continues, "abort" stops the run.
        bank_number: MIDI bank used for every preset.
        root_key: MIDI key at which samples play at their recorded pitch.
        pitch_correction: Pitch correction in cents stored in each sample header.
        reverb_send: reverbEffectsSend amount in 0.1% units; 0 or None omits it.
        native_rate: Write the decoder-reported sample rate instead of 44100 Hz.
        exclude_header_only: Drop candidate files too small to hold any audio.
            Defaults to the value of `strict`.
        jobs: Number of worker threads used to decode samples.
    """

    strict: bool = True
    failure_policy: str = FAILURE_SKIP
    bank_number: int = DEFAULT_BANK_NUMBER
    root_key: int = DEFAULT_ROOT_KEY
    pitch_correction: int = PITCH_CORRECTION_NONE
    reverb_send: int | None = DEFAULT_REVERB_SEND
    native_rate: bool = False
    exclude_header_only: bool | None = None
    jobs: int = 1

    def __post_init__(self):
        if self.exclude_header_only is None:
            object.__setattr__(self, "exclude_header_only", self.strict)

        if self.failure_policy not in FAILURE_POLICIES:
            raise ConfigError(f"Unknown failure policy \"{self.failure_policy}\"")
        if not 0 <= self.bank_number <= 128:
            raise ConfigError(f"Bank number must be between 0 and 128, got {self.bank_number}")
        if not 0 <= self.root_key <= 127:
            raise ConfigError(f"Root key must be between 0 and 127, got {self.root_key}")
        if not -128 <= self.pitch_correction <= 127:
            raise ConfigError(f"Pitch correction must fit in a signed byte, got {self.pitch_correction}")
        if self.reverb_send is not None and not 0 <= self.reverb_send <= 1000:
            raise ConfigError(f"Reverb send must be between 0 and 1000, got {self.reverb_send}")
        if self.jobs < 1:
            raise ConfigError(f"Jobs must be at least 1, got {self.jobs}")

    @property
    def abort_on_error(self):
        return self.failure_policy == FAILURE_ABORT
