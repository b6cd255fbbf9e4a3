# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

from .assembler import BankAssembler, assemble_bank, collect_candidates
from .config import BankInfo, BuildOptions
from .errors import (
    BankStateError,
    ConfigError,
    EmptyAudioError,
    EmptyBankError,
    FormatError,
    OpenError,
    OutputOpenError,
    ReadError,
    SampleError,
    SerializationError,
    SoundFontBankError,
)
from .loader import load_sample
from .naming import sanitize_preset_name
from .reader import SoundFontReader
from .serializer import verify_bank_file, write_bank
from .writer import SoundFontWriter

__all__ = [
    "BankAssembler",
    "BankInfo",
    "BankStateError",
    "BuildOptions",
    "ConfigError",
    "EmptyAudioError",
    "EmptyBankError",
    "FormatError",
    "OpenError",
    "OutputOpenError",
    "ReadError",
    "SampleError",
    "SerializationError",
    "SoundFontBankError",
    "SoundFontReader",
    "SoundFontWriter",
    "assemble_bank",
    "collect_candidates",
    "load_sample",
    "sanitize_preset_name",
    "verify_bank_file",
    "write_bank",
]
