# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Exceptions raised while building a SoundFont bank.

Per-sample errors derive from `SampleError` and may be skipped by the
assembler; the remaining errors end the run.
"""


class SoundFontBankError(Exception):
    """Base class for all sfbank errors."""


class ConfigError(SoundFontBankError):
    """Invalid build options or bank metadata."""


class BankStateError(SoundFontBankError):
    """The assembler cannot perform an operation in its current state."""


class SampleError(SoundFontBankError):
    """A single input file could not be turned into a preset."""

    reason = "sample error"

    def __init__(self, path, detail=None):
        self.path = str(path)
        self.detail = detail
        self.summary = f"{self.reason} ({detail})" if detail else self.reason
        super().__init__(f"{self.summary}: {self.path}")


class OpenError(SampleError):
    reason = "cannot open audio file"


class FormatError(SampleError):
    reason = "unsupported audio format"


class ReadError(SampleError):
    reason = "incomplete sample data"


class EmptyAudioError(SampleError):
    reason = "no audio frames"


class EmptyBankError(SoundFontBankError):
    """No preset made it into the bank."""


class OutputOpenError(SoundFontBankError):
    """The output file could not be created."""


class SerializationError(SoundFontBankError):
    """The bank could not be written or does not read back as assembled."""
