# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Writes a finalized Bank to disk and checks the result.

The bank is written to a temporary file created exclusively next to the
target and moved into place only once the writer has finished, so a failed
run never leaves a complete-looking output file behind.
"""

import os
import struct
import tempfile
from pathlib import Path

from .errors import BankStateError, OutputOpenError, SerializationError
from .reader import SoundFontReader
from .writer import SoundFontWriter


def write_bank(bank, output_path):
    """
    Serializes a bank to an SF2 file.

    Args:
        bank: A finalized Bank.
        output_path: The SF2 file to create or replace.

    Returns:
        The number of presets written.

    Raises:
        BankStateError: If the bank has not been finalized.
        OutputOpenError: If the output file cannot be created.
        SerializationError: If the bank cannot be serialized or written.
    """
    if not bank.frozen:
        raise BankStateError("Only a finalized bank can be written")

    output_path = Path(output_path)
    if output_path.is_dir():
        raise OutputOpenError(f"Output path is a directory: {output_path}")

    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".part", dir=output_path.parent
        )
    except OSError as e:
        raise OutputOpenError(f"Cannot create output file {output_path}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            SoundFontWriter(bank).write(f)
        # mkstemp creates the file as 0600
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, output_path)
    except SerializationError:
        raise
    except (OSError, ValueError, KeyError, struct.error) as e:
        raise SerializationError(f"Failed to write {output_path}: {e}") from e
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)

    return len(bank.presets)


def verify_bank_file(output_path, bank):
    """
    Re-reads a written file and compares its presets with the bank.

    Returns:
        The number of presets found in the file.

    Raises:
        SerializationError: If the file cannot be parsed or its preset
            count or (bank, program) pairs differ from the bank's.
    """
    try:
        reader = SoundFontReader(output_path).parse()
    except (OSError, ValueError, EOFError, struct.error) as e:
        raise SerializationError(f"Cannot read back {output_path}: {e}") from e

    headers = reader.get_preset_headers()
    written = sorted((h["bank"], h["preset"]) for h in headers)
    expected = sorted(p.slot for p in bank.presets)

    if len(written) != len(expected):
        raise SerializationError(
            f"{output_path} holds {len(written)} presets, expected {len(expected)}"
        )
    if written != expected:
        raise SerializationError(f"{output_path} preset slots differ from the assembled bank")

    return len(headers)


def _current_umask():
    umask = os.umask(0)
    os.umask(umask)
    return umask
