# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Command-line interface for sfbank.

Builds a SoundFont bank from every .wav file of a directory:

    sfbank samples/ -o drums.sf2

`main` can be used as a console_scripts entry point.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .assembler import BankAssembler, collect_candidates
from .config import FAILURE_ABORT, FAILURE_SKIP, BankInfo, BuildOptions
from .constants import DEFAULT_OUTPUT_NAME, DEFAULT_REVERB_SEND, PITCH_CORRECTION_NONE
from .serializer import verify_bank_file, write_bank


def _build_parser():
    p = argparse.ArgumentParser(prog="sfbank", description="Build a SoundFont bank from a directory of WAV samples")
    p.add_argument("input_directory", help="Directory containing mono 16-bit PCM .wav files")
    p.add_argument("-o", "--output", default=DEFAULT_OUTPUT_NAME, help=f"Output SoundFont file (default: {DEFAULT_OUTPUT_NAME})")
    p.add_argument("--lenient", action="store_true", help="Read any format the decoder supports, without format or length checks")
    p.add_argument("--abort-on-error", action="store_true", help="Stop at the first file that cannot be loaded instead of skipping it")
    p.add_argument("--info", metavar="JSON", help="JSON file with bank metadata (bank_name, sound_engine, rom_name, ...)")
    p.add_argument("--reverb-send", type=int, default=DEFAULT_REVERB_SEND, metavar="AMOUNT", help=f"Reverb send in 0.1%% units, 0 to omit (default: {DEFAULT_REVERB_SEND})")
    p.add_argument("--pitch-correction", type=int, default=PITCH_CORRECTION_NONE, metavar="CENTS", help="Pitch correction stored in every sample header (default: 0)")
    p.add_argument("--native-rate", action="store_true", help="Keep each file's sample rate instead of 44100 Hz")
    p.add_argument("-j", "--jobs", type=int, default=1, help="Number of threads used to decode samples (default: 1)")
    p.add_argument("--verify", action="store_true", help="Read the written file back and check its presets")
    p.add_argument("-v", "--verbose", action="store_true", help="Print progress information")
    return p


def main(argv=None):
    """
    Entry point for `sfbank` and `python -m sfbank`.

    Returns exit code (0 on success).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        input_dir = Path(args.input_directory)
        if not input_dir.is_dir():
            raise NotADirectoryError(f"Invalid directory: {input_dir}")

        info = BankInfo.load(args.info) if args.info else BankInfo()
        options = BuildOptions(
            strict=not args.lenient,
            failure_policy=FAILURE_ABORT if args.abort_on_error else FAILURE_SKIP,
            reverb_send=args.reverb_send,
            pitch_correction=args.pitch_correction,
            native_rate=args.native_rate,
            jobs=args.jobs,
        )

        candidates = collect_candidates(input_dir, exclude_header_only=options.exclude_header_only)
        if args.verbose:
            print(f"Collecting samples from: {input_dir} ({len(candidates)} candidate files)")

        assembler = BankAssembler(info, options)
        assembler.add_candidates(candidates)
        bank = assembler.finalize()

        output = Path(args.output)
        if args.verbose:
            print(f"Writing SoundFont file: {output}")
        count = write_bank(bank, output)

        if args.verify:
            verify_bank_file(output, bank)
            if args.verbose:
                print(f"Verified: {output}")

        summary = f"Created {output} with {count} presets"
        if assembler.skipped:
            summary += f" ({len(assembler.skipped)} skipped)"
        print(summary)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
