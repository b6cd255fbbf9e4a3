# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Bank Assembler - builds a Bank from a sorted list of audio files.

Each candidate file becomes one sample, one instrument and one preset. The
candidate's position in the sorted list is its program number; bank 0 holds
at most 128 presets, and candidates past that limit are rejected without
being read.

Failed candidates are either reported and skipped, or abort the whole run,
depending on BuildOptions.failure_policy.
"""

import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import BankInfo, BuildOptions
from .constants import MAX_PRESETS_PER_BANK, WAV_HEADER_SIZE
from .errors import BankStateError, EmptyBankError, SampleError
from .loader import load_sample
from .model import Bank
from .naming import sanitize_preset_name
from .zones import build_preset, build_sample_record, build_zones


class BankState(Enum):
    EMPTY = "empty"
    POPULATING = "populating"
    FINALIZED = "finalized"


class PresetLimitReached(Exception):
    """A candidate index does not fit in the bank's preset slots."""

    def __init__(self, path, index):
        self.path = str(path)
        self.index = index
        self.summary = f"preset limit of {MAX_PRESETS_PER_BANK} reached"
        super().__init__(f"{self.summary}: {self.path}")


@dataclass
class CandidateResult:
    """
    Outcome of processing one candidate file.

    Either `sample`, `instrument` and `preset` are all set, or `error` is.
    """

    path: Path
    index: int
    name: str
    sample: object = None
    instrument: object = None
    preset: object = None
    error: Exception = None

    @property
    def ok(self):
        return self.error is None


def collect_candidates(directory, exclude_header_only=True):
    """
    Lists the .wav files of a directory, sorted by path.

    Args:
        directory: The directory to scan (not recursive).
        exclude_header_only: Drop files of 44 bytes or less, which cannot hold
            any audio after a WAV header.

    Returns:
        A sorted list of Paths.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise NotADirectoryError(f"Invalid directory: {directory}")

    candidates = []
    for path in directory.iterdir():
        if not path.is_file() or path.suffix.lower() != ".wav":
            continue
        if exclude_header_only and path.stat().st_size <= WAV_HEADER_SIZE:
            continue
        candidates.append(path)

    return sorted(candidates)


class BankAssembler:
    """
    Populates a Bank one candidate at a time.

    States: EMPTY -> POPULATING -> FINALIZED. Candidates are accepted until
    `finalize()` is called.
    """

    def __init__(self, info=None, options=None):
        self.info = info or BankInfo()
        self.options = options or BuildOptions()
        self.bank = Bank(info=self.info)
        self.state = BankState.EMPTY

        # (path, reason) of every candidate that did not become a preset
        self.skipped = []
        self._limit_reached = False

    def process(self, path, index):
        """
        Loads one candidate and builds its sample, instrument and preset.

        Nothing is added to the bank here, and per-candidate errors are
        returned in the result instead of raised.

        Args:
            path: The audio file.
            index: The candidate's position in the sorted candidate list.

        Returns:
            A CandidateResult.
        """
        name = sanitize_preset_name(path)
        result = CandidateResult(path=Path(path), index=index, name=name)

        if index >= MAX_PRESETS_PER_BANK:
            result.error = PresetLimitReached(path, index)
            return result

        try:
            audio = load_sample(path, strict=self.options.strict)
            sample = build_sample_record(name, audio, self.options, source=path)
            instrument, preset_zone = build_zones(sample, self.options)
        except SampleError as e:
            result.error = e
            return result

        result.sample = sample
        result.instrument = instrument
        result.preset = build_preset(name, self.options.bank_number, index, preset_zone)
        return result

    def commit(self, result):
        """
        Adds a processed candidate to the bank, or applies the failure policy.

        Returns:
            True if the candidate became a preset.

        Raises:
            SampleError: If the candidate failed and the policy is "abort".
            BankStateError: If the assembler is finalized.
        """
        if self.state is BankState.FINALIZED:
            raise BankStateError("Cannot add candidates to a finalized bank")

        if self._limit_reached and result.ok:
            result.error = PresetLimitReached(result.path, result.index)

        if isinstance(result.error, PresetLimitReached):
            self._limit_reached = True
            self._skip(result)
            return False

        if not result.ok:
            if self.options.abort_on_error:
                raise result.error
            self._skip(result)
            return False

        self.bank.add(result.sample, result.instrument, result.preset)
        self.state = BankState.POPULATING
        return True

    def add_candidate(self, path, index):
        """
        Processes and commits one candidate.

        Returns:
            True if the candidate became a preset.
        """
        if self.state is BankState.FINALIZED:
            raise BankStateError("Cannot add candidates to a finalized bank")

        if self._limit_reached:
            return self.commit(CandidateResult(
                path=Path(path), index=index, name=sanitize_preset_name(path),
                error=PresetLimitReached(path, index)
            ))

        return self.commit(self.process(path, index))

    def add_candidates(self, paths):
        """
        Adds candidates in list order; list position is the program number.

        With more than one job, files are decoded in worker threads and the
        results are committed in list order afterwards.

        Returns:
            The number of presets added.
        """
        paths = list(paths)
        before = len(self.bank.presets)

        if self.options.jobs <= 1 or len(paths) <= 1:
            for index, path in enumerate(paths):
                self.add_candidate(path, index)
        else:
            for result in self._process_parallel(paths):
                self.commit(result)

        return len(self.bank.presets) - before

    def _process_parallel(self, paths):
        """
        Processes candidates in a thread pool, returning results in input order.
        """
        with ThreadPoolExecutor(max_workers=self.options.jobs) as executor:
            future_to_index = {
                executor.submit(self.process, path, idx): idx
                for idx, path in enumerate(paths)
            }

            results_with_index = []
            for future in as_completed(future_to_index):
                results_with_index.append((future_to_index[future], future.result()))

        results_with_index.sort(key=lambda x: x[0])
        return [result for _, result in results_with_index]

    def finalize(self):
        """
        Freezes the bank and returns it.

        Raises:
            EmptyBankError: If no preset was added.
            BankStateError: If the assembler is already finalized.
        """
        if self.state is BankState.FINALIZED:
            raise BankStateError("Bank is already finalized")

        self.state = BankState.FINALIZED
        if not self.bank.presets:
            raise EmptyBankError("No valid samples were added to the bank")

        self.bank.freeze()
        return self.bank

    def _skip(self, result):
        reason = getattr(result.error, "summary", str(result.error))
        self.skipped.append((result.path, reason))
        print(f"Skipping {result.path}: {reason}", file=sys.stderr)


def assemble_bank(paths, info=None, options=None):
    """
    Builds and finalizes a Bank from a list of candidate files.

    Returns:
        A tuple of (bank, skipped) where skipped lists (path, reason) pairs.
    """
    assembler = BankAssembler(info, options)
    assembler.add_candidates(paths)
    return assembler.finalize(), assembler.skipped
