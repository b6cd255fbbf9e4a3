# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
SoundFont Writer - serializes an assembled Bank into an SF2 file.

The file layout is:
- RIFF "sfbk"
  - LIST INFO: version, engine, bank name, ROM info and optional text fields
  - LIST sdta: smpl chunk with 16-bit sample data
  - LIST pdta: the Hydra (phdr, pbag, pmod, pgen, inst, ibag, imod, igen, shdr)
"""

import struct

import numpy as np

from .constants import GENERATOR_IDS, RECORD_NAME_SIZE, SAMPLE_PADDING
from .riff import make_chunk, make_list_chunk, make_zstr, pack_name

# Optional INFO sub-chunks, in the order they are written
INFO_TEXT_FIELDS = [
    ("creation_date", b"ICRD"),
    ("engineer", b"IENG"),
    ("product", b"IPRD"),
    ("copyright", b"ICOP"),
    ("comment", b"ICMT"),
    ("software", b"ISFT"),
]

# Generators that must come first in a zone, in this order
LEADING_GENERATORS = ["keyRange", "velRange"]

# Generators whose value is written by the writer itself
MANAGED_GENERATORS = {
    "sampleID", "instrument",
    "startloopAddrsOffset", "endloopAddrsOffset",
    "startloopAddrsCoarseOffset", "endloopAddrsCoarseOffset",
}

TERMINAL_MODULATOR = struct.pack("<HHhHH", 0, 0, 0, 0, 0)
TERMINAL_GENERATOR = struct.pack("<Hh", 0, 0)


def split_offset(delta):
    """
    Splits a sample offset into (coarse, fine) parts of 32768 points.
    """
    if -32768 <= delta <= 32767:
        return 0, delta
    return divmod(delta, 32768)


class SoundFontWriter:
    """
    Writes a Bank as an SF2 file.
    """

    def __init__(self, bank):
        """
        Args:
            bank: The Bank to serialize. It is validated before writing.
        """
        self.bank = bank
        self.info = bank.info

        # Absolute positions of each sample in the smpl chunk
        self._sample_offsets = []

    def write(self, f):
        """
        Writes the SoundFont to a binary file object.

        Returns:
            The number of bytes written.
        """
        self.bank.validate()

        info_chunk = self._build_info_chunk()
        sdta_chunk = self._build_sdta_chunk()
        pdta_chunk = self._build_pdta_chunk()

        body = b"sfbk" + info_chunk + sdta_chunk + pdta_chunk
        f.write(b"RIFF")
        f.write(struct.pack("<I", len(body)))
        f.write(body)
        return len(body) + 8

    def _build_info_chunk(self):
        """
        Builds the INFO-list chunk.
        """
        major, minor = self.info.version_tuple

        # ifil, isng and INAM are mandatory and come first
        parts = [
            make_chunk(b"ifil", struct.pack("<HH", major, minor)),
            make_chunk(b"isng", make_zstr(self.info.sound_engine)),
            make_chunk(b"INAM", make_zstr(self.info.bank_name)),
        ]

        if self.info.rom_name:
            rom_major, rom_minor = self.info.rom_version_tuple
            parts.append(make_chunk(b"irom", make_zstr(self.info.rom_name)))
            parts.append(make_chunk(b"iver", struct.pack("<HH", rom_major, rom_minor)))

        for key, chunk_id in INFO_TEXT_FIELDS:
            value = getattr(self.info, key)
            if value:
                limit = 65536 if chunk_id == b"ICMT" else 256
                parts.append(make_chunk(chunk_id, make_zstr(value, limit)))

        return make_list_chunk(b"INFO", parts)

    def _build_sdta_chunk(self):
        """
        Builds the sdta-list chunk and records where each sample starts.
        """
        padding = np.zeros(SAMPLE_PADDING, dtype="<i2").tobytes()

        parts = []
        self._sample_offsets = []
        current_offset = 0
        for sample in self.bank.samples:
            self._sample_offsets.append(current_offset)
            parts.append(sample.data.astype("<i2").tobytes())
            parts.append(padding)
            current_offset += len(sample) + SAMPLE_PADDING

        return make_list_chunk(b"sdta", [make_chunk(b"smpl", b"".join(parts))])

    def _build_pdta_chunk(self):
        """
        Builds the pdta-list (Hydra) chunk.
        """
        phdr_data, pbag_data, pmod_data, pgen_data = self._build_presets_chunk()
        inst_data, ibag_data, imod_data, igen_data = self._build_instruments_chunk()
        shdr_data = self._build_shdr_chunk()

        return make_list_chunk(b"pdta", [
            make_chunk(b"phdr", b"".join(phdr_data)),
            make_chunk(b"pbag", b"".join(pbag_data)),
            make_chunk(b"pmod", b"".join(pmod_data)),
            make_chunk(b"pgen", b"".join(pgen_data)),
            make_chunk(b"inst", b"".join(inst_data)),
            make_chunk(b"ibag", b"".join(ibag_data)),
            make_chunk(b"imod", b"".join(imod_data)),
            make_chunk(b"igen", b"".join(igen_data)),
            make_chunk(b"shdr", b"".join(shdr_data)),
        ])

    def _build_presets_chunk(self):
        """
        Builds the preset-related chunks.
        """
        phdr_data, pbag_data, pmod_data, pgen_data = [], [], [], []
        inst_index = {id(inst): i for i, inst in enumerate(self.bank.instruments)}

        # Presets are stored sorted by bank, then program
        presets = sorted(self.bank.presets, key=lambda p: (p.bank, p.program))

        for preset in presets:
            phdr_data.append(struct.pack(
                "<20sHHHIII",
                pack_name(preset.name, RECORD_NAME_SIZE),
                preset.program,
                preset.bank,
                len(pbag_data),
                0, 0, 0
            ))

            for zone in preset.zones:
                pbag_data.append(struct.pack("<HH", len(pgen_data), len(pmod_data)))
                self._add_generators(pgen_data, zone.generators)
                pgen_data.append(struct.pack(
                    "<HH", GENERATOR_IDS["instrument"], inst_index[id(zone.instrument)]
                ))

        # Terminators
        phdr_data.append(pack_name("EOP") + struct.pack("<HHHIII", 0, 0, len(pbag_data), 0, 0, 0))
        pbag_data.append(struct.pack("<HH", len(pgen_data), len(pmod_data)))
        pmod_data.append(TERMINAL_MODULATOR)
        pgen_data.append(TERMINAL_GENERATOR)

        return phdr_data, pbag_data, pmod_data, pgen_data

    def _build_instruments_chunk(self):
        """
        Builds the instrument-related chunks.
        """
        inst_data, ibag_data, imod_data, igen_data = [], [], [], []
        sample_index = {id(s): i for i, s in enumerate(self.bank.samples)}

        for inst in self.bank.instruments:
            inst_data.append(struct.pack("<20sH", pack_name(inst.name, RECORD_NAME_SIZE), len(ibag_data)))

            for zone in inst.zones:
                ibag_data.append(struct.pack("<HH", len(igen_data), len(imod_data)))
                self._add_generators(igen_data, zone.generators)
                self._add_loop_offsets(igen_data, zone)
                igen_data.append(struct.pack(
                    "<HH", GENERATOR_IDS["sampleID"], sample_index[id(zone.sample)]
                ))

        # Terminators
        inst_data.append(pack_name("EOI") + struct.pack("<H", len(ibag_data)))
        ibag_data.append(struct.pack("<HH", len(igen_data), len(imod_data)))
        imod_data.append(TERMINAL_MODULATOR)
        igen_data.append(TERMINAL_GENERATOR)

        return inst_data, ibag_data, imod_data, igen_data

    def _add_generators(self, gen_data, generators):
        """
        Appends a zone's generators, range generators first.
        """
        for gen_name in LEADING_GENERATORS:
            if gen_name in generators:
                lo, hi = generators[gen_name]
                gen_data.append(struct.pack("<HBB", GENERATOR_IDS[gen_name], lo, hi))

        for gen_name, gen_value in generators.items():
            if gen_name in LEADING_GENERATORS or gen_name in MANAGED_GENERATORS:
                continue
            gen_id = GENERATOR_IDS.get(gen_name)
            if gen_id is None:
                raise ValueError(f"Unknown generator \"{gen_name}\"")
            gen_data.append(struct.pack("<Hh", gen_id, gen_value))

    def _add_loop_offsets(self, igen_data, zone):
        """
        Emits loop offset generators where a zone loops differently from its sample.
        """
        offsets = [
            ("startloopAddrsOffset", "startloopAddrsCoarseOffset", zone.loop_start - zone.sample.loop_start),
            ("endloopAddrsOffset", "endloopAddrsCoarseOffset", zone.loop_end - zone.sample.loop_end),
        ]
        for fine_name, coarse_name, delta in offsets:
            if delta == 0:
                continue
            coarse, fine = split_offset(delta)
            if fine:
                igen_data.append(struct.pack("<Hh", GENERATOR_IDS[fine_name], fine))
            if coarse:
                igen_data.append(struct.pack("<Hh", GENERATOR_IDS[coarse_name], coarse))

    def _build_shdr_chunk(self):
        """
        Builds the shdr chunk. Positions are absolute sample points in smpl.
        """
        shdr_data = []
        for sample, start in zip(self.bank.samples, self._sample_offsets):
            shdr_data.append(struct.pack(
                "<20sIIIIIBbHH",
                pack_name(sample.name, RECORD_NAME_SIZE),
                start,
                start + len(sample),
                start + sample.loop_start,
                start + sample.loop_end,
                sample.sample_rate,
                sample.original_key,
                sample.correction,
                0,
                sample.sample_type
            ))

        # Terminator ("EOS")
        shdr_data.append(pack_name("EOS") + b"\x00" * 26)
        return shdr_data
