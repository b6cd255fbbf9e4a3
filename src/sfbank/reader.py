# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
SoundFont Reader - parses an SF2 file back into plain records.

Used to check that a written bank reads back with the presets it was
assembled from.
"""

import struct

import numpy as np

from .constants import GENERATOR_NAMES
from .riff import read_chunk_header

HYDRA_CHUNKS = {"phdr", "pbag", "pmod", "pgen", "inst", "ibag", "imod", "igen", "shdr"}

INFO_KEYS = {
    b"isng": "sound_engine",
    b"INAM": "bank_name",
    b"irom": "rom_name",
    b"ICRD": "creation_date",
    b"IENG": "engineer",
    b"IPRD": "product",
    b"ICOP": "copyright",
    b"ICMT": "comment",
    b"ISFT": "software",
}


class SoundFontReader:
    """
    A parser for SF2 files.
    """

    def __init__(self, filepath):
        """
        Args:
            filepath: The path to the SF2 file.
        """
        self.filepath = filepath
        self.file = None
        self.info_data = {}
        self.sample_data = b""
        self.pdta = {}

    def parse(self):
        """
        Parses the entire file.

        Returns:
            self, so calls can be chained.

        Raises:
            ValueError: If the file is not a RIFF sfbk container.
        """
        with open(self.filepath, "rb") as f:
            self.file = f

            riff_id, _ = read_chunk_header(f)
            if riff_id != b"RIFF":
                raise ValueError("Not a RIFF file")

            form_type = f.read(4)
            if form_type != b"sfbk":
                raise ValueError("Not a SoundFont file")

            self._parse_chunks()

        self.file = None
        return self

    def _parse_chunks(self):
        """
        Parses INFO, sdta and pdta lists.
        """
        while True:
            try:
                chunk_id, chunk_size = read_chunk_header(self.file)
            except EOFError:
                break

            if chunk_id == b"LIST":
                list_type = self.file.read(4)
                if list_type == b"INFO":
                    self._parse_sub_chunks(chunk_size - 4, self._store_info_data)
                elif list_type == b"sdta":
                    self._parse_sub_chunks(chunk_size - 4, self._store_sdta_data)
                elif list_type == b"pdta":
                    self._parse_sub_chunks(chunk_size - 4, self._store_pdta_data)
                else:
                    self.file.seek(chunk_size - 4, 1)
            else:
                self.file.seek(chunk_size, 1)

            # Align to next word
            if chunk_size % 2:
                self.file.seek(1, 1)

    def _parse_sub_chunks(self, size, store):
        chunk_end = self.file.tell() + size
        while self.file.tell() < chunk_end:
            sub_id, sub_size = read_chunk_header(self.file)
            store(sub_id, self.file.read(sub_size))
            if sub_size % 2:
                self.file.read(1)

    def _store_info_data(self, sub_id, data):
        if sub_id in (b"ifil", b"iver"):
            major, minor = struct.unpack("<HH", data)
            key = "version" if sub_id == b"ifil" else "rom_version"
            self.info_data[key] = f"{major}.{minor:02d}"
            return

        value = data.decode("ascii", errors="ignore").rstrip("\x00")
        key = INFO_KEYS.get(sub_id, sub_id.decode("ascii", errors="ignore").lower())
        self.info_data[key] = value

    def _store_sdta_data(self, sub_id, data):
        if sub_id == b"smpl":
            self.sample_data = data

    def _store_pdta_data(self, sub_id, data):
        sub_id_str = sub_id.decode("ascii", errors="ignore")
        if sub_id_str in HYDRA_CHUNKS:
            self.pdta[sub_id_str] = data

    def _get_records(self, chunk_name, record_size):
        """
        Splits a pdta sub-chunk into records, dropping the terminal record.
        """
        data = self.pdta.get(chunk_name, b"")
        records = [data[i:i + record_size] for i in range(0, len(data) - record_size + 1, record_size)]
        return records[:-1]

    def get_preset_headers(self):
        headers = []
        for r in self._get_records("phdr", 38):
            values = struct.unpack("<HHHIII", r[20:38])
            headers.append({
                "name": _decode_name(r[0:20]),
                "preset": values[0],
                "bank": values[1],
                "bag_ndx": values[2],
            })
        return headers

    def get_instrument_headers(self):
        headers = []
        for r in self._get_records("inst", 22):
            headers.append({
                "name": _decode_name(r[0:20]),
                "bag_ndx": struct.unpack("<H", r[20:22])[0],
            })
        return headers

    def get_sample_headers(self):
        headers = []
        for r in self._get_records("shdr", 46):
            values = struct.unpack("<IIIIIBbHH", r[20:46])
            headers.append({
                "name": _decode_name(r[0:20]),
                "start": values[0],
                "end": values[1],
                "start_loop": values[2],
                "end_loop": values[3],
                "sample_rate": values[4],
                "original_key": values[5],
                "correction": values[6],
                "sample_link": values[7],
                "sample_type": values[8],
            })
        return headers

    def get_sample_points(self, header):
        """
        Returns the int16 data of one sample described by a sample header.
        """
        points = np.frombuffer(self.sample_data, dtype="<i2")
        return points[header["start"]:header["end"]]

    def get_preset_zones(self, preset_idx):
        return self._get_zones(preset_idx, self.get_preset_headers(), "pbag", "pgen")

    def get_instrument_zones(self, inst_idx):
        return self._get_zones(inst_idx, self.get_instrument_headers(), "ibag", "igen")

    def _get_zones(self, header_idx, headers, bag_chunk, gen_chunk):
        """
        Returns the zones of a preset or instrument as generator name -> amount dicts.

        The terminal header is not part of `headers`, so the bag range of the
        last header ends at the terminal bag.
        """
        bags = [struct.unpack("<HH", r) for r in _split(self.pdta.get(bag_chunk, b""), 4)]
        gens = [struct.unpack("<Hh", r) for r in _split(self.pdta.get(gen_chunk, b""), 4)]

        bag_start = headers[header_idx]["bag_ndx"]
        if header_idx + 1 < len(headers):
            bag_end = headers[header_idx + 1]["bag_ndx"]
        else:
            bag_end = len(bags) - 1

        zones = []
        for bag_idx in range(bag_start, bag_end):
            gen_start = bags[bag_idx][0]
            gen_end = bags[bag_idx + 1][0]
            zone = {}
            for oper, amount in gens[gen_start:gen_end]:
                name = GENERATOR_NAMES.get(oper, str(oper))
                if name in ("instrument", "sampleID"):
                    amount &= 0xFFFF
                zone[name] = amount
            zones.append(zone)
        return zones


def _split(data, size):
    return [data[i:i + size] for i in range(0, len(data) - size + 1, size)]


def _decode_name(raw):
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="ignore")
