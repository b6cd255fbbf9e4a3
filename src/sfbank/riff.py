# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
RIFF chunk helpers used to write and read SoundFont containers.
"""

import struct
from typing import BinaryIO


def read_chunk_header(f: BinaryIO) -> tuple[bytes, int]:
    """
    Reads a chunk ID and its little-endian size.

    Raises:
        EOFError: If the file ends inside the header.
    """
    header = f.read(8)
    if len(header) < 8:
        raise EOFError("Unexpected end of file while reading chunk header.")

    chunk_id, chunk_size = struct.unpack("<4sI", header)
    return chunk_id, chunk_size


def make_chunk(chunk_id: bytes, data: bytes) -> bytes:
    """
    Wraps data in a chunk, padding odd-sized payloads to a word boundary.

    Args:
        chunk_id: The 4-byte chunk ID.
        data: The chunk payload.

    Returns:
        The encoded chunk.
    """
    if len(chunk_id) != 4:
        raise ValueError(f"Chunk ID must be 4 bytes long, got {chunk_id!r}.")

    size = len(data)
    packed = chunk_id + struct.pack("<I", size) + data
    if size % 2:
        packed += b"\x00"
    return packed


def make_list_chunk(list_type: bytes, parts) -> bytes:
    """
    Creates a LIST chunk from a list type and a sequence of encoded sub-chunks.
    """
    if len(list_type) != 4:
        raise ValueError(f"List type ID must be 4 bytes long, got {list_type!r}.")

    return make_chunk(b"LIST", list_type + b"".join(parts))


def make_zstr(text: str, limit: int = 256) -> bytes:
    """
    Encodes an INFO string as ASCII with one or two terminators so that the
    total length is even and at most `limit` bytes.
    """
    encoded = text.encode("ascii", errors="replace")[:limit - 2]

    if len(encoded) % 2 == 1:
        return encoded + b"\x00"
    return encoded + b"\x00\x00"


def pack_name(name: str, size: int = 20) -> bytes:
    """
    Encodes a record name into a fixed-size, zero-padded ASCII field.
    """
    return name.encode("ascii", errors="replace")[:size].ljust(size, b"\x00")
