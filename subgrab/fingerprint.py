"""OpenSubtitles-style movie hash.

The hash is the file size plus the sum of every 64-bit word in the first and
last 64 KiB of the file, truncated to 64 bits. Words are decoded as unsigned
little-endian integers; this byte order is part of the public hash format and
must not depend on the host platform.

Files that differ only outside the two windows hash identically. That is a
property of the format, which external indexes rely on.
"""

from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import BinaryIO

from subgrab.errors import InputTooSmallError, SubgrabIOError

HASH_BLOCK_SIZE = 65536
WORD = struct.Struct("<Q")
WORDS_PER_BLOCK = HASH_BLOCK_SIZE // WORD.size
_MASK = 0xFFFFFFFFFFFFFFFF


def _sum_block(handle: BinaryIO, accumulator: int) -> int:
    for _ in range(WORDS_PER_BLOCK):
        chunk = handle.read(WORD.size)
        if len(chunk) != WORD.size:
            raise SubgrabIOError(
                f"short read: expected {WORD.size} bytes, got {len(chunk)}"
            )
        (word,) = WORD.unpack(chunk)
        accumulator = (accumulator + word) & _MASK
    return accumulator


def hash_stream(handle: BinaryIO, size: int) -> str:
    """Hash an open binary stream of known ``size``.

    Performs exactly ``2 * WORDS_PER_BLOCK`` reads of ``WORD.size`` bytes.
    """
    if size <= HASH_BLOCK_SIZE:
        raise InputTooSmallError(
            f"file too small: {size} bytes, need more than {HASH_BLOCK_SIZE}"
        )
    accumulator = size & _MASK
    accumulator = _sum_block(handle, accumulator)
    handle.seek(size - HASH_BLOCK_SIZE, os.SEEK_SET)
    accumulator = _sum_block(handle, accumulator)
    return f"{accumulator:016x}"


def fingerprint(path: Path | str) -> str:
    """Return the 16 hex digit movie hash of ``path``."""
    path = Path(path)
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise SubgrabIOError(f"checking file size of {path}: {exc}") from exc
    if size <= HASH_BLOCK_SIZE:
        raise InputTooSmallError(
            f"file too small: {size} bytes, need more than {HASH_BLOCK_SIZE}"
        )
    try:
        with open(path, "rb") as handle:
            return hash_stream(handle, size)
    except SubgrabIOError:
        raise
    except OSError as exc:
        raise SubgrabIOError(f"reading {path}: {exc}") from exc
