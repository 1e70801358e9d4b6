"""Bit array <-> minimal byte string.

Bit ``i`` lives in byte ``i // 8`` at bit ``i % 8`` (least significant bit
first) and trailing all-zero bytes are dropped, so an empty filter packs to
``b""``.
"""
from __future__ import annotations
import numpy as np


def new_bits(length: int) -> np.ndarray:
    return np.zeros(length, dtype=np.bool_)


def to_minimal_bytes(bits: np.ndarray) -> bytes:
    packed = np.packbits(bits.astype(np.uint8, copy=False), bitorder="little")
    return np.trim_zeros(packed, "b").tobytes()


def check_fits(data: bytes, length: int) -> None:
    """Raise ValueError if *data* sets any bit at index ``>= length``.

    Only the bytes past the last full byte are read; nothing is allocated.
    """
    nbytes, spare = divmod(length, 8)
    if spare and len(data) > nbytes:
        high = data[nbytes] >> spare
        if high:
            raise ValueError(
                f"bit {nbytes * 8 + spare + (high & -high).bit_length() - 1} is set "
                f"but the filter has only {length} bits"
            )
        nbytes += 1
    for i in range(nbytes, len(data)):
        if data[i]:
            raise ValueError(
                f"bit {i * 8 + (data[i] & -data[i]).bit_length() - 1} is set "
                f"but the filter has only {length} bits"
            )


def from_bytes(data: bytes, length: int) -> np.ndarray:
    """Unpack *data* into a bool array of exactly *length* bits.

    Missing trailing bits are zero. Raises ValueError if any bit at index
    ``>= length`` is set.
    """
    check_fits(data, length)
    bits = new_bits(length)
    unpacked = np.unpackbits(np.frombuffer(data, dtype=np.uint8), bitorder="little")[:length]
    bits[: unpacked.size] = unpacked
    return bits
