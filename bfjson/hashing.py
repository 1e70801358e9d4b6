"""Hash methods mapping an element to `k` bit positions in `[0, m)`.

Every method is selectable by name, which is also the value written to the
optional `hm` wire field.
"""
from __future__ import annotations
import hashlib, struct
from enum import Enum
from typing import Any, Callable, Dict, List

import mmh3
import xxhash


class HashMethod(str, Enum):
    MURMUR3_KIRSCH_MITZENMACHER = "Murmur3KirschMitzenmacher"
    XXHASH64_KIRSCH_MITZENMACHER = "XXHash64KirschMitzenmacher"
    SHA256 = "SHA256"

    @classmethod
    def from_name(cls, name: "str | HashMethod") -> "HashMethod":
        if isinstance(name, HashMethod):
            return name
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"unknown hash method '{name}' (choose from {', '.join(m.value for m in cls)})"
            ) from None


def to_bytes(element: Any) -> bytes:
    """bytes pass through, str is UTF-8 encoded, anything else goes through str()."""
    if isinstance(element, (bytes, bytearray, memoryview)):
        return bytes(element)
    if isinstance(element, str):
        return element.encode("utf-8")
    return str(element).encode("utf-8")


# ── Kirsch-Mitzenmacher: g_i(x) = h1(x) + i * h2(x) ────────────────
def _combine(h1: int, h2: int, m: int, k: int) -> List[int]:
    return [(h1 + i * h2) % m for i in range(k)]


def _murmur3_km(data: bytes, m: int, k: int) -> List[int]:
    h1 = mmh3.hash(data, 0, signed=False)
    h2 = mmh3.hash(data, h1, signed=False)
    return _combine(h1, h2, m, k)


def _xxhash64_km(data: bytes, m: int, k: int) -> List[int]:
    hv = xxhash.xxh64_intdigest(data, seed=0)
    return _combine(hv & 0xFFFFFFFF, hv >> 32, m, k)


def _sha256(data: bytes, m: int, k: int) -> List[int]:
    positions = []
    for seed in range(k):
        h = hashlib.sha256()
        h.update(struct.pack("<I", seed))
        h.update(data)
        positions.append(int.from_bytes(h.digest()[:8], "little") % m)
    return positions


_HASHERS: Dict[HashMethod, Callable[[bytes, int, int], List[int]]] = {
    HashMethod.MURMUR3_KIRSCH_MITZENMACHER: _murmur3_km,
    HashMethod.XXHASH64_KIRSCH_MITZENMACHER: _xxhash64_km,
    HashMethod.SHA256: _sha256,
}


def hash_positions(method: HashMethod, data: bytes, m: int, k: int) -> List[int]:
    return _HASHERS[method](data, m, k)
