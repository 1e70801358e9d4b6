"""Protocols for the filters the codec reads and rebuilds."""

from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable

from .hashing import HashMethod


@runtime_checkable
class BloomFilter(Protocol):
    """Probabilistic set membership test backed by a bit array."""

    @property
    def size(self) -> int:
        """Number of bits (m)."""
        ...

    @property
    def hash_count(self) -> int:
        """Number of hash functions (k)."""
        ...

    @property
    def hash_method(self) -> HashMethod:
        ...

    def add(self, element: Any) -> bool:
        ...

    def contains(self, element: Any) -> bool:
        """Return True if element may be present; False if definitely absent."""
        ...

    def bit_array(self) -> bytes:
        """Bit array as minimal LSB-first bytes."""
        ...

    def set_bit_array(self, data: bytes) -> None:
        ...


@runtime_checkable
class CountingBloomFilter(BloomFilter, Protocol):
    """Bloom filter whose bits are backed by counters, allowing removal."""

    @property
    def counting_bits(self) -> int:
        """Bits per counter (c)."""
        ...

    def remove(self, element: Any) -> bool:
        ...

    def count_map(self) -> Dict[int, int]:
        """Sparse position -> count mapping of all non-zero counters."""
        ...

    def set_counter_and_bit(self, position: int, count: int) -> None:
        """Set the counter at position and its membership bit (count > 0) together."""
        ...
