"""In-memory plain and counting Bloom filters.

The plain filter keeps one numpy bool per bit. The counting filter adds one
unsigned counter per bit; its bit array is a cache of ``count > 0`` that
membership queries read directly, so counter and bit are only ever written
together (`set_counter_and_bit`).
"""
from __future__ import annotations
import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Optional

import numpy as np

from . import bitset
from .hashing import HashMethod, hash_positions, to_bytes
from .models import FilterConfig

LOGGER = logging.getLogger("bfjson.memory")
LOGGER.addHandler(logging.NullHandler())


class BloomFilterMemory:
    def __init__(self, config: FilterConfig, element_type: Optional[type] = None):
        self.config = config
        self.element_type = element_type
        self._bits = bitset.new_bits(config.size)

    # ── metadata ────────────────────────────────────────────
    @property
    def size(self) -> int:
        return self.config.size

    @property
    def hash_count(self) -> int:
        return self.config.hashes

    @property
    def hash_method(self) -> HashMethod:
        return self.config.hash_method

    # ── hashing ─────────────────────────────────────────────
    def positions(self, element: Any) -> List[int]:
        if self.element_type is not None and not isinstance(element, self.element_type):
            raise TypeError(
                f"filter holds {self.element_type.__name__} elements, got {type(element).__name__}"
            )
        return hash_positions(self.hash_method, to_bytes(element), self.size, self.hash_count)

    # ── set operations ──────────────────────────────────────
    def add(self, element: Any) -> bool:
        """Insert element; True if at least one bit changed."""
        pos = self.positions(element)
        added = not self._bits[pos].all()
        self._bits[pos] = True
        return added

    def add_all(self, elements: Iterable[Any]) -> List[bool]:
        return [self.add(e) for e in elements]

    def contains(self, element: Any) -> bool:
        return bool(self._bits[self.positions(element)].all())

    def contains_all(self, elements: Iterable[Any]) -> bool:
        return all(self.contains(e) for e in elements)

    def __contains__(self, element: Any) -> bool:
        return self.contains(element)

    def clear(self) -> None:
        self._bits[:] = False

    def is_empty(self) -> bool:
        return not self._bits.any()

    # ── bit access ──────────────────────────────────────────
    def get_bit(self, position: int) -> bool:
        return bool(self._bits[position])

    def set_bit(self, position: int, value: bool) -> None:
        self._bits[position] = value

    def bit_count(self) -> int:
        return int(np.count_nonzero(self._bits))

    def bit_array(self) -> bytes:
        return bitset.to_minimal_bytes(self._bits)

    def set_bit_array(self, data: bytes) -> None:
        """Replace all bits; *data* is zero-extended to `size` bits."""
        self._bits = bitset.from_bytes(data, self.size)

    # ── estimates ───────────────────────────────────────────
    def estimated_population(self) -> float:
        """Swamidass & Baldi estimate of the number of inserted elements."""
        x = self.bit_count()
        if x >= self.size:
            return math.inf
        return -self.size / self.hash_count * math.log(1 - x / self.size)

    def false_positive_probability(self, inserted: Optional[float] = None) -> float:
        n = self.estimated_population() if inserted is None else inserted
        if math.isinf(n):
            return 1.0
        return (1 - math.exp(-self.hash_count * n / self.size)) ** self.hash_count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BloomFilterMemory) or type(other) is not type(self):
            return NotImplemented
        return (
            self.size == other.size
            and self.hash_count == other.hash_count
            and self.hash_method == other.hash_method
            and bool(np.array_equal(self._bits, other._bits))
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self.size}, hashes={self.hash_count}, "
            f"hash_method={self.hash_method.value}, bits_set={self.bit_count()})"
        )


def _counter_dtype(counting_bits: int):
    for dt in (np.uint8, np.uint16, np.uint32, np.uint64):
        if counting_bits <= np.iinfo(dt).bits:
            return dt
    raise ValueError(f"counting_bits must be at most 64, got {counting_bits}")


class CountingBloomFilterMemory(BloomFilterMemory):
    def __init__(
        self,
        config: FilterConfig,
        element_type: Optional[type] = None,
        on_overflow: Optional[Callable[[int], None]] = None,
    ):
        super().__init__(config, element_type=element_type)
        self.on_overflow = on_overflow
        self._counts = np.zeros(config.size, dtype=_counter_dtype(config.counting_bits))

    @property
    def counting_bits(self) -> int:
        return self.config.counting_bits

    @property
    def max_count(self) -> int:
        return (1 << self.counting_bits) - 1

    # ── counter access ──────────────────────────────────────
    def get_count(self, position: int) -> int:
        return int(self._counts[position])

    def set_counter_and_bit(self, position: int, count: int) -> None:
        if not 0 <= position < self.size:
            raise IndexError(f"position {position} out of range [0, {self.size})")
        if not 0 <= count <= self.max_count:
            raise ValueError(
                f"count {count} at position {position} does not fit in {self.counting_bits} bits"
            )
        self._counts[position] = count
        self._bits[position] = count > 0

    def count_map(self) -> Dict[int, int]:
        nz = np.flatnonzero(self._counts)
        return {int(p): int(self._counts[p]) for p in nz}

    # ── set operations ──────────────────────────────────────
    def add(self, element: Any) -> bool:
        added = False
        for p in self.positions(element):
            count = int(self._counts[p])
            if count == 0:
                added = True
            if count >= self.max_count:
                LOGGER.warning("counter at position %d saturated at %d", p, self.max_count)
                if self.on_overflow is not None:
                    self.on_overflow(p)
                continue
            self.set_counter_and_bit(p, count + 1)
        return added

    def remove(self, element: Any) -> bool:
        """Decrement the element's counters; True if it is absent afterwards."""
        if not self.contains(element):
            return True
        for p in self.positions(element):
            count = int(self._counts[p])
            if count > 0:
                self.set_counter_and_bit(p, count - 1)
        return not self.contains(element)

    def remove_all(self, elements: Iterable[Any]) -> List[bool]:
        return [self.remove(e) for e in elements]

    def estimated_count(self, element: Any) -> int:
        """Upper bound on how often element was added (minimum of its counters)."""
        return int(self._counts[self.positions(element)].min())

    def clear(self) -> None:
        super().clear()
        self._counts[:] = 0

    def set_bit_array(self, data: bytes) -> None:
        raise TypeError("bits of a counting filter are derived from its counters; use set_counter_and_bit")

    def __eq__(self, other: object) -> bool:
        eq = super().__eq__(other)
        if eq is NotImplemented or not eq:
            return eq
        return self.counting_bits == other.counting_bits and bool(
            np.array_equal(self._counts, other._counts)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self.size}, hashes={self.hash_count}, "
            f"counting_bits={self.counting_bits}, hash_method={self.hash_method.value}, "
            f"nonzero_counters={int(np.count_nonzero(self._counts))})"
        )
