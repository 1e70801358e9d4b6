"""Filter construction: fill in missing parameters and build a filter."""
from __future__ import annotations
import math
from typing import Callable, Optional

from .config import FILTER_DEFAULTS
from .hashing import HashMethod
from .memory import BloomFilterMemory, CountingBloomFilterMemory
from .models import FilterConfig


# ── sizing formulas ─────────────────────────────────────────
def optimal_m(n: int, p: float) -> int:
    return int(math.ceil(-1 * n * math.log(p) / math.log(2) ** 2))


def optimal_k(n: int, m: int) -> int:
    return int(math.ceil(math.log(2) * m / n))


def optimal_n(k: int, m: int) -> int:
    return int(math.ceil(math.log(2) * m / k))


def optimal_p(k: int, m: int, n: int) -> float:
    return (1 - math.exp(-k * n / m)) ** k


class FilterBuilder:
    """Collects filter parameters; either (size, hashes) or
    (expected_elements, false_positive_probability) must be given.

    >>> FilterBuilder(320, 3).build_bloom_filter().size
    320
    """

    def __init__(self, size: Optional[int] = None, hashes: Optional[int] = None):
        self._size = size
        self._hashes = hashes
        self._expected_elements: Optional[int] = None
        self._fpp: Optional[float] = None
        self._counting_bits: int = FILTER_DEFAULTS["counting_bits"]
        self._hash_method = HashMethod.from_name(FILTER_DEFAULTS["hash_method"])
        self._on_overflow: Optional[Callable[[int], None]] = None

    def expected_elements(self, n: int) -> "FilterBuilder":
        self._expected_elements = n
        return self

    def false_positive_probability(self, p: float) -> "FilterBuilder":
        self._fpp = p
        return self

    def counting_bits(self, c: int) -> "FilterBuilder":
        self._counting_bits = c
        return self

    def hash_function(self, method: "str | HashMethod") -> "FilterBuilder":
        self._hash_method = HashMethod.from_name(method)
        return self

    def on_overflow(self, handler: Callable[[int], None]) -> "FilterBuilder":
        """Callback receiving the position of a counter that hit its maximum."""
        self._on_overflow = handler
        return self

    def complete(self) -> FilterConfig:
        n, p, m, k = self._expected_elements, self._fpp, self._size, self._hashes
        if n is not None and n <= 0:
            raise ValueError(f"expected_elements must be positive, got {n}")
        if p is not None and not 0 < p < 1:
            raise ValueError(f"false_positive_probability must be in (0, 1), got {p}")

        if m is None and n is not None and p is not None:
            m = optimal_m(n, p)
        if k is None and n is not None and m is not None:
            k = optimal_k(n, m)
        if m is None or k is None:
            raise ValueError(
                "Neither (expected_elements, false_positive_probability) nor (size, hashes) were specified."
            )
        for name, v in (("size", m), ("hashes", k), ("counting_bits", self._counting_bits)):
            if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
                raise ValueError(f"{name} must be a positive integer, got {v!r}")
        if self._counting_bits > 64:
            raise ValueError(f"counting_bits must be at most 64, got {self._counting_bits}")

        if n is None:
            n = optimal_n(k, m)
        if p is None:
            p = optimal_p(k, m, n)
        return FilterConfig(
            size=m,
            hashes=k,
            hash_method=self._hash_method,
            counting_bits=self._counting_bits,
            expected_elements=n,
            false_positive_probability=p,
        )

    def build_bloom_filter(self, element_type: Optional[type] = None):
        return BloomFilterMemory(self.complete(), element_type=element_type)

    def build_counting_bloom_filter(self, element_type: Optional[type] = None):
        return CountingBloomFilterMemory(
            self.complete(), element_type=element_type, on_overflow=self._on_overflow
        )
