from __future__ import annotations
from base64 import b64encode
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .hashing import HashMethod


@dataclass(frozen=True)
class FilterConfig:
    size: int
    hashes: int
    hash_method: HashMethod
    counting_bits: int
    expected_elements: int
    false_positive_probability: float


# ===== wire records =====

@dataclass
class FilterMetadata:
    size: int                                   # m
    hash_count: int                             # h
    hash_method: Optional[HashMethod] = None    # hm, only when sent

    def as_wire(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"m": self.size, "h": self.hash_count}
        if self.hash_method is not None:
            out["hm"] = self.hash_method.value
        return out


@dataclass
class PlainBody:
    """Packed bit array, minimal LSB-first bytes."""
    bits: bytes = b""

    def as_wire(self) -> Dict[str, Any]:
        return {"b": b64encode(self.bits).decode("ascii")}


@dataclass
class CountingBody:
    """Sparse position -> count map; zero counts are never kept."""
    counting_bits: int
    counts: Dict[int, int] = field(default_factory=dict)

    def as_wire(self) -> Dict[str, Any]:
        return {
            "c": self.counting_bits,
            "counts": {str(pos): cnt for pos, cnt in sorted(self.counts.items()) if cnt},
        }
