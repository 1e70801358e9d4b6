"""Module-level shortcuts using the configured defaults."""
from __future__ import annotations
from typing import Any, Dict, Optional

from .decoder import BloomFilterDecoder, JsonSource
from .encoder import BloomFilterEncoder
from .interfaces import BloomFilter


def encode(source: BloomFilter) -> Dict[str, Any]:
    return BloomFilterEncoder().encode(source)


def encode_bits_only(source: BloomFilter) -> str:
    return BloomFilterEncoder.encode_bits_only(source)


def decode(source: JsonSource, element_type: Optional[type] = str):
    return BloomFilterDecoder().decode(source, element_type=element_type)
