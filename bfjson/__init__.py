"""bfjson - JSON wire format for plain and counting Bloom filters."""

__version__ = "0.1.0"

from .hashing import HashMethod
from .models import FilterConfig, FilterMetadata, PlainBody, CountingBody
from .interfaces import BloomFilter, CountingBloomFilter
from .memory import BloomFilterMemory, CountingBloomFilterMemory
from .builder import FilterBuilder
from .errors import (
    FilterFormatError,
    MalformedJsonError,
    InvalidBase64Error,
    InvalidCountEntryError,
    BodyLengthError,
)
from .encoder import BloomFilterEncoder
from .decoder import BloomFilterDecoder
from .converter import encode, encode_bits_only, decode

__all__ = [
    "HashMethod",
    "FilterConfig",
    "FilterMetadata",
    "PlainBody",
    "CountingBody",
    "BloomFilter",
    "CountingBloomFilter",
    "BloomFilterMemory",
    "CountingBloomFilterMemory",
    "FilterBuilder",
    "FilterFormatError",
    "MalformedJsonError",
    "InvalidBase64Error",
    "InvalidCountEntryError",
    "BodyLengthError",
    "BloomFilterEncoder",
    "BloomFilterDecoder",
    "encode",
    "encode_bits_only",
    "decode",
]
