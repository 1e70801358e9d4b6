"""Filter decoder.

* Detects the body encoding structurally: a payload holding both `c` and
  `counts` is a counting filter, anything else is a plain filter.
* Validates the whole payload before a filter is built, so decoding is
  all-or-nothing.
* Counting filters are rebuilt from the sparse count map; every restored
  counter sets its membership bit in the same call.
"""
from __future__ import annotations
import binascii, logging, re
from base64 import b64decode
from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

from . import bitset
from .builder import FilterBuilder
from .config import CODEC_CONFIG
from .errors import (
    BodyLengthError,
    FilterFormatError,
    InvalidBase64Error,
    InvalidCountEntryError,
    MalformedJsonError,
)
from .hashing import HashMethod
from .json_util import loads
from .memory import BloomFilterMemory, CountingBloomFilterMemory
from .models import CountingBody, FilterMetadata, PlainBody

LOGGER = logging.getLogger("bfjson.decoder")
LOGGER.addHandler(logging.NullHandler())

_POSITION_RE = re.compile(r"-?[0-9]+")
_MAX_COUNTING_BITS = 64

JsonSource = Union[Mapping, str, bytes, bytearray]


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _positive_int(root: Mapping, key: str) -> int:
    if key not in root:
        raise MalformedJsonError(f"missing '{key}'")
    v = root[key]
    if not _is_int(v) or v <= 0:
        raise MalformedJsonError(f"'{key}' must be a positive integer, got {v!r}")
    return v


# ---------------------------------------------------------------------------
class BloomFilterDecoder:
    def __init__(self, hash_method: Optional[Union[str, HashMethod]] = None):
        if hash_method is None:
            try:
                hash_method = HashMethod.from_name(CODEC_CONFIG["default_hash_method"])
            except ValueError as e:
                raise ValueError(f"bad default hash method (BFJSON_HASH_METHOD): {e}") from e
        self.hash_method = HashMethod.from_name(hash_method)

    def decode(self, source: JsonSource, element_type: Optional[type] = str) -> BloomFilterMemory:
        root = self._as_object(source)
        meta = self._parse_metadata(root)
        builder = FilterBuilder(meta.size, meta.hash_count).hash_function(
            meta.hash_method or self.hash_method
        )

        if self.is_counting(root):
            body = self._parse_counting_body(root, meta)
            builder.counting_bits(body.counting_bits)
            restore = self._restore_counting
        else:
            body = self._parse_plain_body(root, meta)
            restore = self._restore_plain

        try:
            return restore(builder, body, element_type)
        except FilterFormatError:
            raise
        except Exception as e:
            raise FilterFormatError(f"Decoding failed: {e}") from e

    @staticmethod
    def is_counting(root: Mapping) -> bool:
        return "c" in root and "counts" in root

    # ==================================================================
    # field-presence / typing checks
    # ==================================================================
    @staticmethod
    def _as_object(source: JsonSource) -> Mapping:
        if isinstance(source, (str, bytes, bytearray)):
            try:
                source = loads(source)
            except ValueError as e:
                raise MalformedJsonError(f"payload is not valid JSON: {e}") from e
        if not isinstance(source, Mapping):
            raise MalformedJsonError(f"payload must be a JSON object, got {type(source).__name__}")
        return source

    @staticmethod
    def _parse_metadata(root: Mapping) -> FilterMetadata:
        meta = FilterMetadata(size=_positive_int(root, "m"), hash_count=_positive_int(root, "h"))
        if "hm" in root:
            name = root["hm"]
            if not isinstance(name, str):
                raise MalformedJsonError(f"'hm' must be a string, got {name!r}")
            try:
                meta.hash_method = HashMethod.from_name(name)
            except ValueError as e:
                raise MalformedJsonError(str(e)) from e
        return meta

    @staticmethod
    def _parse_plain_body(root: Mapping, meta: FilterMetadata) -> PlainBody:
        if "b" not in root:
            raise MalformedJsonError("missing 'b' (or 'c' and 'counts' for a counting filter)")
        encoded = root["b"]
        if not isinstance(encoded, str):
            raise MalformedJsonError(f"'b' must be a base64 string, got {type(encoded).__name__}")
        # trailing '=' padding is optional on the wire
        padded = encoded + "=" * (-len(encoded) % 4)
        try:
            raw = b64decode(padded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidBase64Error(f"'b' is not valid base64: {e}") from e
        try:
            bitset.check_fits(raw, meta.size)
        except ValueError as e:
            raise BodyLengthError(str(e)) from e
        return PlainBody(bits=raw)

    @staticmethod
    def _parse_counting_body(root: Mapping, meta: FilterMetadata) -> CountingBody:
        c = _positive_int(root, "c")
        if c > _MAX_COUNTING_BITS:
            raise MalformedJsonError(f"'c' must be at most {_MAX_COUNTING_BITS}, got {c}")
        raw = root["counts"]
        if not isinstance(raw, Mapping):
            raise MalformedJsonError(f"'counts' must be an object, got {type(raw).__name__}")

        max_count = (1 << c) - 1
        counts: Dict[int, int] = {}
        for key, value in raw.items():
            if _is_int(key):
                pos = key
            elif isinstance(key, str) and _POSITION_RE.fullmatch(key):
                try:
                    pos = int(key)
                except ValueError as e:
                    raise InvalidCountEntryError(
                        f"count position {key[:20]}... ({len(key)} digits) is not a usable integer"
                    ) from e
            else:
                raise InvalidCountEntryError(f"count position {key!r} is not an integer")
            if not 0 <= pos < meta.size:
                raise InvalidCountEntryError(f"count position {pos} outside [0, {meta.size})")
            if not _is_int(value):
                raise InvalidCountEntryError(f"count at position {pos} is not an integer: {value!r}")
            if not 0 <= value <= max_count:
                raise InvalidCountEntryError(
                    f"count {value} at position {pos} outside [0, {max_count}] for c={c}"
                )
            counts[pos] = value
        return CountingBody(counting_bits=c, counts=counts)

    # ==================================================================
    # reconstruction
    # ==================================================================
    @staticmethod
    def _restore_plain(builder: FilterBuilder, body: PlainBody, element_type) -> BloomFilterMemory:
        bf = builder.build_bloom_filter(element_type=element_type)
        bf.set_bit_array(body.bits)
        LOGGER.debug("decoded plain filter m=%d h=%d", bf.size, bf.hash_count)
        return bf

    @staticmethod
    def _restore_counting(
        builder: FilterBuilder, body: CountingBody, element_type
    ) -> CountingBloomFilterMemory:
        cbf = builder.build_counting_bloom_filter(element_type=element_type)
        for pos, count in body.counts.items():
            cbf.set_counter_and_bit(pos, count)
        LOGGER.debug("decoded counting filter m=%d h=%d c=%d (%d counters)",
                     cbf.size, cbf.hash_count, cbf.counting_bits, len(body.counts))
        return cbf
