import logging
from typing import Any, Dict, Optional

from .config import CODEC_CONFIG
from .interfaces import BloomFilter, CountingBloomFilter
from .json_util import dumps
from .models import CountingBody, FilterMetadata, PlainBody

LOGGER = logging.getLogger("bfjson.encoder")
LOGGER.addHandler(logging.NullHandler())


class BloomFilterEncoder:
    def __init__(self, emit_hash_method: Optional[bool] = None):
        self.emit_hash_method = (
            CODEC_CONFIG["emit_hash_method"] if emit_hash_method is None else emit_hash_method
        )

    def encode(self, source: BloomFilter) -> Dict[str, Any]:
        """Snapshot *source* into its JSON object form.

        Counting filters carry `c` and the sparse `counts` map; plain filters
        carry the base64 bit array `b`.
        """
        meta = FilterMetadata(
            size=source.size,
            hash_count=source.hash_count,
            hash_method=source.hash_method if self.emit_hash_method else None,
        )
        root = meta.as_wire()

        if isinstance(source, CountingBloomFilter):
            body = CountingBody(
                counting_bits=source.counting_bits,
                counts={pos: cnt for pos, cnt in source.count_map().items() if cnt},
            )
            LOGGER.debug("encoded counting filter m=%d h=%d c=%d (%d counters)",
                         meta.size, meta.hash_count, body.counting_bits, len(body.counts))
        else:
            body = PlainBody(bits=source.bit_array())
            LOGGER.debug("encoded plain filter m=%d h=%d (%d bytes)",
                         meta.size, meta.hash_count, len(body.bits))
        root.update(body.as_wire())
        return root

    def encode_json(self, source: BloomFilter) -> str:
        return dumps(self.encode(source))

    @staticmethod
    def encode_bits_only(source: BloomFilter) -> str:
        """Base64 of the bit array alone, for plain and counting filters alike."""
        return PlainBody(bits=source.bit_array()).as_wire()["b"]
