"""bfjson default parameters"""
import os

CODEC_CONFIG = {
    "default_hash_method": os.environ.get("BFJSON_HASH_METHOD", "Murmur3KirschMitzenmacher"),
    "emit_hash_method": os.environ.get("BFJSON_EMIT_HASH_METHOD", "false").lower() == "true",
}

FILTER_DEFAULTS = {
    "counting_bits": 16,                          # Java-compatible counter width
    "hash_method": "Murmur3KirschMitzenmacher",
}
