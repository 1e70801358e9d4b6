"""Hash method selection: closed enumeration, optional `hm` wire field."""
import pytest

from bfjson import BloomFilterDecoder, BloomFilterEncoder, FilterBuilder, HashMethod, decode
from bfjson.bitset import from_bytes, to_minimal_bytes
from bfjson.hashing import hash_positions, to_bytes


@pytest.mark.parametrize("method", list(HashMethod))
def test_positions_in_range_and_stable(method):
    data = to_bytes("Erik")
    pos = hash_positions(method, data, 97, 5)
    assert len(pos) == 5
    assert all(0 <= p < 97 for p in pos)
    assert pos == hash_positions(method, data, 97, 5)


def test_to_bytes():
    assert to_bytes(b"ab") == b"ab"
    assert to_bytes("ü") == "ü".encode("utf-8")
    assert to_bytes(12) == b"12"


def test_bitset_pack_unpack():
    bits = from_bytes(b"\x05", 12)
    assert bits.tolist() == [True, False, True] + [False] * 9
    assert to_minimal_bytes(bits) == b"\x05"


# ----------------------------------------------------------------------
@pytest.mark.parametrize("method", list(HashMethod))
def test_hm_field_roundtrip(method):
    bf = FilterBuilder(256, 3).hash_function(method).build_bloom_filter()
    bf.add("Ululu")
    payload = BloomFilterEncoder(emit_hash_method=True).encode(bf)
    assert payload["hm"] == method.value

    restored = decode(payload)
    assert restored.hash_method is method
    assert restored.contains("Ululu")


def test_hm_field_on_counting_filter():
    cbf = FilterBuilder(256, 3).hash_function("SHA256").counting_bits(4).build_counting_bloom_filter()
    cbf.add("Ululu")
    payload = BloomFilterEncoder(emit_hash_method=True).encode(cbf)
    assert payload["hm"] == "SHA256" and payload["c"] == 4
    assert decode(payload).count_map() == cbf.count_map()


def test_legacy_payload_uses_fixed_method():
    bf = FilterBuilder(256, 3).hash_function(HashMethod.SHA256).build_bloom_filter()
    payload = BloomFilterEncoder(emit_hash_method=False).encode(bf)
    assert "hm" not in payload

    assert decode(payload).hash_method is HashMethod.MURMUR3_KIRSCH_MITZENMACHER
    restored = BloomFilterDecoder(hash_method="SHA256").decode(payload)
    assert restored.hash_method is HashMethod.SHA256
    assert restored == bf


def test_decoder_rejects_unknown_default():
    with pytest.raises(ValueError):
        BloomFilterDecoder(hash_method="MD4")


def test_bad_configured_default_names_env_var(monkeypatch):
    from bfjson.config import CODEC_CONFIG

    monkeypatch.setitem(CODEC_CONFIG, "default_hash_method", "MD4")
    with pytest.raises(ValueError, match="BFJSON_HASH_METHOD"):
        BloomFilterDecoder()
    assert BloomFilterDecoder("SHA256").hash_method is HashMethod.SHA256
