"""
tests/test_edge_cases.py
────────────────────────
1) empty / truncated bit arrays
2) structural type detection
3) malformed payloads → FilterFormatError subclasses
"""

import pytest

from bfjson import (
    BloomFilterMemory,
    CountingBloomFilterMemory,
    FilterBuilder,
    decode,
    encode,
)
from bfjson.errors import (
    BodyLengthError,
    FilterFormatError,
    InvalidBase64Error,
    InvalidCountEntryError,
    MalformedJsonError,
)

# ----------------------------- Helper ---------------------------------
def _counting_payload(counts, m=480, h=4, c=8):
    return {"m": m, "h": h, "c": c, "counts": counts}


# ----------------------------------------------------------------------
def test_empty_filter_truncates_to_empty_string():
    bf = FilterBuilder(100, 3).build_bloom_filter()
    payload = encode(bf)
    assert payload["b"] == ""

    restored = decode(payload)
    assert restored.size == 100
    assert restored.is_empty()


def test_lsb_first_packing():
    bf = FilterBuilder(16, 1).build_bloom_filter()
    bf.set_bit(0, True)
    bf.set_bit(9, True)
    assert encode(bf)["b"] == "AQI="          # bytes 0x01 0x02

    bf.set_bit(9, False)
    assert encode(bf)["b"] == "AQ=="          # trailing zero byte dropped


def test_short_body_zero_extends():
    restored = decode({"m": 64, "h": 2, "b": "AQ=="})
    assert restored.get_bit(0)
    assert restored.bit_count() == 1


def test_unpadded_base64_accepted():
    assert decode({"m": 16, "h": 1, "b": "AQI"}).get_bit(9)


def test_bits_beyond_size_rejected():
    with pytest.raises(BodyLengthError):
        decode({"m": 4, "h": 1, "b": "EA=="})  # bit 4 set
    assert decode({"m": 4, "h": 1, "b": "Dw=="}).bit_count() == 4


# ----------------------------------------------------------------------
def test_counts_and_c_select_counting():
    restored = decode(_counting_payload({}))
    assert isinstance(restored, CountingBloomFilterMemory)
    assert restored.count_map() == {}


def test_counts_wins_over_b():
    payload = _counting_payload({"3": 1}) | {"b": "////"}
    restored = decode(payload)
    assert isinstance(restored, CountingBloomFilterMemory)
    assert restored.bit_count() == 1


def test_c_without_counts_is_plain():
    restored = decode({"m": 32, "h": 2, "c": 8, "b": "AQ=="})
    assert type(restored) is BloomFilterMemory
    assert restored.get_bit(0)


def test_zero_count_entry_keeps_bit_clear():
    restored = decode(_counting_payload({"5": 0, "6": 3}))
    assert not restored.get_bit(5)
    assert restored.get_bit(6)
    assert restored.count_map() == {6: 3}


def test_int_keys_accepted_from_python_dicts():
    restored = decode(_counting_payload({7: 2}))
    assert restored.get_count(7) == 2


# ----------------------------------------------------------------------
@pytest.mark.parametrize(
    "payload",
    [
        {"h": 3, "b": ""},
        {"m": 320, "b": ""},
        {"m": "320", "h": 3, "b": ""},
        {"m": 320.0, "h": 3, "b": ""},
        {"m": 0, "h": 3, "b": ""},
        {"m": 320, "h": True, "b": ""},
        {"m": 320, "h": 3},
        {"m": 320, "h": 3, "c": 8},
        {"m": 320, "h": 3, "b": 17},
        {"m": 320, "h": 3, "c": 8, "counts": []},
        {"m": 320, "h": 3, "c": 0, "counts": {}},
        {"m": 320, "h": 3, "c": 65, "counts": {}},
        {"m": 320, "h": 3, "b": "", "hm": "CRC32"},
        {"m": 320, "h": 3, "b": "", "hm": 1},
    ],
)
def test_malformed_metadata(payload):
    with pytest.raises(MalformedJsonError):
        decode(payload)


@pytest.mark.parametrize("text", ["{", "[1, 2]", b"null", "42"])
def test_non_object_payload(text):
    with pytest.raises(MalformedJsonError):
        decode(text)


@pytest.mark.parametrize("b", ["!!!!", "A", "AQ==AQ==", "AQ ==", "é"])
def test_invalid_base64(b):
    with pytest.raises(InvalidBase64Error):
        decode({"m": 320, "h": 3, "b": b})


@pytest.mark.parametrize(
    "counts",
    [
        {"x": 1},
        {"1.5": 1},
        {"480": 1},
        {"-1": 1},
        {"5": "2"},
        {"5": 1.5},
        {"5": True},
        {"5": -1},
        {"5": 256},
        {"1" * 5000: 1},
    ],
)
def test_invalid_count_entries(counts):
    with pytest.raises(InvalidCountEntryError):
        decode(_counting_payload(counts))


def test_errors_share_one_base():
    for err in (MalformedJsonError, InvalidBase64Error, InvalidCountEntryError, BodyLengthError):
        assert issubclass(err, FilterFormatError)
        assert issubclass(err, RuntimeError)


# ----------------------------------------------------------------------
@pytest.mark.parametrize(
    "payload",
    [
        {"m": 2 ** 70, "h": 3, "b": ""},
        {"m": 2 ** 70, "h": 3, "c": 8, "counts": {}},
    ],
)
def test_unallocatable_size_is_format_error(payload):
    with pytest.raises(FilterFormatError) as exc:
        decode(payload)
    assert not isinstance(exc.value, BodyLengthError)


def test_allocation_failure_is_format_error(monkeypatch):
    import bfjson.bitset as bitset

    def _no_memory(length):
        raise MemoryError(f"Unable to allocate {length} bits")

    monkeypatch.setattr(bitset, "new_bits", _no_memory)
    with pytest.raises(FilterFormatError, match="Unable to allocate"):
        decode({"m": 2 ** 45, "h": 3, "b": "AQ=="})


def test_body_checked_without_allocation(monkeypatch):
    import bfjson.bitset as bitset

    monkeypatch.setattr(bitset, "new_bits", lambda length: pytest.fail("allocated"))
    with pytest.raises(BodyLengthError, match="bit 12 is set"):
        decode({"m": 12, "h": 1, "b": "ABA="})   # 0x00 0x10
    bitset.check_fits(b"\x0f\x00\x00", 4)
