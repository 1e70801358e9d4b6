"""Command-line interface: **bfjson build / query / inspect / bits / bench**"""
from __future__ import annotations

import argparse, logging, sys, time
from pathlib import Path

from .builder import FilterBuilder
from .decoder import BloomFilterDecoder
from .encoder import BloomFilterEncoder
from .errors import FilterFormatError
from .hashing import HashMethod
from .interfaces import CountingBloomFilter
from .json_util import dumps, loads

# -----------------------------------------------------------------------------
# Helper I/O
# -----------------------------------------------------------------------------

def _load_filter(path: Path, hash_method=None):
    try:
        return BloomFilterDecoder(hash_method).decode(path.read_bytes())
    except FilterFormatError as e:
        sys.exit(f"❌ {path}: {e}")


def _dump_json(obj, path: Path):
    path.write_text(dumps(obj), encoding="utf-8")


def _read_elements(path: Path):
    return [ln for ln in path.read_text(encoding="utf-8").splitlines() if ln]


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def cmd_build(ns):
    elements = _read_elements(ns.input)
    builder = (
        FilterBuilder()
        .expected_elements(ns.expected or max(len(elements), 1))
        .false_positive_probability(ns.fpp)
        .hash_function(ns.hash_method)
    )
    if ns.counting:
        bf = builder.counting_bits(ns.counting_bits).build_counting_bloom_filter(element_type=str)
    else:
        bf = builder.build_bloom_filter(element_type=str)
    bf.add_all(elements)

    enc = BloomFilterEncoder(emit_hash_method=ns.emit_hash_method)
    _dump_json(enc.encode(bf), ns.output)
    print(f"✓ {len(elements):,} elements → m={bf.size} h={bf.hash_count} → {ns.output}")


def cmd_query(ns):
    bf = _load_filter(ns.filter, ns.hash_method)
    missing = 0
    for item in ns.items:
        hit = bf.contains(item)
        missing += not hit
        print(f"{'present' if hit else 'absent '}  {item}")
    return 1 if missing and ns.strict else 0


def cmd_inspect(ns):
    bf = _load_filter(ns.input, ns.hash_method)
    kind = "counting" if isinstance(bf, CountingBloomFilter) else "plain"
    report = {
        "kind": kind,
        "m": bf.size,
        "h": bf.hash_count,
        "hash_method": bf.hash_method.value,
        "bits_set": bf.bit_count(),
        "estimated_population": round(bf.estimated_population(), 2),
        "false_positive_probability": bf.false_positive_probability(),
    }
    if kind == "counting":
        counts = bf.count_map()
        report["c"] = bf.counting_bits
        report["nonzero_counters"] = len(counts)
        report["max_counter"] = max(counts.values(), default=0)
    print(dumps(report))


def cmd_bits(ns):
    print(BloomFilterEncoder.encode_bits_only(_load_filter(ns.input)))


def cmd_bench(ns):
    """Benchmark encode → decode on a synthetic filter."""
    builder = FilterBuilder().expected_elements(ns.n).false_positive_probability(ns.fpp)
    if ns.counting:
        bf = builder.build_counting_bloom_filter()
    else:
        bf = builder.build_bloom_filter()
    bf.add_all(f"item-{i}" for i in range(ns.n))

    enc, dec = BloomFilterEncoder(), BloomFilterDecoder()

    t0 = time.perf_counter()
    text = enc.encode_json(bf)
    enc_ms = (time.perf_counter() - t0) * 1000

    t0 = time.perf_counter()
    dec.decode(loads(text))
    dec_ms = (time.perf_counter() - t0) * 1000

    print(
        f"n={ns.n:,} | m={bf.size:,} | {len(text):,} B | encode {enc_ms:.2f} ms | decode {dec_ms:.2f} ms"
    )


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------

def main(argv=None):
    ap = argparse.ArgumentParser(prog="bfjson", description="Bloom filter JSON toolkit")
    ap.add_argument("--verbose", "-v", action="store_true", help="debug logging on stderr")
    sub = ap.add_subparsers(dest="cmd", required=True)
    methods = [m.value for m in HashMethod]

    # build ----------------------------------------------------------
    sp = sub.add_parser("build", help="newline-separated elements → filter JSON")
    sp.add_argument("--input", "-i", type=Path, required=True)
    sp.add_argument("--output", "-o", type=Path, required=True)
    sp.add_argument("--expected", type=int, default=None, help="expected elements (default: input size)")
    sp.add_argument("--fpp", type=float, default=0.01, help="target false positive probability")
    sp.add_argument("--hash-method", default=HashMethod.MURMUR3_KIRSCH_MITZENMACHER.value, choices=methods)
    sp.add_argument("--counting", action="store_true", help="build a counting filter")
    sp.add_argument("--counting-bits", type=int, default=16)
    sp.add_argument("--emit-hash-method", action="store_true", help="write the 'hm' field")
    sp.set_defaults(func=cmd_build)

    # query ----------------------------------------------------------
    sp = sub.add_parser("query", help="test elements against a filter JSON")
    sp.add_argument("--filter", "-f", type=Path, required=True)
    sp.add_argument("--hash-method", default=None, choices=methods,
                    help="hash method for payloads without 'hm'")
    sp.add_argument("--strict", action="store_true", help="exit 1 if any element is absent")
    sp.add_argument("items", nargs="+")
    sp.set_defaults(func=cmd_query)

    # inspect --------------------------------------------------------
    sp = sub.add_parser("inspect", help="summarize a filter JSON")
    sp.add_argument("--input", "-i", type=Path, required=True)
    sp.add_argument("--hash-method", default=None, choices=methods)
    sp.set_defaults(func=cmd_inspect)

    # bits -----------------------------------------------------------
    sp = sub.add_parser("bits", help="print the base64 bit array of a filter JSON")
    sp.add_argument("--input", "-i", type=Path, required=True)
    sp.set_defaults(func=cmd_bits)

    # bench ----------------------------------------------------------
    sp = sub.add_parser("bench", help="quick encode/decode benchmark")
    sp.add_argument("--n", type=int, default=10000, help="synthetic element count")
    sp.add_argument("--fpp", type=float, default=0.01)
    sp.add_argument("--counting", action="store_true")
    sp.set_defaults(func=cmd_bench)

    ns = ap.parse_args(argv)
    if ns.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    return ns.func(ns) or 0

if __name__ == "__main__":
    sys.exit(main())
