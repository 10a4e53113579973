#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Parser invariants (property tests) for YADIL.
#
# This runner:
# - generates random messages (scalars, lists, maps) as text plus the
#   Values they should parse to
# - checks that parsing recovers exactly those Values
# - checks whitespace/comment transparency, last-write-wins and determinism
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, random
from typing import Dict, List, Tuple

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from yadil import INT64_MAX, INT64_MIN, UINT64_MAX, Value, YadilError, parse

SEED = int(os.environ.get("YADIL_SEED", "1337"))
TRIALS = int(os.environ.get("YADIL_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("YADIL_GEN_MAX_DEPTH", "4"))
MAX_ITEMS = int(os.environ.get("YADIL_GEN_MAX_ITEMS", "5"))
MAX_ASSIGNS = int(os.environ.get("YADIL_GEN_MAX_ASSIGNS", "6"))
MAX_STR = int(os.environ.get("YADIL_GEN_MAX_STR", "16"))

random.seed(SEED)

# Bytes that would end or split a string literal.
_RESERVED = set(";=@#\\\x00")
_BLANKS = [b" ", b"\n", b"\t", b"\r\n", b"  # note #  ", b"#\n#"]

Generated = Tuple[bytes, Value]

def rand_text() -> str:
    out = []
    n = random.randint(1, MAX_STR)
    while len(out) < n:
        r = random.random()
        if r < 0.80:
            ch = chr(random.randint(0x20, 0x7E))
        elif r < 0.95:
            ch = chr(random.randint(0xA0, 0x7FF))
        else:
            ch = chr(random.randint(0x10000, 0x10FFFF))
        if ch in _RESERVED:
            continue
        if not out and ch == " ":
            continue  # leading blanks are trimmed
        out.append(ch)
    return "".join(out)

def rand_ident() -> bytes:
    letters = "abcdefghijklmnopqrstuvwxyz_0123456789"
    return "".join(random.choice(letters) for _ in range(random.randint(1, 8))).encode("ascii")

def gen_scalar() -> Generated:
    r = random.random()
    if r < 0.25:
        text = rand_text()
        return b"s@" + text.encode("utf-8"), Value.string(text)
    if r < 0.45:
        n = random.choice([0, 1, random.randint(0, 10**6), UINT64_MAX])
        return b"u@%d" % n, Value.unsigned(n)
    if r < 0.65:
        n = random.choice([0, -1, random.randint(-10**6, 10**6), INT64_MIN, INT64_MAX])
        return b"i@%d" % n, Value.signed(n)
    if r < 0.85:
        whole = random.randint(0, 10**6)
        frac = "".join(random.choice("0123456789") for _ in range(random.randint(0, 6)))
        neg = random.random() < 0.5
        literal = "{}{}.{}".format("-" if neg else "", whole, frac)
        expected = float("{}.{}".format(whole, frac or "0"))
        return b"f@" + literal.encode("ascii"), Value.floating(-expected if neg else expected)
    flag = random.random() < 0.5
    spelling = random.choice([b"t", b"true"] if flag else [b"f", b"false"])
    return b"b@" + spelling, Value.boolean(flag)

def gen_value(depth: int) -> Generated:
    if depth >= MAX_GEN_DEPTH or random.random() < 0.6:
        return gen_scalar()
    if random.random() < 0.5:
        items = [gen_value(depth + 1) for _ in range(random.randint(0, MAX_ITEMS))]
        body = b"".join(text + b";" for text, _ in items)
        return b"l@[" + body + b"]", Value.list_of(v for _, v in items)
    entries: Dict[Value, Value] = {}
    parts: List[bytes] = []
    for _ in range(random.randint(0, MAX_ITEMS)):
        key_text, key = gen_value(depth + 1)
        if key in entries:
            continue
        val_text, val = gen_value(depth + 1)
        entries[key] = val
        parts.append(key_text + b"=" + val_text + b";")
    return b"m@{" + b"".join(parts) + b"}", Value.map_of(entries)

def gen_message() -> Tuple[List[bytes], Dict[bytes, Value]]:
    """Assignments as separate chunks, plus the message they describe."""
    chunks: List[bytes] = []
    expected: Dict[bytes, Value] = {}
    for _ in range(random.randint(0, MAX_ASSIGNS)):
        ident = rand_ident()
        text, value = gen_value(0)
        tag, _, body = text.partition(b"@")
        chunks.append(tag + b"@" + ident + b"=" + body + b";")
        expected[ident] = value
    return chunks, expected

def try_parse(raw: bytes):
    try:
        return parse(raw)
    except YadilError as e:
        print("INVARIANT FAIL: valid message rejected:", e, raw[:400])
        raise SystemExit(1)

def main() -> int:
    for t in range(TRIALS):
        chunks, expected = gen_message()
        raw = b"".join(chunks)

        # (1) Parsing recovers the generated values
        got = try_parse(raw)
        if got != expected:
            print("INVARIANT FAIL: round trip", t, raw[:400])
            return 1

        # (2) Determinism
        if try_parse(raw) != got:
            print("INVARIANT FAIL: determinism", t)
            return 1

        # (3) Whitespace and comments between assignments are transparent
        padded = b"".join(random.choice(_BLANKS) + c for c in chunks) + random.choice(_BLANKS)
        if try_parse(padded) != expected:
            print("INVARIANT FAIL: blank transparency", t, padded[:400])
            return 1

        # (4) Last write wins
        if chunks:
            i = random.randrange(len(chunks))
            shadowed = b"".join(chunks[:i + 1]) + b"".join(chunks)
            if try_parse(shadowed) != expected:
                print("INVARIANT FAIL: last write wins", t)
                return 1

        # (5) Anything after NUL is ignored
        if try_parse(raw + b"\x00" + b"garbage;@=") != expected:
            print("INVARIANT FAIL: NUL terminator", t)
            return 1

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
