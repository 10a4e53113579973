#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Totality fuzzing for the YADIL parser.
#
# Generates three fuzz categories:
#   A) random bytes biased towards the grammar's structural bytes
#   B) valid messages with a few bytes mutated, inserted or dropped
#   C) valid messages cut short at a random offset
#
# For every input, parse() must either return a message or raise
# YadilError with a known code and an index inside [0, len(input)], and
# must do the same thing twice in a row.  Any other outcome prints a
# repro payload and exits non-zero.

import os, sys, json, base64, random
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from yadil import YadilError, message_to_json, parse
from yadil._errors import ERROR_CODES

SEED = int(os.environ.get("YADIL_SEED", "4242"))
ROUNDS = int(os.environ.get("YADIL_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

ALPHABET = b"suifblmtr@=;#\\[]{}.-0123456789 \n\txyz\x00\xff"

SEEDS = [
    b"u@age=42; s@name=John Doe;",
    b"i@x=--5; f@pi=3.14; b@on=true;",
    b"# comment # s@n=Foo\\;Bar;",
    b"l@xs=[u@1; l@[b@t;]; s@two;];",
    b"m@m={s@a=u@1; u@2=l@[]; l@[i@-1;]=m@{};};",
    b"str@a=x;\nuint@b=7;\nsint@c=-3;\nfloat@d=.5;\nbool@e=f;",
]

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def outcome(raw: bytes) -> Dict[str, Any]:
    try:
        return {"ok": message_to_json(parse(raw))}
    except YadilError as e:
        return {"err": e.code, "index": e.index}

def failure(label: str, raw: bytes, detail: Any, ctx: Dict[str, Any]) -> None:
    print("FAILURE:", label)
    print("DETAIL:", detail)
    print("CTX:", json.dumps(dict(ctx, input_b64=b64(raw)), ensure_ascii=False)[:4000])
    raise SystemExit(1)

# --- generators ---

def rand_structural() -> bytes:
    n = random.randint(0, 64)
    return bytes(random.choice(ALPHABET) for _ in range(n))

def rand_mutation() -> bytes:
    data = bytearray(random.choice(SEEDS))
    for _ in range(random.randint(1, 4)):
        op = random.random()
        pos = random.randint(0, len(data))
        if op < 0.4 and pos < len(data):
            data[pos] = random.choice(ALPHABET)
        elif op < 0.7:
            data[pos:pos] = bytes([random.choice(ALPHABET)])
        elif pos < len(data):
            del data[pos]
    return bytes(data)

def rand_truncation() -> bytes:
    data = random.choice(SEEDS)
    return data[:random.randint(0, len(data))]

def check(label: str, raw: bytes, ctx: Dict[str, Any]) -> None:
    try:
        first = outcome(raw)
    except Exception as e:  # anything but YadilError is a bug
        failure(label + " crash", raw, repr(e), ctx)
    if "err" in first:
        if first["err"] not in ERROR_CODES:
            failure(label + " unknown code", raw, first, ctx)
        if not 0 <= first["index"] <= len(raw):
            failure(label + " index out of range", raw, first, ctx)
    second = outcome(raw)
    if first != second:
        failure(label + " nondeterministic", raw, (first, second), ctx)

def main() -> int:
    for i in range(ROUNDS):
        r = random.random()
        if r < 0.40:
            check("A structural", rand_structural(), {"round": i})
        elif r < 0.80:
            check("B mutation", rand_mutation(), {"round": i})
        else:
            check("C truncation", rand_truncation(), {"round": i})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no failures)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
