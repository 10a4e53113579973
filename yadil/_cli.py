"""YADIL command-line interface.

Usage:
    yadil message.yadil              # pretty-print the parsed mapping
    yadil message.yadil --json       # tagged JSON, see _json_adapter
    python3 -m yadil message.yadil -vv
    yadil --version
"""

from __future__ import annotations

import argparse
import logging
import pprint
import sys
from typing import List, Optional

from . import (
    YadilError,
    __version__,
    format_error,
    parse,
)
from ._json_adapter import dumps
from ._value import message_to_python

_log = logging.getLogger("yadil")


def _configure_logging(verbosity: int) -> None:
    """Set up the ``yadil`` logger: 0 → WARNING, 1 → INFO, 2+ → DEBUG."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
                          datefmt="%H:%M:%S")
    )
    for old in list(_log.handlers):
        _log.removeHandler(old)
    _log.setLevel(level)
    _log.addHandler(handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yadil",
        description="Parse a YADIL message and print the result",
    )
    parser.add_argument("path", metavar="FILE", help="YADIL file to parse")
    parser.add_argument("--json", action="store_true",
                        help="Print tagged JSON instead of Python repr")
    parser.add_argument("--version", action="version",
                        version="%(prog)s {}".format(__version__))
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v info, -vv debug)")
    return parser


def _read_input(filepath: str) -> bytes:
    with open(filepath, "rb") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        raw = _read_input(args.path)
    except OSError as e:
        print("Error reading file: {}".format(e), file=sys.stderr)
        sys.exit(2)
    _log.debug("read %d bytes from %s", len(raw), args.path)

    try:
        message = parse(raw)
    except YadilError as e:
        _log.info("parse failed: [%s] at index %d", e.code, e.index)
        print("yadil: error parsing file\n" + format_error(raw, e, args.path),
              file=sys.stderr)
        sys.exit(2)
    _log.info("parsed %d assignment(s) from %s", len(message), args.path)

    if args.json:
        print(dumps(message))
    else:
        pprint.pprint(message_to_python(message))


if __name__ == "__main__":
    main()
