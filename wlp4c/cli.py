"""Command line entry: scan, print tokens and compile WLP4 source."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .codegen import CompileError, compile_tokens
from .scanner import ScanError, scan


def main(argv: list[str] | None = None) -> int:
    """Read WLP4 source, print its tokens, then the MIPS assembly."""
    parser = argparse.ArgumentParser(
        prog="wlp4c", description="Compile WLP4 source to MIPS assembly."
    )
    parser.add_argument("source", nargs="?", help="source file (default: stdin)")
    args = parser.parse_args(argv)

    text = Path(args.source).read_text() if args.source else sys.stdin.read()

    status = 0
    try:
        tokens = scan(text)
    except ScanError as err:
        print(f"ERROR: {err}", file=sys.stderr)
        tokens = []
        status = 1

    print("Tokenized:")
    for token in tokens:
        value = "" if token.value == "\n" else token.value
        print(f"{token.type} {value}")

    try:
        sys.stdout.write(compile_tokens(tokens))
    except CompileError as err:
        print(err, file=sys.stderr)
        return 1
    return status


if __name__ == "__main__":
    raise SystemExit(main())