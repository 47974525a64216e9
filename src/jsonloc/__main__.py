"""
Command-line driver: prints the value tree and location tree of a document.

    python -m jsonloc config.json
    python -m jsonloc config.json --path a b1 0
"""

import argparse
import json
import logging
import sys

import jsonloc


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _line_at(root: jsonloc.LocationNode, steps: list[str]) -> int:
    """Walks raw path segments, reading them as indexes only inside arrays."""
    node = root
    for raw in steps:
        if not isinstance(node, jsonloc.StructuralLocation):
            raise TypeError(f"cannot index into a scalar with {raw!r}")
        if isinstance(node.children, list):
            node = node.children[int(raw)]
        else:
            node = node.children[raw]
    return node.line


def _read_source(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    with open(name, encoding="utf-8") as fp:
        return fp.read()


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="jsonloc",
        description="Parse JSON and report the source line of every value",
    )
    ap.add_argument("file", help="JSON file to parse, or - for stdin")
    ap.add_argument(
        "--path",
        nargs="+",
        metavar="KEY",
        help="print only the opening line of the value at this path",
    )
    ap.add_argument("--indent", type=int, default=2)
    ap.add_argument(
        "--reject-leading-zeros",
        action="store_true",
        help="reject integer parts such as 007",
    )
    ap.add_argument("--max-depth", type=_positive_int, default=None)
    ap.add_argument("--verbose", action="store_true", help="debug logging")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        source = _read_source(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"cannot read {args.file}: {exc}", file=sys.stderr)
        return 2

    try:
        result = jsonloc.parse(
            source,
            reject_leading_zeros=args.reject_leading_zeros,
            max_depth=args.max_depth,
        )
    except jsonloc.JSONLocDecodeError as exc:
        print(f"{exc.kind.name}: {exc}", file=sys.stderr)
        return 1

    if args.path:
        try:
            print(_line_at(result.root, args.path))
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            print(f"no value at path {args.path}: {exc}", file=sys.stderr)
            return 2
        return 0

    print(json.dumps(result.parsed, indent=args.indent))
    print(json.dumps(result.locations, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
