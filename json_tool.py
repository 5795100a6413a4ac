# json_tool.py
# Command-line front end: format, minify, validate, highlight, tree.

import argparse
import json
import logging
import sys
from typing import List, Optional

from json_formatter import format_json, minify_json
from json_highlighter import highlight_json, tokenize
from json_model import DEFAULT_INDENT, FormatError, IndentStyle
from json_parser import DEPTH_LIMIT_DEFAULT, DEPTH_LIMIT_MAX
from json_tree import build_tree
from json_validator import validate_json

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# LOGGING SETUP
# ---------------------------------------------------------------------------
def set_up_logging(log_level: str = "WARNING") -> None:
    """Send log records to stderr; stdout carries only command output."""
    level = getattr(logging, log_level.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)

# ---------------------------------------------------------------------------
# INPUT
# ---------------------------------------------------------------------------
def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _indent_arg(value: str) -> IndentStyle:
    try:
        return IndentStyle.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def _max_depth_arg(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if not 1 <= depth <= DEPTH_LIMIT_MAX:
        raise argparse.ArgumentTypeError(f"must be between 1 and {DEPTH_LIMIT_MAX}")
    return depth

# ---------------------------------------------------------------------------
# COMMANDS
# ---------------------------------------------------------------------------
def _cmd_format(args, data: str) -> int:
    print(format_json(data, args.indent, max_depth=args.max_depth))
    return 0


def _cmd_minify(args, data: str) -> int:
    print(minify_json(data, max_depth=args.max_depth))
    return 0


def _cmd_validate(args, data: str) -> int:
    result = validate_json(data, max_depth=args.max_depth)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0 if result.is_valid else 1
    if not result.is_valid:
        raise result.error
    stats = result.stats
    print("OK")
    print(f"  objects: {stats.object_count}  arrays: {stats.array_count}  "
          f"strings: {stats.string_count}  numbers: {stats.number_count}  "
          f"booleans: {stats.boolean_count}  nulls: {stats.null_count}")
    print(f"  keys: {stats.total_keys}  max depth: {stats.max_depth}")
    return 0


def _cmd_highlight(args, data: str) -> int:
    if args.debug:
        for kind, lexeme in tokenize(data):
            print((kind.value if kind else None, lexeme))
        return 0
    print(highlight_json(data))
    return 0


def _cmd_tree(args, data: str) -> int:
    root = build_tree(data, max_depth=args.max_depth)
    if root is None:
        return 0
    for node in root.walk():
        label = node.key if node.key is not None else "$"
        if node.is_expandable:
            detail = f"{node.kind} ({node.child_count})"
        else:
            detail = f"{node.kind} {node.to_json()}"
        print(f"{'  ' * node.depth}{label}: {detail}")
    return 0

# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="json-tool", description="JSON formatter, validator and highlighter")
    ap.add_argument("--max-depth", type=_max_depth_arg, default=DEPTH_LIMIT_DEFAULT,
                    help=f"nesting limit for containers, at most {DEPTH_LIMIT_MAX} (default: %(default)s)")
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("format", help="pretty-print with sorted keys")
    p.add_argument("file", help="JSON file, or - for stdin")
    p.add_argument("--indent", type=_indent_arg, default=DEFAULT_INDENT,
                   help="2, 4, spaces:N or tabs (default: 4)")
    p.set_defaults(handler=_cmd_format)

    p = sub.add_parser("minify", help="strip insignificant whitespace")
    p.add_argument("file", help="JSON file, or - for stdin")
    p.set_defaults(handler=_cmd_minify)

    p = sub.add_parser("validate", help="check syntax and report statistics")
    p.add_argument("file", help="JSON file, or - for stdin")
    p.add_argument("--json", action="store_true", help="print the result as JSON")
    p.set_defaults(handler=_cmd_validate)

    p = sub.add_parser("highlight", help="render as highlighted HTML")
    p.add_argument("file", help="JSON file, or - for stdin")
    p.add_argument("--debug", action="store_true", help="dump token stream and exit")
    p.set_defaults(handler=_cmd_highlight)

    p = sub.add_parser("tree", help="print the document outline")
    p.add_argument("file", help="JSON file, or - for stdin")
    p.set_defaults(handler=_cmd_tree)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """
    Exit codes: 0 on success, 1 on malformed JSON or unreadable input,
    2 on usage errors (from argparse).
    """
    args = build_parser().parse_args(argv)
    set_up_logging(args.log_level)

    try:
        data = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 1
    logger.info("%s: read %d chars from %s", args.command, len(data), args.file)

    try:
        return args.handler(args, data)
    except FormatError as exc:
        print(f"SyntaxError: {exc}", file=sys.stderr)
        return 1

# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
