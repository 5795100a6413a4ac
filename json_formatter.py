# json_formatter.py
# Canonical formatter and minifier: sorted keys, fixed escaping, fixed
# indentation. Operates on the value tree built by json_parser.

import logging
import re
from typing import List

from json_model import DEFAULT_INDENT, IndentStyle, JsonNumber
from json_parser import DEPTH_LIMIT_DEFAULT, parse

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# SHARED ENCODING HELPERS
# ---------------------------------------------------------------------------
_NEEDS_ESCAPE_RE = re.compile(r'["\\\x00-\x1f]')

_SHORT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _escape_char(m: "re.Match") -> str:
    ch = m.group()
    return _SHORT_ESCAPES.get(ch) or f"\\u{ord(ch):04x}"


def encode_string(s: str) -> str:
    """
    Quote a string for output.

    Quote, backslash, newline, carriage return and tab use their two-character
    forms; other code points below 0x20 become \\u00xx (lowercase hex).
    Everything else, non-ASCII included, passes through unescaped.
    """
    return '"' + _NEEDS_ESCAPE_RE.sub(_escape_char, s) + '"'


def encode_number(n: JsonNumber) -> str:
    """Numbers are written back as the literal the parser saw."""
    return n.text


def _encode_scalar(value) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, JsonNumber):
        return encode_number(value)
    if isinstance(value, str):
        return encode_string(value)
    raise TypeError(f"not a JSON value: {type(value).__name__}")

# ---------------------------------------------------------------------------
# PRETTY RENDERING
# ---------------------------------------------------------------------------
def _pretty(value, unit: str, depth: int, out: List[str]) -> None:
    if isinstance(value, list):
        if not value:
            out.append("[]")
            return
        inner = unit * (depth + 1)
        out.append("[\n")
        last = len(value) - 1
        for i, item in enumerate(value):
            out.append(inner)
            _pretty(item, unit, depth + 1, out)
            out.append(",\n" if i < last else "\n")
        out.append(unit * depth)
        out.append("]")
    elif isinstance(value, dict):
        if not value:
            out.append("{}")
            return
        inner = unit * (depth + 1)
        out.append("{\n")
        keys = sorted(value)
        last = len(keys) - 1
        for i, key in enumerate(keys):
            out.append(inner)
            out.append(encode_string(key))
            out.append(": ")
            _pretty(value[key], unit, depth + 1, out)
            out.append(",\n" if i < last else "\n")
        out.append(unit * depth)
        out.append("}")
    else:
        out.append(_encode_scalar(value))


def render_pretty(value, indent: IndentStyle = DEFAULT_INDENT) -> str:
    """Render a parsed value, one value per line, nested by ``indent``."""
    out: List[str] = []
    _pretty(value, indent.unit, 0, out)
    return "".join(out)

# ---------------------------------------------------------------------------
# COMPACT RENDERING
# ---------------------------------------------------------------------------
def _compact(value, out: List[str]) -> None:
    if isinstance(value, list):
        out.append("[")
        for i, item in enumerate(value):
            if i:
                out.append(",")
            _compact(item, out)
        out.append("]")
    elif isinstance(value, dict):
        out.append("{")
        for i, key in enumerate(sorted(value)):
            if i:
                out.append(",")
            out.append(encode_string(key))
            out.append(":")
            _compact(value[key], out)
        out.append("}")
    else:
        out.append(_encode_scalar(value))


def render_compact(value) -> str:
    """Render a parsed value with no insignificant whitespace."""
    out: List[str] = []
    _compact(value, out)
    return "".join(out)

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def format_json(text: str, indent: IndentStyle = DEFAULT_INDENT, *,
                max_depth: int = DEPTH_LIMIT_DEFAULT) -> str:
    """
    Pretty-print JSON text with sorted keys.

    Raises FormatError, unchanged from the parser, if the text is malformed.
    """
    value = parse(text, max_depth=max_depth)
    result = render_pretty(value, indent)
    logger.debug("formatted %d chars into %d chars (%s)", len(text), len(result), indent)
    return result


def minify_json(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> str:
    """Strip all insignificant whitespace. Same key order and escaping as format_json."""
    value = parse(text, max_depth=max_depth)
    result = render_compact(value)
    logger.debug("minified %d chars into %d chars", len(text), len(result))
    return result
