# json_parser.py
# Hand-rolled JSON lexer and parser producing the value tree used by the
# formatter, validator and tree outline.
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT FOR STRUCTURE
# =============================================================================
#
# This parser uses a classic recursive-descent strategy for JSON, which is
# expression-free and thus well-suited for direct, predictable control flow
# without an expression parser layer [cs.rochester.edu, Recursive-Descent
# Parsing].
#
# Design Rationale:
# 1. JSON grammar is LL(1)-friendly: No left recursion or complex precedence
#    rules, making a hand-coded descent parser both fast and transparent.
# 2. Direct function-to-rule mapping keeps the control graph thin.
# 3. LookAhead iterator provides a one-token pushback without the
#    overhead of a full token buffer.
#
# Lexer uses a single compiled regex with named groups and treats any gap in
# match coverage as the first unparseable character.
#
# Errors carry the absolute character offset of the offending token until
# parse() converts them into a FormatError with 1-based line and column.
#
# Depth guard defaults to 128 nested containers, bounding recursion in the
# parser and in every consumer that walks the tree [RFC 8259, Section 9].
# Callers may raise the limit up to DEPTH_LIMIT_MAX and no further.
#
# =============================================================================
#  REFERENCES
# =============================================================================
# [1] cs.rochester.edu - Recursive-Descent Parsing
# [2] craftinginterpreters.com - Scanning
# [3] RFC 8259 - The JavaScript Object Notation (JSON) standard
# =============================================================================

import logging
import re
from typing import Iterator, List, Tuple

from json_model import FormatError, JsonNumber

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 128    # Nested containers allowed before the guard trips
DEPTH_LIMIT_MAX = 256        # Highest limit a caller may request

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_WHITESPACE = r"[ \t\n\r]+"
_NUMBER     = r'-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?'
_ESCAPE     = r'\\.'
_STRING     = r'"(?:[^"\\\x00-\x1F]|' + _ESCAPE + r')*"'
_LITERAL    = r"true|false|null"

_TOKEN_RE = re.compile(
    rf"(?P<STRING>{_STRING})|"
    rf"(?P<NUMBER>{_NUMBER})|"
    rf"(?P<LITERAL>{_LITERAL})|"
    r"(?P<BRACE>[{}])|"          # { or }
    r"(?P<BRACKET>[\[\]])|"      # [ or ]
    r"(?P<COMMA>,)|"
    r"(?P<COLON>:)|"
    rf"(?P<WHITESPACE>{_WHITESPACE})",
    re.ASCII,
)

_LITERALS = {"true": True, "false": False, "null": None}

_SIMPLE_ESCAPES = {
    '"': '"', "\\": "\\", "/": "/",
    "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t",
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# ---------------------------------------------------------------------------
# TOKEN RECORD
# ---------------------------------------------------------------------------
class Token(Tuple[str, object, int]):
    """
    Immutable token record: (kind, value, absolute_offset).

    Offsets are retained for precise error locations.
    """
    pass


class _ParseError(Exception):
    """Internal failure carrying a character offset; parse() locates it."""

    def __init__(self, message: str, offset: int):
        super().__init__(message)
        self.message = message
        self.offset = offset

# ---------------------------------------------------------------------------
# LOOKAHEAD RING
# ---------------------------------------------------------------------------
class LookAhead:
    """
    One-slot pushback iterator.

    ``end`` is the offset reported when the token stream runs dry.
    """
    def __init__(self, iterable: Iterator[Token], end: int):
        self._iter = iter(iterable)
        self._buf: List[Token] = []
        self.end = end

    def __iter__(self):
        return self

    def __next__(self):
        if self._buf:
            return self._buf.pop()
        return next(self._iter)

    def peek(self) -> Token:
        if not self._buf:
            self._buf.append(next(self._iter))
        return self._buf[-1]

    def take(self) -> Token:
        """next() that turns exhaustion into an end-of-input error."""
        try:
            return next(self)
        except StopIteration:
            raise _ParseError("unexpected end of input", self.end) from None

    def look(self) -> Token:
        """peek() that turns exhaustion into an end-of-input error."""
        try:
            return self.peek()
        except StopIteration:
            raise _ParseError("unexpected end of input", self.end) from None

# ---------------------------------------------------------------------------
# STRING DECODING
# ---------------------------------------------------------------------------
def _read_hex4(inner: str, i: int, offset: int) -> int:
    """Read the four hex digits of a \\u escape starting at inner[i]."""
    hexpart = inner[i + 2:i + 6]
    if len(hexpart) < 4:
        raise _ParseError("short unicode escape", offset)
    if not all(c in _HEX_DIGITS for c in hexpart):
        raise _ParseError(f"invalid hex escape \\u{hexpart}", offset)
    return int(hexpart, 16)


def _decode_string(raw: str, token_start: int) -> str:
    """
    Unescape a JSON string token and reject invalid escapes.

    The token regex already guarantees the quotes and the absence of raw
    control characters. What is left:
    1) Escape syntax - invalid single escape, short unicode escape, invalid hex digits.
    2) Unicode correctness - surrogate pairs are combined, lone halves rejected.
    """
    inner = raw[1:-1]
    if "\\" not in inner:
        return inner

    out: List[str] = []
    i = 0
    n = len(inner)
    while i < n:
        ch = inner[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        offset = token_start + 1 + i
        esc = inner[i + 1]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            i += 2
            continue
        if esc != "u":
            raise _ParseError(f"invalid escape \\{esc}", offset)

        code = _read_hex4(inner, i, offset)
        i += 6
        if 0xD800 <= code <= 0xDBFF:
            if not inner.startswith("\\u", i):
                raise _ParseError("unpaired surrogate in string", offset)
            low = _read_hex4(inner, i, token_start + 1 + i)
            if not 0xDC00 <= low <= 0xDFFF:
                raise _ParseError("unpaired surrogate in string", offset)
            code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
            i += 6
        elif 0xDC00 <= code <= 0xDFFF:
            raise _ParseError("unpaired surrogate in string", offset)
        out.append(chr(code))
    return "".join(out)


def _describe_gap(text: str, pos: int) -> _ParseError:
    """Explain the character the token regex could not cover."""
    ch = text[pos]
    if ch == '"':
        # Find where the string body stops being valid.
        i = pos + 1
        while i < len(text):
            c = text[i]
            if c == '"':
                break
            if c == "\\":
                if i + 1 < len(text) and text[i + 1] in "\r\n":
                    return _ParseError("invalid escape before line break", i)
                i += 2
                continue
            if ord(c) < 0x20:
                return _ParseError(f"control character U+{ord(c):04X} in string", i)
            i += 1
        return _ParseError("unterminated string", pos)
    return _ParseError(f"invalid character {ch!r}", pos)


def lex(text: str) -> Iterator[Token]:
    """
    Single-pass generator producing tokens. Rejects any gap in regex coverage.

    Early conversion to value types moves interpretation out of the parse
    loop: strings are unescaped, numbers wrapped in JsonNumber, literals
    mapped to True/False/None.
    """
    pos = 0
    for m in _TOKEN_RE.finditer(text):
        kind  = m.lastgroup
        value = m.group()
        start = m.start()

        if start != pos:
            raise _describe_gap(text, pos)  # Gap in match coverage
        pos = m.end()

        if kind == "WHITESPACE":
            continue
        if kind == "STRING":
            value = _decode_string(value, start)
        elif kind == "NUMBER":
            value = JsonNumber(value)
        elif kind == "LITERAL":
            value = _LITERALS[value]

        yield Token((kind, value, start))

    if pos != len(text):
        raise _describe_gap(text, pos)

# ---------------------------------------------------------------------------
# PARSER UTILITY
# ---------------------------------------------------------------------------
def _describe(kind: str, value) -> str:
    if kind == "LITERAL":
        return {True: "true", False: "false", None: "null"}[value]
    if kind == "STRING":
        return f'"{value}"'
    return str(value)


def _expect(tokens: LookAhead, expected_kind: str, expected_value=None):
    """
    Consume and verify the next token. Raises a precise error with expected and actual.
    """
    kind, value, pos = tokens.take()
    if kind != expected_kind or (expected_value is not None and value != expected_value):
        exp = expected_kind if expected_value is None else f"{expected_kind} '{expected_value}'"
        raise _ParseError(f"unexpected token {kind} '{_describe(kind, value)}' - expected {exp}", pos)
    return value

# ---------------------------------------------------------------------------
# CORE VALUE PARSER
# ---------------------------------------------------------------------------
def _parse_value(tokens: LookAhead, depth: int, max_depth: int, allow_dup: bool):
    """
    Dispatch based on token type. Entering a container counts one level
    against the depth limit.
    """
    kind, value, pos = tokens.take()

    if kind in {"STRING", "NUMBER", "LITERAL"}:
        return value
    if (kind == "BRACE" and value == "{") or (kind == "BRACKET" and value == "["):
        if depth + 1 > max_depth:
            raise _ParseError(f"depth limit exceeded (max {max_depth})", pos)
        if kind == "BRACE":
            return _parse_object(tokens, depth + 1, max_depth, allow_dup)
        return _parse_array(tokens, depth + 1, max_depth, allow_dup)

    raise _ParseError(f"unexpected token {kind} '{_describe(kind, value)}' - value expected", pos)

# ---------------------------------------------------------------------------
# ARRAY PARSER
# ---------------------------------------------------------------------------
def _parse_array(tokens: LookAhead, depth: int, max_depth: int, allow_dup: bool) -> list:
    items: List = []
    pk = tokens.look()
    if pk[0] == "BRACKET" and pk[1] == "]":
        next(tokens)
        return items

    while True:
        items.append(_parse_value(tokens, depth, max_depth, allow_dup))
        pk = tokens.look()
        if pk[0] == "BRACKET" and pk[1] == "]":
            next(tokens)
            break
        _expect(tokens, "COMMA", ",")
    return items

# ---------------------------------------------------------------------------
# OBJECT PARSER
# ---------------------------------------------------------------------------
def _parse_object(tokens: LookAhead, depth: int, max_depth: int, allow_dup: bool) -> dict:
    """
    Parses a JSON object. Duplicate keys keep the last value unless
    ``allow_dup`` is off, in which case the repeat is an error.
    """
    obj = {}
    pk = tokens.look()
    if pk[0] == "BRACE" and pk[1] == "}":
        next(tokens)
        return obj

    while True:
        key_pos = tokens.look()[2]
        key = _expect(tokens, "STRING")
        _expect(tokens, "COLON", ":")
        if not allow_dup and key in obj:
            raise _ParseError(f"duplicate key {key!r}", key_pos)
        obj[key] = _parse_value(tokens, depth, max_depth, allow_dup)
        pk = tokens.look()
        if pk[0] == "BRACE" and pk[1] == "}":
            next(tokens)
            break
        _expect(tokens, "COMMA", ",")
    return obj

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT, allow_dup: bool = True):
    """
    Parses JSON text into a value tree.

    Any JSON value is accepted at the root. Trailing tokens are rejected to
    maintain full input consumption. Raises FormatError located at the
    first offending token.
    """
    if not 1 <= max_depth <= DEPTH_LIMIT_MAX:
        raise ValueError(f"max_depth must be between 1 and {DEPTH_LIMIT_MAX}, got {max_depth}")
    tokens = LookAhead(lex(text), len(text))
    try:
        result = _parse_value(tokens, 0, max_depth, allow_dup)
        try:
            _, _, extra_pos = next(tokens)
        except StopIteration:
            return result
        raise _ParseError("extra data after root value", extra_pos)
    except _ParseError as exc:
        err = FormatError.at_offset(text, exc.offset, exc.message)
        logger.debug("parse failed: %s", err)
        raise err from None
