# json_highlighter.py
# Lenient JSON tokenizer and HTML highlighter.
#
# =============================================================================
#  SCANNER DESIGN: ONE PASS, NO PARSE TREE
# =============================================================================
#
# Highlighting runs on whatever the user has typed, so it must never fail.
# The scanner walks the text once, classifying character runs as it goes:
#
# 1. Strings, numbers and keywords are matched with small anchored regexes
#    that mirror the JSON grammar but stop quietly where the grammar would
#    reject (unterminated strings run to end of input, "1." and "-" are
#    still numbers).
# 2. Whether a string is an object key is decided purely by position: a
#    KeyContext automaton (stack of open brackets plus an expecting-key
#    flag) tracks it. No look-ahead for a colon is ever made.
# 3. Lexemes are yielded raw. HTML escaping happens once, when rendering,
#    so the token stream can be inspected and reassembled into the input.
# =============================================================================

import html
import re
import unicodedata
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple


class TokenKind(Enum):
    STRING = "string"
    KEY = "key"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    PUNCTUATION = "punctuation"


# Dark editor theme.
DEFAULT_PALETTE: Dict[TokenKind, str] = {
    TokenKind.STRING: "#ce9178",
    TokenKind.KEY: "#9cdcfe",
    TokenKind.NUMBER: "#b5cea8",
    TokenKind.BOOLEAN: "#569cd6",
    TokenKind.NULL: "#569cd6",
    TokenKind.PUNCTUATION: "#d4d4d4",
}

PRE_OPEN = '<pre style="margin:0;font-family:inherit;">'
PRE_CLOSE = "</pre>"

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_WHITESPACE_RE = re.compile(r"[ \t\n\r]+")
# A backslash always takes the next character with it, even a quote or a
# newline; a trailing lone backslash stays inside the string.
_STRING_RE = re.compile(r'"(?:[^"\\]|\\.?)*"?', re.DOTALL)
_NUMBER_RE = re.compile(r"-?[0-9]*(?:\.[0-9]*)?(?:[eE][+-]?[0-9]*)?")

_KEYWORDS = {
    "t": ("true", TokenKind.BOOLEAN),
    "f": ("false", TokenKind.BOOLEAN),
    "n": ("null", TokenKind.NULL),
}

_DIGITS = "0123456789"

Token = Tuple[Optional[TokenKind], str]

# ---------------------------------------------------------------------------
# KEY CONTEXT AUTOMATON
# ---------------------------------------------------------------------------
class KeyContext:
    """
    Tracks whether the next string sits in key position.

    State is a stack of open brackets and one flag. The flag is set right
    after ``{`` and after a comma whose innermost open bracket is ``{``;
    every other token clears it. Unbalanced closers are ignored.
    """

    def __init__(self):
        self._stack: List[str] = []
        self.expecting_key = False

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def in_object(self) -> bool:
        return bool(self._stack) and self._stack[-1] == "{"

    def open_bracket(self, bracket: str) -> None:
        self._stack.append(bracket)
        self.expecting_key = bracket == "{"

    def close_bracket(self) -> None:
        if self._stack:
            self._stack.pop()
        self.expecting_key = False

    def colon(self) -> None:
        self.expecting_key = False

    def comma(self) -> None:
        self.expecting_key = self.in_object

    def value(self) -> None:
        self.expecting_key = False

# ---------------------------------------------------------------------------
# SCANNER
# ---------------------------------------------------------------------------
def _match_keyword(text: str, pos: int, word: str) -> bool:
    if not text.startswith(word, pos):
        return False
    end = pos + len(word)
    if end >= len(text):
        return True
    # Combining marks continue a word too ("true\u093e" is not a keyword).
    nxt = text[end]
    return not (nxt.isalnum() or unicodedata.category(nxt).startswith("M"))


def tokenize(text: str) -> Iterator[Token]:
    """
    Yield ``(kind, lexeme)`` pairs covering ``text`` exactly, in order.

    ``kind`` is None for whitespace runs and for characters that belong to
    no token. Joining every lexeme gives back the input.
    """
    ctx = KeyContext()
    pos = 0
    n = len(text)
    while pos < n:
        ch = text[pos]

        if ch in " \t\n\r":
            m = _WHITESPACE_RE.match(text, pos)
            yield None, m.group()
            pos = m.end()
            continue

        if ch in "{[":
            ctx.open_bracket(ch)
            yield TokenKind.PUNCTUATION, ch
            pos += 1
            continue

        if ch in "}]":
            ctx.close_bracket()
            yield TokenKind.PUNCTUATION, ch
            pos += 1
            continue

        if ch == ":":
            ctx.colon()
            yield TokenKind.PUNCTUATION, ch
            pos += 1
            continue

        if ch == ",":
            ctx.comma()
            yield TokenKind.PUNCTUATION, ch
            pos += 1
            continue

        if ch == '"':
            m = _STRING_RE.match(text, pos)
            kind = TokenKind.KEY if ctx.expecting_key else TokenKind.STRING
            ctx.value()
            yield kind, m.group()
            pos = m.end()
            continue

        if ch == "-" or ch in _DIGITS:
            m = _NUMBER_RE.match(text, pos)
            ctx.value()
            yield TokenKind.NUMBER, m.group()
            pos = m.end()
            continue

        keyword = _KEYWORDS.get(ch)
        if keyword is not None and _match_keyword(text, pos, keyword[0]):
            word, kind = keyword
            ctx.value()
            yield kind, word
            pos += len(word)
            continue

        yield None, ch
        pos += 1

# ---------------------------------------------------------------------------
# RENDERING
# ---------------------------------------------------------------------------
def _check_palette(palette: Mapping[TokenKind, str]) -> None:
    missing = [kind.name for kind in TokenKind if kind not in palette]
    if missing:
        raise ValueError(f"palette has no color for {', '.join(missing)}")


def highlight_json(text: str, palette: Optional[Mapping[TokenKind, str]] = None) -> str:
    """
    Render JSON-like text as HTML with one colored span per token.

    Works on any input, valid JSON or not. ``<``, ``>`` and ``&`` are always
    escaped. Empty input gives an empty string, without the ``<pre>`` wrapper.
    """
    if not text:
        return ""
    if palette is None:
        palette = DEFAULT_PALETTE
    else:
        _check_palette(palette)

    out: List[str] = [PRE_OPEN]
    for kind, lexeme in tokenize(text):
        escaped = html.escape(lexeme, quote=False)
        if kind is None:
            out.append(escaped)
        else:
            out.append(f'<span style="color:{palette[kind]}">{escaped}</span>')
    out.append(PRE_CLOSE)
    return "".join(out)
