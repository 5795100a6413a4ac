# json_model.py
# Value model and result records shared by the parser, formatter and validator.
#
# =============================================================================
#  VALUE MODEL
# =============================================================================
#
# Parsed JSON is held in Python native types: None, bool, str, list, dict.
# Numbers are the one exception. A JsonNumber keeps the literal text exactly
# as it appeared in the source so that re-serialization never routes through
# a binary float (2**53 + 1, 1.0 and 1e400 all survive a format pass
# unchanged).
# =============================================================================

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
MAX_INDENT_WIDTH = 8     # Widest space indent accepted by IndentStyle.spaces()


# ---------------------------------------------------------------------------
# NUMBER LITERAL
# ---------------------------------------------------------------------------
class JsonNumber:
    """
    Immutable JSON number, stored as its original literal text.

    Equality and hashing go by text, so ``1.0`` and ``1`` are distinct
    values, as they are distinct literals.
    """
    __slots__ = ("text",)

    def __init__(self, text: str):
        object.__setattr__(self, "text", text)

    def __setattr__(self, name, value):
        raise AttributeError("JsonNumber is immutable")

    @property
    def is_integer(self) -> bool:
        return not any(c in self.text for c in ".eE")

    def __eq__(self, other):
        if isinstance(other, JsonNumber):
            return self.text == other.text
        return NotImplemented

    def __hash__(self):
        return hash(("JsonNumber", self.text))

    def __repr__(self):
        return f"JsonNumber({self.text!r})"

    def __str__(self):
        return self.text


Value = Union[None, bool, JsonNumber, str, list, dict]


def kind_of(value: Any) -> str:
    """Type name of a Value: object, array, string, number, boolean or null."""
    if value is None:
        return "null"
    # bool before anything numeric-looking
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, JsonNumber):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TypeError(f"not a JSON value: {type(value).__name__}")


# ---------------------------------------------------------------------------
# INDENTATION
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class IndentStyle:
    """One level of indentation: ``width`` spaces, or a tab when ``use_tabs``."""
    width: int = 4
    use_tabs: bool = False

    def __post_init__(self):
        if not self.use_tabs and not 1 <= self.width <= MAX_INDENT_WIDTH:
            raise ValueError(
                f"indent width must be between 1 and {MAX_INDENT_WIDTH}, got {self.width}"
            )

    @classmethod
    def spaces(cls, width: int) -> "IndentStyle":
        return cls(width=width)

    @classmethod
    def tabs(cls) -> "IndentStyle":
        return cls(use_tabs=True)

    @classmethod
    def parse(cls, setting: str) -> "IndentStyle":
        """
        Read an indent setting: ``"2"``, ``"4"``, ``"spaces:N"`` or ``"tabs"``.
        """
        norm = setting.strip().lower()
        if norm in ("tab", "tabs"):
            return cls.tabs()
        if norm.startswith("spaces:"):
            norm = norm[len("spaces:"):]
        if not norm.isdigit():
            raise ValueError(f"unrecognized indent setting {setting!r}")
        return cls.spaces(int(norm))

    @property
    def unit(self) -> str:
        return "\t" if self.use_tabs else " " * self.width

    def __str__(self):
        return "tabs" if self.use_tabs else f"spaces:{self.width}"


DEFAULT_INDENT = IndentStyle.spaces(4)


# ---------------------------------------------------------------------------
# ERRORS
# ---------------------------------------------------------------------------
class FormatError(SyntaxError):
    """
    Malformed JSON, located at the first offending token.

    ``line`` and ``column`` are 1-based. Column counts characters (code
    points) since the last newline.
    """

    def __init__(self, message: str, line: int, column: int):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        # Keep the SyntaxError view consistent for tracebacks.
        self.lineno = line
        self.offset = column

    @classmethod
    def at_offset(cls, text: str, offset: int, message: str) -> "FormatError":
        offset = max(0, min(offset, len(text)))
        line = text.count("\n", 0, offset) + 1
        column = offset - (text.rfind("\n", 0, offset) + 1) + 1
        return cls(message, line, column)

    def __reduce__(self):
        return (type(self), (self.message, self.line, self.column))

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "line": self.line, "column": self.column}

    def __str__(self):
        return f"Error at line {self.line}, column {self.column}: {self.message}"

    def __repr__(self):
        return f"FormatError({self.message!r}, line={self.line}, column={self.column})"


# ---------------------------------------------------------------------------
# STATISTICS
# ---------------------------------------------------------------------------
@dataclass
class JsonStats:
    object_count: int = 0
    array_count: int = 0
    string_count: int = 0
    number_count: int = 0
    boolean_count: int = 0
    null_count: int = 0
    max_depth: int = 0
    total_keys: int = 0

    @property
    def total_nodes(self) -> int:
        return (self.object_count + self.array_count + self.string_count
                + self.number_count + self.boolean_count + self.null_count)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class ValidationResult:
    is_valid: bool
    error: Optional[FormatError] = None
    stats: JsonStats = None

    def __post_init__(self):
        if self.stats is None:
            self.stats = JsonStats()

    @classmethod
    def valid(cls, stats: JsonStats) -> "ValidationResult":
        return cls(is_valid=True, stats=stats)

    @classmethod
    def invalid(cls, error: FormatError) -> "ValidationResult":
        return cls(is_valid=False, error=error, stats=JsonStats())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "error": self.error.to_dict() if self.error is not None else None,
            "stats": self.stats.to_dict(),
        }
