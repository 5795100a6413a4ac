import pickle
from concurrent.futures import ProcessPoolExecutor

import pytest

from json_formatter import minify_json
from json_model import (
    DEFAULT_INDENT,
    FormatError,
    IndentStyle,
    JsonNumber,
    JsonStats,
    ValidationResult,
    kind_of,
)


def test_indent_style_default():
    assert DEFAULT_INDENT == IndentStyle.spaces(4)


def test_indent_style_units():
    assert IndentStyle.spaces(2).unit == "  "
    assert IndentStyle.spaces(4).unit == "    "
    assert IndentStyle.tabs().unit == "\t"


@pytest.mark.parametrize("setting, expected", [
    ("2", IndentStyle.spaces(2)),
    ("4", IndentStyle.spaces(4)),
    ("spaces:3", IndentStyle.spaces(3)),
    ("Tabs", IndentStyle.tabs()),
    ("tab", IndentStyle.tabs()),
])
def test_indent_style_parse(setting, expected):
    assert IndentStyle.parse(setting) == expected


@pytest.mark.parametrize("setting", ["0", "9", "1.5", "wide", ""])
def test_indent_style_rejects_unsupported_settings(setting):
    with pytest.raises(ValueError):
        IndentStyle.parse(setting)


def test_format_error_display():
    err = FormatError("unexpected token", 5, 10)
    assert str(err) == "Error at line 5, column 10: unexpected token"
    assert err.to_dict() == {"message": "unexpected token", "line": 5, "column": 10}


def test_format_error_at_offset_counts_lines_and_columns():
    text = '{\n  "key": invalid\n}'
    err = FormatError.at_offset(text, text.index("invalid"), "bad")
    assert (err.line, err.column) == (2, 10)
    start = FormatError.at_offset(text, 0, "bad")
    assert (start.line, start.column) == (1, 1)


def test_format_error_survives_pickling():
    err = FormatError("unexpected token", 2, 10)
    copy = pickle.loads(pickle.dumps(err))
    assert type(copy) is FormatError
    assert (copy.message, copy.line, copy.column) == ("unexpected token", 2, 10)
    assert str(copy) == str(err)


def test_format_error_crosses_a_process_pool():
    with ProcessPoolExecutor(max_workers=1) as pool:
        future = pool.submit(minify_json, "{invalid}")
        with pytest.raises(FormatError) as ei:
            future.result()
    assert (ei.value.line, ei.value.column) == (1, 2)


def test_json_number_is_lossless():
    big = JsonNumber("9007199254740993")
    assert big.is_integer
    frac = JsonNumber("0.1")
    assert not frac.is_integer
    assert str(frac) == "0.1"
    assert JsonNumber("1.0") != JsonNumber("1")


def test_json_number_is_immutable():
    n = JsonNumber("1")
    with pytest.raises(AttributeError):
        n.text = "2"


def test_kind_of():
    assert [kind_of(v) for v in (None, True, JsonNumber("1"), "s", [], {})] == [
        "null", "boolean", "number", "string", "array", "object",
    ]
    with pytest.raises(TypeError):
        kind_of(1.5)


def test_json_stats_default():
    stats = JsonStats()
    assert stats.object_count == 0
    assert stats.max_depth == 0
    assert stats.total_nodes == 0


def test_validation_result_valid():
    result = ValidationResult.valid(JsonStats(object_count=1, array_count=2))
    assert result.is_valid
    assert result.error is None
    assert result.stats.object_count == 1


def test_validation_result_invalid():
    result = ValidationResult.invalid(FormatError("syntax error", 1, 5))
    assert not result.is_valid
    assert result.error.message == "syntax error"
    assert result.stats == JsonStats()
    assert result.to_dict()["error"] == {"message": "syntax error", "line": 1, "column": 5}
