import pytest

import json_parser as jp
from json_model import FormatError, JsonNumber


def test_extra_data_reports_location():
    with pytest.raises(FormatError) as ei:
        jp.parse('[1] 2')
    assert "extra data after root value" in ei.value.message
    assert ei.value.column == 5


def test_scalar_roots_are_accepted():
    assert jp.parse('true') is True
    assert jp.parse(' null ') is None
    assert jp.parse('"x"') == "x"
    assert jp.parse('-1.5e3') == JsonNumber("-1.5e3")


def test_empty_input_is_unexpected_end():
    with pytest.raises(FormatError) as ei:
        jp.parse('   ')
    assert "unexpected end of input" in ei.value.message
    assert (ei.value.line, ei.value.column) == (1, 4)


def test_duplicate_keys_last_one_wins_by_default():
    assert jp.parse('{"a":1,"a":2}') == {"a": JsonNumber("2")}


def test_duplicate_key_rejected_when_disallowed():
    with pytest.raises(FormatError) as ei:
        jp.parse('{"a":1,"a":2}', allow_dup=False)
    assert "duplicate key" in ei.value.message
    assert ei.value.column == 8


def test_missing_comma_in_object_reports_expected():
    with pytest.raises(FormatError) as ei:
        jp.parse('{"a":1 "b":2}')
    assert "expected COMMA" in str(ei.value)


def test_missing_closing_bracket_in_array():
    with pytest.raises(FormatError) as ei:
        jp.parse('[1,2')
    assert "unexpected end of input" in str(ei.value)


def test_trailing_comma_rejected():
    with pytest.raises(FormatError):
        jp.parse('{"key": "value",}')


def test_leading_zero_rejected():
    with pytest.raises(FormatError):
        jp.parse('[01]')


def test_invalid_literal_reports_line_two():
    with pytest.raises(FormatError) as ei:
        jp.parse('{\n  "key": invalid\n}')
    assert ei.value.line == 2
    assert ei.value.column == 10


def test_error_is_a_syntax_error():
    with pytest.raises(SyntaxError):
        jp.parse('{invalid}')


def test_depth_limit_boundary():
    ok = "[" * 5 + "]" * 5
    assert jp.parse(ok, max_depth=5) == [[[[[]]]]]
    with pytest.raises(FormatError) as ei:
        jp.parse("[" * 6 + "]" * 6, max_depth=5)
    assert "depth limit exceeded" in ei.value.message
    assert ei.value.column == 6


def test_default_depth_limit_stops_runaway_nesting():
    with pytest.raises(FormatError):
        jp.parse("[" * 500 + "]" * 500)


def test_depth_limit_is_capped():
    deepest = "[" * jp.DEPTH_LIMIT_MAX + "]" * jp.DEPTH_LIMIT_MAX
    value = jp.parse(deepest, max_depth=jp.DEPTH_LIMIT_MAX)
    for _ in range(jp.DEPTH_LIMIT_MAX - 1):
        value = value[0]
    assert value == []
    for limit in (0, jp.DEPTH_LIMIT_MAX + 1, 10000):
        with pytest.raises(ValueError):
            jp.parse("[1]", max_depth=limit)


def test_numbers_keep_their_literal_text():
    value = jp.parse('[9007199254740993, 1.0, 1E400, -0.0]')
    assert [n.text for n in value] == ["9007199254740993", "1.0", "1E400", "-0.0"]


def test_lex_yields_offsets():
    tokens = list(jp.lex('{"a": [true]}'))
    assert [(k, off) for k, _, off in tokens] == [
        ("BRACE", 0), ("STRING", 1), ("COLON", 4), ("BRACKET", 6),
        ("LITERAL", 7), ("BRACKET", 11), ("BRACE", 12),
    ]
