"""Tests for the bindings file parser."""

import pytest
from precabal.lib.parser.bindings import parse_bindings


def test_single_binding():
    result = parse_bindings("package-bounds.txt", "base >=4.7 && <5\n")
    assert result.success
    assert result.bindings == {"base": "base >=4.7 && <5"}


def test_trailing_spaces_trimmed():
    result = parse_bindings("b", "text   ^>=2.0    \n")
    assert result.bindings["text"] == "text ^>=2.0"


def test_comments_and_blank_lines():
    text = "-- bounds\n\n  base  >=4\n-- another comment\n\ntext ^>=2.0\n"
    result = parse_bindings("b", text)
    assert result.success
    assert result.bindings == {"base": "base >=4", "text": "text ^>=2.0"}


def test_quoted_name_and_value():
    result = parse_bindings("b", "\"my pkg\" 'a b'\n")
    assert result.bindings == {"my pkg": "my pkg a b"}


def test_mixed_compound_value():
    result = parse_bindings("b", "x >=1 \"&&\" <2\n")
    assert result.bindings["x"] == "x >=1 && <2"


def test_quoted_value_with_escapes():
    result = parse_bindings("b", r'msg "say \"hi\""' + "\n")
    assert result.bindings["msg"] == 'msg say "hi"'


def test_annotation_terminator():
    text = "base >=4.7 $-- oldest supported\ncontainers ^>=0.6\n"
    result = parse_bindings("b", text)
    assert result.success
    assert result.bindings == {
        "base": "base >=4.7",
        "containers": "containers ^>=0.6",
    }


def test_annotation_at_end_of_input():
    result = parse_bindings("b", "base >=4.7 $-- no newline")
    assert result.success
    assert result.bindings == {"base": "base >=4.7"}


def test_empty_file():
    result = parse_bindings("b", "")
    assert result.success
    assert result.bindings == {}


def test_only_comments():
    assert parse_bindings("b", "-- nothing here\n-- at all").bindings == {}


def test_redefinition_fails_at_duplicate():
    result = parse_bindings("bounds.txt", "a 1\nb 2\na 3\n")
    assert not result.success
    assert result.error.message == "attempt to redefine `a`"
    assert result.error.position.source == "bounds.txt"
    assert result.error.position.line == 3
    assert result.error.position.column == 1
    assert result.bindings == {}


def test_missing_value():
    result = parse_bindings("b", "lonely\n")
    assert not result.success
    assert "expecting compound word" in result.error.message
    assert result.error.position.line == 1


def test_unterminated_last_binding():
    result = parse_bindings("b", "a 1\nb 2")
    assert not result.success
    assert result.error.message.startswith("unexpected end of input")
    assert result.error.position.line == 2


@pytest.mark.parametrize("text", ["a\t1\n", "\tx 1\n", "a 1\r\n"])
def test_control_characters_rejected(text):
    assert not parse_bindings("b", text).success


def test_template_style_comment_prefix_is_not_a_gap():
    result = parse_bindings("b", "$-- not a bindings comment\n")
    assert not result.success
    assert result.error.message == "unexpected '$', expecting variable binding"


def test_excerpt_in_pretty_error():
    result = parse_bindings("bounds.txt", "a 1\na 2\n")
    assert result.error.pretty() == "\n".join(
        [
            "bounds.txt:2:1:",
            "  |",
            "2 | a 2",
            "  | ^",
            "attempt to redefine `a`",
        ]
    )
