"""Tests for the template expansion engine."""

import pytest
from unittest.mock import Mock
from precabal.lib.parser.resolvers import IncludeResolver
from precabal.lib.parser.template import MAX_NESTING, TemplateParser, parse_template
from precabal.models.dataModel import IncludeResult, SearchContext

BOUNDS = {
    "base": "base >=4.7 && <5",
    "text": "text ^>=2.0",
    "price": "price a $ b ${base}",
    "v": "9",
    "ghc-9": "ghc-9 >=9.2",
}


@pytest.fixture
def context():
    return SearchContext.root("main.cabal.in", BOUNDS)


@pytest.fixture
def mock_resolver():
    resolver = Mock(spec=IncludeResolver)
    resolver.resolve.return_value = IncludeResult(text="included\n", path="common.inc")
    return resolver


def expand(text, context, resolver=None):
    return parse_template(context, "main.cabal.in", text, resolver)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("hello\nworld\n", "hello\nworld\n"),
        ("no final newline", "no final newline\n"),
        ("", "\n"),
        ("\n\n", "\n\n"),
        ("  indented\n\tand tabbed\n", "  indented\n\tand tabbed\n"),
        ("  -- cabal comment stays\n", "  -- cabal comment stays\n"),
    ],
)
def test_literal_text(context, text, expected):
    result = expand(text, context)
    assert result.success
    assert result.text == expected


def test_variable_substitution(context):
    result = expand("dep: ${base}\n", context)
    assert result.text == "dep: base >=4.7 && <5\n"


def test_variable_substitution_is_not_rescanned(context):
    result = expand("${price}\n", context)
    assert result.success
    assert result.text == "price a $ b ${base}\n"


def test_multiple_variables_on_one_line(context):
    result = expand("    build-depends: ${base}, ${text}\n", context)
    assert result.text == "    build-depends: base >=4.7 && <5, text ^>=2.0\n"


def test_nested_expansion_in_variable_name(context):
    assert expand("${ghc-${v}}\n", context).text == "ghc-9 >=9.2\n"


def test_quoted_variable_name(context):
    assert expand("${\"base\"}\n", context).text == "base >=4.7 && <5\n"


def test_undefined_variable(context):
    result = expand("dep: ${missing}\n", context)
    assert not result.success
    assert result.text == ""
    assert result.error.message == "undefined variable `missing`"
    assert result.error.position.source == "main.cabal.in"
    assert result.error.position.line == 1
    assert result.error.position.column == 6


def test_undefined_variable_with_empty_map():
    empty = SearchContext.root("main.cabal.in", {})
    result = expand("${base}", empty)
    assert not result.success
    assert "undefined variable" in result.error.message


def test_dollar_escape(context):
    assert expand("cost: $$5\n", context).text == "cost: $5\n"


def test_line_join(context):
    assert expand("a, $\nb\n", context).text == "a, b\n"


def test_line_join_keeps_following_indentation(context):
    assert expand("a$\n   b\n", context).text == "a   b\n"


def test_comment_line_elided(context):
    result = expand("first\n  $-- comment\nnext\n", context)
    assert result.text == "first\nnext\n"


def test_comment_line_without_newline_at_end(context):
    assert expand("first\n$-- last", context).text == "first\n"


def test_trailing_comment(context):
    assert expand("text $-- note\n", context).text == "text \n"


def test_empty_directive(context):
    assert expand("a$()b\n", context).text == "ab\n"


def test_include_directive(context, mock_resolver):
    result = expand("before\n$(include-file common.inc)after\n", context, mock_resolver)
    assert result.success
    assert result.text == "before\nincluded\nafter\n"
    mock_resolver.resolve.assert_called_once_with(context, "common.inc")


def test_include_directive_quoted_argument(context, mock_resolver):
    expand('$(include-file "dir with space/x.inc")\n', context, mock_resolver)
    mock_resolver.resolve.assert_called_once_with(context, "dir with space/x.inc")


def test_include_directive_arguments_across_lines(context, mock_resolver):
    expand("$(include-file\n   common.inc)\n", context, mock_resolver)
    mock_resolver.resolve.assert_called_once_with(context, "common.inc")


def test_include_result_is_not_rescanned(context, mock_resolver):
    mock_resolver.resolve.return_value = IncludeResult(text="${base} $$\n")
    assert expand("$(include-file x)\n", context, mock_resolver).text == "${base} $$\n\n"


def test_include_failure_positioned_at_directive(context, mock_resolver):
    mock_resolver.resolve.return_value = IncludeResult(
        error="could not find include file `x.inc`", success=False
    )
    result = expand("ok\n  $(include-file x.inc)\n", context, mock_resolver)
    assert not result.success
    assert result.error.message == "could not find include file `x.inc`"
    assert (result.error.position.line, result.error.position.column) == (2, 3)


@pytest.mark.parametrize("text", ["$(include-file)\n", "$(include-file a b)\n"])
def test_include_argument_count(context, mock_resolver, text):
    result = expand(text, context, mock_resolver)
    assert not result.success
    assert result.error.message == "include-file command takes exactly one argument"
    mock_resolver.resolve.assert_not_called()


def test_unknown_command(context):
    result = expand("$(frobnicate x)\n", context)
    assert not result.success
    assert result.error.message == "unknown command `frobnicate`"


def test_command_name_from_variable_is_dispatched(context):
    result = expand("$(${v})\n", context)
    assert result.error.message == "unknown command `9`"


@pytest.mark.parametrize("text", ["$( include-file x)\n", "$(include-file x )\n"])
def test_directive_separator_must_separate_names(context, text):
    assert not expand(text, context).success


def test_invalid_expansion(context):
    result = expand("a $x\n", context)
    assert not result.success
    assert result.error.message == "unexpected 'x', expecting expansion"
    assert result.error.position.column == 4


def test_dollar_at_end_of_input(context):
    result = expand("a$", context)
    assert result.error.message == "unexpected end of input, expecting expansion"


def test_unterminated_variable(context):
    result = expand("${base\n", context)
    assert result.error.message == "unexpected newline, expecting '}'"


def test_first_error_wins(context):
    result = expand("${one}\n${two}\n", context)
    assert result.error.message == "undefined variable `one`"


def test_parser_raises_expansion_error(context):
    from precabal.lib.parser.base import ExpansionError

    with pytest.raises(ExpansionError):
        TemplateParser("main.cabal.in", "${nope}").parse(context)


def test_io_failure_is_not_swallowed(context):
    resolver = IncludeResolver(reader=Mock(side_effect=PermissionError("denied")))
    with pytest.raises(PermissionError):
        expand("$(include-file x.inc)\n", context, resolver)


@pytest.mark.parametrize("opener, closer", [("${", "}"), ("$(", ")")])
def test_deeply_nested_names_fail_cleanly(context, opener, closer):
    depth = 200
    result = expand(opener * depth + "x" + closer * depth + "\n", context)
    assert result.success is False
    assert result.error.message == f"expansion nested too deeply (limit {MAX_NESTING})"
    assert result.error.position.column == 2 * MAX_NESTING + 1


def test_nesting_at_limit_is_allowed():
    context = SearchContext.root("main.cabal.in", {"x": "x"})
    text = "${" * MAX_NESTING + "x" + "}" * MAX_NESTING + "\n"
    result = expand(text, context)
    assert result.success
    assert result.text == "x\n"


def test_nesting_depth_is_per_expansion():
    context = SearchContext.root("main.cabal.in", {"x": "x"})
    line = "${" * 10 + "x" + "}" * 10
    result = expand((line + " ") * (MAX_NESTING + 5) + "\n", context)
    assert result.success
    assert result.text == "x " * (MAX_NESTING + 5) + "\n"
