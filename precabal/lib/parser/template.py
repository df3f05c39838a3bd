r"""
Template expansion engine.

Expands a template line by line. Literal text is copied through; a `$`
introduces an expansion:

- ``$(include-file "path")`` -- directive; the only command defined
- ``${name}`` -- variable reference, replaced by its binding verbatim
- ``$$`` -- a literal dollar sign
- ``$`` at end of line -- joins the next line onto this one
- ``$-- text`` -- comment; a line holding only such a comment disappears

Names inside directives and variable references are compound words made of
quoted strings, barewords and nested expansions, so ``${ghc-${version}}``
and ``$(include-file ${dir}/common.inc)`` both work.

Every produced line ends in a newline, whether or not the source line had
one. Text returned by a variable or an include is never rescanned.

Example:
    context = SearchContext.root("pkg.cabal.in", {"base": "base >=4.7"})
    result = parse_template(context, "pkg.cabal.in", "deps: ${base}\n")
    # result.text == "deps: base >=4.7\n"
"""

from typing import Callable, Self
from precabal.lib.parser.base import ExpansionError, TextCursor
from precabal.lib.parser.primitives import (
    comment_skip,
    compound,
    quoted_string,
    space_lf_skip1,
    unquoted_token,
)
from precabal.lib.parser.resolvers import IncludeResolver
from precabal.models.dataModel import IncludeResult, ParseResult, SearchContext

# Deepest nesting of ${...} and $(...) inside one name
MAX_NESTING: int = 48

Command = Callable[[SearchContext, list[str], int], str]


class TemplateParser:
    """Recursive descent expander for one template file.

    The parser owns the cursor over its file. The SearchContext is passed
    explicitly to every rule, since it differs for each included file.

    Attributes:
        cursor: Read position in the template text
        resolver: Include resolver used by the include-file command
        commands: Directive dispatch table
    """

    def __init__(
        self: Self, source: str, text: str, resolver: IncludeResolver | None = None
    ) -> None:
        self.cursor: TextCursor = TextCursor(source, text)
        self.resolver: IncludeResolver = resolver or IncludeResolver()
        self.commands: dict[str, Command] = {
            "include-file": self._include_file,
        }
        self.nesting: int = 0

    def parse(self: Self, context: SearchContext) -> str:
        """Expand the whole template.

        Raises:
            ExpansionError: On the first error, here or in any included file
        """
        lines: list[str] = [self._line(context)]
        while not self.cursor.at_end():
            lines.append(self._line(context))
        return "".join(lines)

    def _line(self: Self, context: SearchContext) -> str:
        cursor: TextCursor = self.cursor
        indent: str = cursor.take_while(lambda ch: ch == " " or ch == "\t")

        if cursor.startswith("$--"):
            cursor.advance()
            comment_skip(cursor)
            if cursor.peek() == "\n":
                cursor.advance()
            return ""

        pieces: list[str] = []
        while True:
            ch: str = cursor.peek()
            if not ch or ch == "\n":
                break
            if ch == "$":
                pieces.append(self._expansion(context))
            else:
                pieces.append(cursor.take_while(lambda c: c != "$" and c != "\n"))
        if cursor.peek() == "\n":
            cursor.advance()
        return indent + "".join(pieces) + "\n"

    def _expansion(self: Self, context: SearchContext) -> str:
        cursor: TextCursor = self.cursor
        start: int = cursor.offset
        cursor.expect("$")
        ch: str = cursor.peek()
        if ch == "(" or ch == "{":
            return self._nested(context, start, ch)
        if ch == "$":
            cursor.advance()
            return "$"
        if ch == "\n":
            cursor.advance()
            return ""
        if comment_skip(cursor):
            return ""
        cursor.unexpected("expansion")

    def _nested(self: Self, context: SearchContext, start: int, opener: str) -> str:
        if self.nesting >= MAX_NESTING:
            self.cursor.fail(f"expansion nested too deeply (limit {MAX_NESTING})", start)
        self.nesting += 1
        try:
            if opener == "(":
                return self._command(context, start)
            return self._variable(context, start)
        finally:
            self.nesting -= 1

    def _expansion_opt(self: Self, context: SearchContext) -> str | None:
        if self.cursor.peek() != "$":
            return None
        return self._expansion(context)

    def _name_opt(self: Self, context: SearchContext) -> str | None:
        return compound(
            self.cursor,
            quoted_string,
            unquoted_token,
            lambda _: self._expansion_opt(context),
        )

    def _name(self: Self, context: SearchContext) -> str:
        name: str | None = self._name_opt(context)
        if name is None:
            self.cursor.unexpected("name")
        return name

    def _command(self: Self, context: SearchContext, start: int) -> str:
        cursor: TextCursor = self.cursor
        cursor.expect("(")
        names: list[str] = []
        first: str | None = self._name_opt(context)
        if first is not None:
            names.append(first)
            while space_lf_skip1(cursor):
                names.append(self._name(context))
        cursor.expect(")")

        if not names:
            return ""
        command, *args = names
        handler: Command | None = self.commands.get(command)
        if handler is None:
            cursor.fail(f"unknown command `{command}`", start)
        return handler(context, args, start)

    def _variable(self: Self, context: SearchContext, start: int) -> str:
        cursor: TextCursor = self.cursor
        cursor.expect("{")
        name: str = self._name(context)
        cursor.expect("}")
        expansion: str | None = context.variables.get(name)
        if expansion is None:
            cursor.fail(f"undefined variable `{name}`", start)
        return expansion

    def _include_file(self: Self, context: SearchContext, args: list[str], start: int) -> str:
        if len(args) != 1:
            self.cursor.fail("include-file command takes exactly one argument", start)
        result: IncludeResult = self.resolver.resolve(context, args[0])
        if not result.success:
            self.cursor.fail(result.error or "include failed", start)
        return result.text


def parse_template(
    context: SearchContext,
    source: str,
    text: str,
    resolver: IncludeResolver | None = None,
) -> ParseResult:
    """Expand template text.

    Args:
        context: Search directories, inclusion stack and variables
        source: Logical source name, used only in error positions
        text: Decoded template contents
        resolver: Include resolver; defaults to one reading from disk

    Returns:
        ParseResult with the expanded text or the first error

    Note:
        I/O failures other than a missing include candidate are not
        caught here; they abort the run.
    """
    try:
        expanded: str = TemplateParser(source, text, resolver).parse(context)
    except ExpansionError as e:
        return ParseResult(error=e.error, success=False)
    return ParseResult(text=expanded)
