"""
Bindings file parser.

A bindings file defines the variables available to templates, one per
line::

    -- package version bounds
    base        >=4.7 && <5
    containers  ^>=0.6
    "text"      >=2.0 "&&" <2.2   $-- annotation

Each binding maps its name to the text ``"<name> <value>"`` so that the same
variable can be used both as a bare package name and as a bounded
dependency. Defining a name twice is an error.
"""

from typing import Self
from precabal.lib.parser.base import ExpansionError, TextCursor
from precabal.lib.parser.primitives import (
    ANNOTATION,
    comment_skip,
    compound,
    quoted_string,
    space_lf_skip1,
    space_skip,
    unquoted_run,
    unquoted_token,
)
from precabal.models.dataModel import BindingsResult


class BindingsParser:
    """Parser for a single bindings file."""

    def __init__(self: Self, source: str, text: str) -> None:
        self.cursor: TextCursor = TextCursor(source, text)

    def parse(self: Self) -> dict[str, str]:
        """Parse the whole file into an ExpansionMap.

        Raises:
            ExpansionError: On the first grammar error or duplicate name
        """
        bindings: dict[str, str] = {}
        while True:
            self._gap_skip()
            if self.cursor.at_end():
                return bindings
            self._binding(bindings)

    def _gap_skip(self: Self) -> None:
        while space_lf_skip1(self.cursor) or comment_skip(self.cursor):
            pass

    def _binding(self: Self, bindings: dict[str, str]) -> None:
        cursor: TextCursor = self.cursor
        start: int = cursor.offset
        name: str | None = compound(cursor, unquoted_token, quoted_string)
        if name is None:
            cursor.unexpected("variable binding")
        if name in bindings:
            cursor.fail(f"attempt to redefine `{name}`", start)

        space_skip(cursor)
        value: str | None = compound(cursor, unquoted_run, quoted_string)
        if value is None:
            cursor.unexpected("compound word")
        space_skip(cursor)

        if cursor.peek() == "\n":
            cursor.advance()
        elif cursor.startswith(ANNOTATION):
            cursor.advance()
            comment_skip(cursor)
        else:
            cursor.unexpected("newline or `$--` comment")

        bindings[name] = f"{name} {value}"


def parse_bindings(source: str, text: str) -> BindingsResult:
    """Parse bindings file text into an ExpansionMap.

    Args:
        source: Logical source name, used only in error positions
        text: Decoded file contents

    Returns:
        BindingsResult with the mapping, or the error that stopped the parse
    """
    try:
        bindings: dict[str, str] = BindingsParser(source, text).parse()
    except ExpansionError as e:
        return BindingsResult(error=e.error, success=False)
    return BindingsResult(bindings=bindings)
