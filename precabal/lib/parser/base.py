r"""
Base machinery for the precabal parsers.

Provides the text cursor shared by the bindings and template parsers and
the exception used to abandon a parse at the first error.

The parsers are hand written recursive descent. Every grammar rule follows
the same convention:

- return the parsed value when the rule matches
- return ``None`` (or ``False``) without consuming any input when the rule
  does not apply at the cursor, so the caller may try an alternative
- raise ``ExpansionError`` once input has been consumed and the rule
  cannot be completed; the parse is then over

Example:
    cursor = TextCursor("main.cabal.in", text)
    if cursor.peek() != "$":
        cursor.unexpected("expansion")
"""

from typing import Callable, NoReturn, Self
from precabal.models.dataModel import ParseError, SourcePosition

CHARACTER_NAMES: dict[str, str] = {
    "\n": "newline",
    "\t": "tab",
    " ": "space",
    "\r": "carriage return",
}


class ExpansionError(Exception):
    """Raised to abandon a parse; carries the positioned ParseError."""

    def __init__(self: Self, error: ParseError) -> None:
        super().__init__(str(error))
        self.error: ParseError = error


def character_describe(ch: str) -> str:
    """Name a single character for an error message."""
    if not ch:
        return "end of input"
    if ch in CHARACTER_NAMES:
        return CHARACTER_NAMES[ch]
    if ch < " ":
        return f"control character {ch!r}"
    return f"'{ch}'"


class TextCursor:
    """A read position over a named source text.

    Attributes:
        source: Logical source name used in error positions
        text: The complete source text
        offset: Index of the next unread character
    """

    def __init__(self: Self, source: str, text: str) -> None:
        self.source: str = source
        self.text: str = text
        self.offset: int = 0

    def at_end(self: Self) -> bool:
        return self.offset >= len(self.text)

    def peek(self: Self, ahead: int = 0) -> str:
        """Return the character `ahead` places past the cursor, or "" at end."""
        index: int = self.offset + ahead
        return self.text[index] if index < len(self.text) else ""

    def startswith(self: Self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.offset)

    def advance(self: Self, count: int = 1) -> str:
        """Consume and return the next `count` characters."""
        chunk: str = self.text[self.offset : self.offset + count]
        self.offset += len(chunk)
        return chunk

    def take_while(self: Self, predicate: Callable[[str], bool]) -> str:
        """Consume the longest run of characters satisfying `predicate`."""
        start: int = self.offset
        end: int = start
        length: int = len(self.text)
        while end < length and predicate(self.text[end]):
            end += 1
        self.offset = end
        return self.text[start:end]

    def expect(self: Self, ch: str) -> None:
        """Consume `ch` or fail with an 'unexpected' error."""
        if self.peek() != ch:
            self.unexpected(f"'{ch}'")
        self.offset += 1

    def position(self: Self, offset: int | None = None) -> tuple[SourcePosition, str]:
        """Compute the line/column of `offset` and the text of its line."""
        at: int = self.offset if offset is None else offset
        line_start: int = self.text.rfind("\n", 0, at) + 1
        line_end: int = self.text.find("\n", at)
        if line_end < 0:
            line_end = len(self.text)
        position: SourcePosition = SourcePosition(
            source=self.source,
            line=self.text.count("\n", 0, line_start) + 1,
            column=at - line_start + 1,
        )
        return position, self.text[line_start:line_end]

    def fail(self: Self, message: str, offset: int | None = None) -> NoReturn:
        """Abandon the parse with `message` reported at `offset` (default: cursor)."""
        position, excerpt = self.position(offset)
        raise ExpansionError(
            ParseError(message=message, position=position, excerpt=excerpt)
        )

    def unexpected(self: Self, expecting: str) -> NoReturn:
        self.fail(f"unexpected {character_describe(self.peek())}, expecting {expecting}")
