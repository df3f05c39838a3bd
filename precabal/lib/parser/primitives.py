"""
Lexical rules shared by the bindings and template parsers.

- quoted strings in either quote character, with ``\\"``, ``\\'``, ``\\n``
  and ``\\\\`` escapes
- unquoted tokens (template names) and unquoted runs (bindings values)
- ``--`` comments and space skipping
- compound words: adjacent pieces concatenated without separators
"""

from typing import Callable, Final
from precabal.lib.parser.base import TextCursor

QUOTES: Final[str] = "\"'"

ESCAPES: Final[dict[str, str]] = {
    '"': '"',
    "'": "'",
    "n": "\n",
    "\\": "\\",
}

# Characters that end an unquoted token in names and directives
TOKEN_DELIMITERS: Final[frozenset[str]] = frozenset("\"$'()[\\]{|}")

COMMENT: Final[str] = "--"
# `$--` ends a binding with a same-line annotation
ANNOTATION: Final[str] = "$" + COMMENT

Alternative = Callable[[TextCursor], str | None]


def quoted_string(cursor: TextCursor) -> str | None:
    """Parse a quoted string and return its decoded body.

    Returns None, consuming nothing, if the cursor is not at a quote.
    """
    quote: str = cursor.peek()
    if not quote or quote not in QUOTES:
        return None
    cursor.advance()
    pieces: list[str] = []
    while True:
        raw: str = cursor.take_while(lambda ch: ch >= " " and ch != "\\" and ch != quote)
        if raw:
            pieces.append(raw)
        ch: str = cursor.peek()
        if ch == "\\":
            start: int = cursor.offset
            cursor.advance()
            escaped: str = cursor.peek()
            if not escaped:
                cursor.unexpected("escape sequence")
            if escaped not in ESCAPES:
                cursor.fail(f"unsupported escape sequence: \\{escaped}", start)
            cursor.advance()
            pieces.append(ESCAPES[escaped])
        elif ch == quote:
            cursor.advance()
            return "".join(pieces)
        else:
            cursor.unexpected(f"closing {quote}")


def unquoted_token(cursor: TextCursor) -> str | None:
    """Parse a template-grammar bareword; None if there is none at the cursor."""
    token: str = cursor.take_while(lambda ch: ch > " " and ch not in TOKEN_DELIMITERS)
    return token or None


def unquoted_run(cursor: TextCursor) -> str | None:
    """Parse unquoted text of a binding value.

    The run takes every printable character except quotes, including spaces
    and `$`, and stops before a `$--` annotation. Trailing spaces are
    dropped when the run reaches a newline or an annotation.
    """
    start: int = cursor.offset
    while True:
        ch: str = cursor.peek()
        if not ch or ch < " " or ch in QUOTES or cursor.startswith(ANNOTATION):
            break
        cursor.advance()
    if cursor.offset == start:
        return None
    run: str = cursor.text[start : cursor.offset]
    if cursor.peek() == "\n" or cursor.startswith(ANNOTATION):
        run = run.rstrip(" ")
    return run


def comment_skip(cursor: TextCursor) -> bool:
    """Skip a `--` comment up to, not including, the newline."""
    if not cursor.startswith(COMMENT):
        return False
    cursor.take_while(lambda ch: ch != "\n")
    return True


def space_skip(cursor: TextCursor) -> str:
    return cursor.take_while(lambda ch: ch == " ")


def space_lf_skip1(cursor: TextCursor) -> bool:
    """Skip a non-empty run of spaces and newlines."""
    return bool(cursor.take_while(lambda ch: ch == " " or ch == "\n"))


def compound(cursor: TextCursor, *alternatives: Alternative) -> str | None:
    """Concatenate one or more pieces, each parsed by the first matching alternative.

    Returns None if no alternative matches at the cursor.
    """
    pieces: list[str] = []
    while True:
        for alternative in alternatives:
            piece: str | None = alternative(cursor)
            if piece is not None:
                pieces.append(piece)
                break
        else:
            break
    return "".join(pieces) if pieces else None
