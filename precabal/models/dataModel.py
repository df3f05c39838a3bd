"""
dataModel.py

This module defines the data models used throughout precabal.
The models leverage Pydantic for validation and type safety.

Features:
- Source positions and positioned parse errors
- Parse results for bindings files, templates and include resolution
- The immutable search context threaded through template expansion

Usage:
Import these models to structure data passed between the parsers and the
command line front end.
"""

from types import MappingProxyType
from typing import Mapping, Self
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourcePosition(BaseModel):
    """A location inside a named source text.

    Attributes:
        source: Logical source name (usually a file path)
        line: 1-based line number
        column: 1-based column number
    """

    source: str
    line: int = Field(..., ge=1)
    column: int = Field(..., ge=1)

    def __str__(self) -> str:
        return f"{self.source}:{self.line}:{self.column}"


class ParseError(BaseModel):
    """A grammar or semantic violation found while parsing.

    Attributes:
        message: Human readable description of the problem
        position: Where the problem was detected
        excerpt: Text of the offending source line, without its newline
    """

    message: str
    position: SourcePosition
    excerpt: str = ""

    def __str__(self) -> str:
        return f"{self.position}: {self.message}"

    def pretty(self) -> str:
        """Render the error with a source excerpt and a caret marker.

        Returns:
            Multi-line report, e.g.::

                main.cabal.in:3:7:
                  |
                3 | dep: ${missing}
                  |      ^
                undefined variable `missing`
        """
        lineno: str = str(self.position.line)
        gutter: str = " " * len(lineno)
        # keep tabs so the caret lines up under tab-indented text
        lead: str = self.excerpt[: self.position.column - 1]
        caret: str = "".join(ch if ch == "\t" else " " for ch in lead) + "^"
        return "\n".join(
            [
                f"{self.position}:",
                f"{gutter} |",
                f"{lineno} | {self.excerpt}",
                f"{gutter} | {caret}",
                self.message,
            ]
        )


class ParseResult(BaseModel):
    """Result of expanding a template.

    Attributes:
        text: The expanded text
        error: Positioned error if expansion failed
        success: Whether expansion succeeded
    """

    text: str = ""
    error: ParseError | None = None
    success: bool = True


class BindingsResult(BaseModel):
    """Result of parsing a bindings file.

    Attributes:
        bindings: Mapping from variable name to expansion text
        error: Positioned error if parsing failed
        success: Whether parsing succeeded
    """

    bindings: dict[str, str] = Field(default_factory=dict)
    error: ParseError | None = None
    success: bool = True


class IncludeResult(BaseModel):
    """Outcome of resolving one include-file directive.

    The error message carries no position; the template parser attaches
    the position of the directive that asked for the file.

    Attributes:
        text: Fully expanded contents of the included file
        path: The candidate path that was expanded
        error: Error message if resolution failed
        success: Whether resolution succeeded
    """

    text: str = ""
    path: str | None = None
    error: str | None = None
    success: bool = True


class SearchContext(BaseModel):
    """Per-parse configuration for template expansion.

    A context is never modified. Each nested inclusion derives a new one
    with `include_push`, so sibling includes never see each other's files
    on the inclusion stack.

    Attributes:
        include_dirs: Additional directories searched for include files, in order
        included: Inclusion stack, most recently entered file first
        variables: The ExpansionMap built from the bindings file, read-only
    """

    model_config = ConfigDict(frozen=True)

    include_dirs: tuple[str, ...] = ()
    included: tuple[str, ...]
    variables: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("included")
    @classmethod
    def included_validate(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("inclusion stack must contain the root file")
        return value

    @field_validator("variables")
    @classmethod
    def variables_freeze(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @classmethod
    def root(
        cls,
        input_file: str,
        variables: Mapping[str, str],
        include_dirs: list[str] | tuple[str, ...] = (),
    ) -> Self:
        """Build the context for the root template file."""
        return cls(
            include_dirs=tuple(include_dirs),
            included=(input_file,),
            variables=variables,
        )

    @property
    def current(self) -> str:
        """The file currently being parsed."""
        return self.included[0]

    def include_push(self, path: str) -> Self:
        """Derive the context used while expanding `path`."""
        return self.model_copy(update={"included": (path,) + self.included})
