"""
Parser package for precabal macro expansion.

Provides the bindings file parser, the template expansion engine and the
include resolver used by the include-file directive.
"""

from .base import ExpansionError, TextCursor
from .bindings import BindingsParser, parse_bindings
from .resolvers import IncludeResolver
from .template import TemplateParser, parse_template

__all__ = [
    "ExpansionError",
    "TextCursor",
    "BindingsParser",
    "parse_bindings",
    "IncludeResolver",
    "TemplateParser",
    "parse_template",
]
