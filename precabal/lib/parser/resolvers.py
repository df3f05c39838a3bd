"""
Include file resolution for precabal.

Implements the `include-file` directive: candidate path search, recursion
depth and cycle checks, and recursive expansion of the file found.

Candidates are tried in order:

1. relative to the directory of the file containing the directive
2. relative to each configured include directory, in the order given

The first candidate that exists wins. A candidate already on the inclusion
stack stops the search with a "recursive includes" error instead of falling
through to later candidates.
"""

import os
from typing import Callable, Self
from precabal.config.settings import appsettings
from precabal.lib.files import file_readUTF8
from precabal.lib.log import LOG
from precabal.models.dataModel import IncludeResult, SearchContext

Reader = Callable[[str], str]


class IncludeResolver:
    """Resolver for include-file directives using the filesystem.

    Attributes:
        reader: Reads a path as UTF-8 text. Must raise FileNotFoundError (or
            NotADirectoryError) for a missing file; any other exception is
            fatal and propagates to the caller of the parse.
        max_depth: Largest allowed size of the inclusion stack
    """

    def __init__(self: Self, reader: Reader = file_readUTF8, max_depth: int | None = None) -> None:
        """Initialize resolver with file reader and recursion limit."""
        self.reader: Reader = reader
        self.max_depth: int = max_depth if max_depth is not None else appsettings.recursion_limit

    def candidates_list(self: Self, context: SearchContext, filename: str) -> list[str]:
        """List the paths tried for `filename`, in search order.

        Args:
            context: Current search context
            filename: Argument of the include-file directive

        Returns:
            Normalised candidate paths
        """
        current_dir: str = os.path.dirname(context.current)
        directories: list[str] = [current_dir, *context.include_dirs]
        return [os.path.normpath(os.path.join(directory, filename)) for directory in directories]

    def resolve(self: Self, context: SearchContext, filename: str) -> IncludeResult:
        """Find `filename` and expand it.

        Args:
            context: Search context of the including file
            filename: Argument of the include-file directive

        Returns:
            IncludeResult with the expanded text, or the reason no file
            could be included

        Raises:
            ExpansionError: If the included file itself fails to parse
            OSError: For I/O failures other than a missing candidate
        """
        from precabal.lib.parser.template import (
            TemplateParser,
        )  # Import here to avoid circular import

        if len(context.included) >= self.max_depth:
            msg: str = f"maximum recursion depth of {self.max_depth} reached"
            LOG(msg)
            return IncludeResult(error=msg, success=False)

        for candidate in self.candidates_list(context, filename):
            if candidate in context.included:
                chain: list[str] = [*reversed(context.included), candidate]
                msg = "recursive includes: " + ", ".join(f'"{path}"' for path in chain)
                LOG(msg)
                return IncludeResult(error=msg, success=False)

            try:
                text: str = self.reader(candidate)
            except (FileNotFoundError, NotADirectoryError):
                LOG(f"Include candidate not found: {candidate}")
                continue

            LOG(f"Including {candidate} from {context.current}")
            expanded: str = TemplateParser(candidate, text, self).parse(
                context.include_push(candidate)
            )
            return IncludeResult(text=expanded, path=candidate, success=True)

        msg = f"could not find include file `{filename}`"
        LOG(msg)
        return IncludeResult(error=msg, success=False)
