"""
precabal Main Module.

This module is the command line entry point of precabal, a pre-processor
that expands variable references and include-file directives in
`*.cabal.in` templates.

Features:
- Loads package version bounds from a bindings file
- Expands the input template, following include-file directives through
  the configured include directories
- Writes the expanded text only when the whole expansion succeeded

Usage:
    Run `precabal` with the template to expand.

Examples:
    Expand with defaults (bindings from package-bounds.txt next to the input):
        $ precabal mypkg.cabal.in

    Explicit output, bindings and include directories:
        $ precabal mypkg.cabal.in -o mypkg.cabal -b ../bounds.txt -I ../common -I ../shared

Note:
    Defaults:
    1. output file: input name without its trailing `.in`
    2. bindings file: `package-bounds.txt` in the input file's directory
"""

import os
import sys
from typing import Final
import click
from rich.text import Text
from precabal.commands.base import RichCommand, rich_help
from precabal.config.settings import appsettings, errconsole
from precabal.lib.files import file_readUTF8, file_writeUTF8
from precabal.lib.log import LOG
from precabal.lib.parser import parse_bindings, parse_template
from precabal.models.dataModel import (
    BindingsResult,
    ParseError,
    ParseResult,
    SearchContext,
)

__version__: Final[str] = "0.1.0"


def outputFile_resolve(input_file: str, output_file: str | None) -> str:
    """Determine where the expanded text is written.

    Args:
        input_file: The template being expanded
        output_file: Explicit output path, if one was given

    Returns:
        The output path

    Raises:
        ValueError: If no output was given and the input name does not
            end in the configured input suffix
    """
    if output_file:
        return output_file
    if not input_file.endswith(appsettings.input_suffix):
        raise ValueError(
            f"Input file name does not end in {appsettings.input_suffix}, "
            "you need to specify output file name"
        )
    return os.path.splitext(input_file)[0]


def boundsFile_resolve(input_file: str, bounds_file: str | None) -> str:
    """Determine the bindings file, defaulting to one beside the input."""
    if bounds_file:
        return bounds_file
    return os.path.join(os.path.dirname(input_file), appsettings.bounds_filename)


def bindings_load(bounds_file: str) -> BindingsResult:
    """Read and parse the bindings file."""
    result: BindingsResult = parse_bindings(bounds_file, file_readUTF8(bounds_file))
    if result.success:
        LOG(f"Loaded {len(result.bindings)} bindings from {bounds_file}")
    return result


def precabal_run(
    input_file: str,
    output_file: str,
    bounds_file: str,
    include_dirs: list[str] | tuple[str, ...] = (),
) -> ParseResult:
    """Expand `input_file` into `output_file`.

    Args:
        input_file: Root template
        output_file: Destination of the expanded text
        bounds_file: Bindings file providing the variables
        include_dirs: Additional include search directories, in order

    Returns:
        ParseResult of the expansion; the output file is written only on
        success

    Raises:
        OSError: If a file cannot be read or written
        UnicodeDecodeError: If an input file is not valid UTF-8
    """
    bindings: BindingsResult = bindings_load(bounds_file)
    if not bindings.success:
        return ParseResult(error=bindings.error, success=False)

    root: str = os.path.normpath(input_file)
    context: SearchContext = SearchContext.root(
        root,
        bindings.bindings,
        [os.path.normpath(directory) for directory in include_dirs],
    )
    result: ParseResult = parse_template(context, root, file_readUTF8(root))
    if not result.success:
        LOG(f"Expansion of {root} failed")
        return result

    file_writeUTF8(output_file, result.text)
    LOG(f"Wrote {output_file}")
    return result


def error_report(error: ParseError) -> None:
    """Print a parse error to stderr."""
    errconsole.print(Text(error.pretty()), soft_wrap=True)


@click.command(
    cls=RichCommand,
    help=rich_help(
        description="Expand include-file directives and package version bound variables in Cabal files.",
        usage="precabal [OPTIONS] INPUT-FILE",
        args={
            "INPUT-FILE": "Input .cabal.in template to expand.",
        },
    ),
)
@click.argument("input_file", metavar="INPUT-FILE", type=str)
@click.option(
    "-o", "--output-file", type=str, default=None, help="Output .cabal file to be generated"
)
@click.option(
    "-b", "--bounds-file", type=str, default=None, help="Package version bounds definition file"
)
@click.option(
    "-I",
    "--include-dir",
    "include_dirs",
    type=str,
    multiple=True,
    help="A directory to look for included files (may be specified multiple times)",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.version_option(__version__, "-V", "--version", prog_name="precabal")
def main(
    input_file: str,
    output_file: str | None,
    bounds_file: str | None,
    include_dirs: tuple[str, ...],
    verbose: bool,
) -> None:
    """Main entry point for the precabal command.

    Exits with status 1 after reporting the first parse error or I/O
    failure; no output file is written in that case.
    """
    if verbose:
        appsettings.beQuiet = False

    try:
        output: str = outputFile_resolve(input_file, output_file)
    except ValueError as e:
        raise click.ClickException(str(e))
    bounds: str = boundsFile_resolve(input_file, bounds_file)

    try:
        result: ParseResult = precabal_run(input_file, output, bounds, include_dirs)
    except (OSError, UnicodeDecodeError) as e:
        LOG(f"Aborted: {e}")
        errconsole.print(Text(f"error: {e}"), soft_wrap=True)
        sys.exit(1)

    if not result.success:
        error_report(result.error)
        sys.exit(1)
