"""
Debug trace for precabal runs, written to stderr through Loguru.

`LOG` is silent unless `appsettings.beQuiet` is off, so an ordinary
expansion prints nothing but the final error report, if any.

Trace points:
- bindings: number of bindings loaded and the file they came from
- includes: each candidate path that was missing, the candidate that was
  entered and the file that included it, depth-limit and cycle failures,
  and include names that matched no candidate
- run: the written output file, a failed expansion, or an I/O abort

Usage:
    $ precabal -v mypkg.cabal.in
    $ PRECABAL_BEQUIET=false precabal mypkg.cabal.in

Each record shows the calling module, function and line rather than those
of `LOG` itself.
"""

from loguru import logger
from typing import Any
import sys

app_logger = logger.bind(app="precabal")

logger_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<yellow>{name: >28}</yellow>::"
    "<cyan>{function: <24}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

app_logger.remove()
app_logger.add(sys.stderr, format=logger_format, level="DEBUG")


def LOG(*args: Any, **kwargs: Any) -> None:
    """Emit a debug trace record unless precabal runs quiet.

    The quiet flag is read on every call, so `--verbose` takes effect
    after import time.
    """
    from precabal.config.settings import appsettings

    if not appsettings.beQuiet:
        app_logger.opt(depth=1).debug(*args, **kwargs)
