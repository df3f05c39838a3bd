"""
File access for precabal.

Source files are read as raw bytes and decoded strictly as UTF-8, so line
endings reach the parsers untouched. Nothing here catches errors: a missing
file surfaces as FileNotFoundError, which the include resolver treats as
"try the next candidate"; everything else is fatal for the run.
"""

from pathlib import Path


def file_readUTF8(path: str) -> str:
    """Read `path` and decode it as UTF-8.

    Args:
        path: File to read

    Returns:
        The decoded file contents

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: For any other I/O failure
        UnicodeDecodeError: If the contents are not valid UTF-8
    """
    return Path(path).read_bytes().decode("utf-8")


def file_writeUTF8(path: str, text: str) -> None:
    """Encode `text` as UTF-8 and write it to `path`."""
    Path(path).write_bytes(text.encode("utf-8"))
