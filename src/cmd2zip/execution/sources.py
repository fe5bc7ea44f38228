"""
Where commands come from: an optional input file (or stdin), then the
commands given on the command line.
"""

import sys
import itertools
import logging
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional, TextIO, Union

from cmd2zip.core.config import STDIN_PLACEHOLDER
from cmd2zip.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"


def is_comment(command: str) -> bool:
    return command.startswith(COMMENT_MARKER)


def _read_lines(stream: Union[BinaryIO, TextIO], label: str, close: bool) -> Iterator[str]:
    """Yield lines without their newline; lines that are not valid UTF-8 are skipped."""
    try:
        for number, line in enumerate(stream, start=1):
            if isinstance(line, bytes):
                try:
                    line = line.decode("utf-8")
                except UnicodeDecodeError as e:
                    logger.warning("Skipping line %d of %s, not valid UTF-8: %s", number, label, e)
                    continue
            yield line.rstrip("\r\n")
    finally:
        if close:
            stream.close()


def open_command_source(input_path: Optional[Path], commands: Iterable[str] = ()) -> Iterator[str]:
    """
    Chain the lines of ``input_path`` before the given commands.

    The input file is opened eagerly so a missing file fails before anything
    runs; its lines are read lazily. ``-`` reads from stdin.

    Raises:
        ConfigurationError: If the input file cannot be opened
    """
    positional = list(commands)
    if input_path is None:
        return iter(positional)

    if str(input_path) == STDIN_PLACEHOLDER:
        logger.debug("Reading commands from stdin")
        lines = _read_lines(getattr(sys.stdin, "buffer", sys.stdin), "stdin", close=False)
    else:
        try:
            handle = open(input_path, "rb")
        except OSError as e:
            raise ConfigurationError(f"Failed to open input file '{input_path}': {e}") from e
        logger.debug("Reading commands from %s", input_path)
        lines = _read_lines(handle, str(input_path), close=True)

    return itertools.chain(lines, positional)
