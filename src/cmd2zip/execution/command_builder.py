"""
Turning a raw command into something that can be executed.

Assembly adds the configured prefix and postfix around a raw command, then
the result is split with POSIX shell-word rules into a program and its
arguments. Nothing here runs a shell: quoting is honored during splitting
but pipes, redirections and variables are passed through as plain text.
"""

import sys
import shlex
import logging
import subprocess
from typing import List, Optional

from pydantic import BaseModel, Field

from cmd2zip.core.errors import CommandBuildError

logger = logging.getLogger(__name__)


def normalize_glob_separators(command: str, platform: Optional[str] = None) -> str:
    """
    Rewrite backslashes to forward slashes in a raw command on Windows.

    Glob-expanded path arguments come back with backslash separators there,
    which breaks many tools once the line is shell-split. Only the raw
    command goes through this step; prefix and postfix text never does.
    Other platforms get the command back unchanged.
    """
    platform = sys.platform if platform is None else platform
    if not platform.startswith("win"):
        return command
    return command.replace("\\", "/")


def assemble_command(command: str, prefix: str = "", postfix: str = "") -> str:
    """Join prefix, raw command and postfix; the prefix is separated by one space."""
    if prefix:
        return f"{prefix} {command}{postfix}"
    return f"{command}{postfix}"


class ProcessOutput(BaseModel):
    """Exit status and captured streams of a finished child process."""
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class Executable(BaseModel):
    """A program with its argument vector, ready to be launched."""
    program: str
    args: List[str] = Field(default_factory=list)

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def run(self) -> ProcessOutput:
        """
        Run the program to completion and capture its output.

        Blocks the calling thread until the child exits. The child gets no
        stdin so it can never consume commands piped into this process.

        Raises:
            OSError: If the program cannot be launched
        """
        completed = subprocess.run(
            self.argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
        return ProcessOutput(
            returncode=completed.returncode,
            stdout=completed.stdout or b"",
            stderr=completed.stderr or b"",
        )


def build_command(full_command: str) -> Executable:
    """
    Split an assembled command line into an Executable.

    Raises:
        CommandBuildError: If the line is not well-formed (e.g. an unterminated
            quote) or contains no program at all
    """
    try:
        tokens = shlex.split(full_command, posix=True)
    except ValueError as e:
        raise CommandBuildError(f"Failed to split command ({e}): {full_command}") from e

    if not tokens:
        raise CommandBuildError(f"Command is empty: {full_command!r}")

    return Executable(program=tokens[0], args=tokens[1:])
