# cmd2zip/src/cmd2zip/core/errors.py

"""
Exception hierarchy for cmd2zip.

Configuration, naming and archive errors are fatal for a run. Command-level
failures (non-zero exit, launch failure) are never raised past the job runner;
they become `.err` entries instead.
"""


class Cmd2ZipError(Exception):
    """Base class for every error cmd2zip raises on purpose."""


class ConfigurationError(Cmd2ZipError):
    """Invalid options, detected before any command is dispatched."""


class NamingError(Cmd2ZipError):
    """The name pattern did not match a command."""

    def __init__(self, pattern: str, command: str):
        self.pattern = pattern
        self.command = command
        super().__init__(f"Name pattern {pattern!r} does not match command: {command}")


class CommandBuildError(Cmd2ZipError):
    """The assembled command line could not be split into a program and arguments."""


class ArchiveError(Cmd2ZipError):
    """Opening, writing or finalizing the output archive failed."""
