"""
Running one command end to end: name it, execute it (or not, in dry-run
mode), decide what to archive and under which name, then append the entry.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from rich.console import Console

from cmd2zip.archive.sink import ArchiveSink
from cmd2zip.core.config import RunConfig
from cmd2zip.core.errors import CommandBuildError
from cmd2zip.execution.command_builder import (
    assemble_command,
    build_command,
    normalize_glob_separators,
)
from cmd2zip.naming.generator import NameGenerator

logger = logging.getLogger(__name__)

DRY_RUN_SUFFIX = ".txt"
FAILURE_SUFFIX = ".err"


class OutputSource(str, Enum):
    """Which captured stream ended up in the archive entry."""
    STDOUT = "stdout"
    STDERR = "stderr"


class JobResult(BaseModel):
    """Outcome of one archived command; the captured bytes live only in the archive."""
    command: str
    full_command: str
    name: str
    size: int
    source: OutputSource
    success: bool
    dry_run: bool = False


class JobRunner:
    """
    Executes single commands and archives their output.

    One runner is shared by every worker; it holds no per-command state.
    """

    def __init__(
        self,
        config: RunConfig,
        name_generator: NameGenerator,
        sink: ArchiveSink,
        console: Optional[Console] = None,
        platform: Optional[str] = None,
    ):
        self.config = config
        self.name_generator = name_generator
        self.sink = sink
        self.console = console or Console()
        self.platform = platform

    def run(self, command: str) -> JobResult:
        """
        Run one raw command and append its entry to the archive.

        The child process runs synchronously, so the calling worker is busy
        until it exits.

        Raises:
            NamingError: If the name pattern does not match the command
            ArchiveError: If the entry cannot be written
        """
        command = normalize_glob_separators(command, self.platform)
        full_command = assemble_command(command, self.config.cmd_prefix, self.config.cmd_postfix)

        # Names come from the raw command, never the prefixed one
        name = self.name_generator(command)

        if self.config.dry_run:
            name = name + DRY_RUN_SUFFIX
            success, stdout, stderr = True, full_command.encode("utf-8"), b""
        else:
            success, stdout, stderr = self._execute(full_command)

        source = OutputSource.STDOUT
        if not stdout:
            logger.warning("Command had no stdout, writing stderr instead: %s", full_command)
            stdout, stderr = stderr, stdout
            source = OutputSource.STDERR

        if not success:
            logger.warning("Command failed: %s\n%s", full_command, stdout.decode("utf-8", errors="replace"))
            name = name + FAILURE_SUFFIX

        result = JobResult(
            command=command,
            full_command=full_command,
            name=name,
            size=len(stdout),
            source=source,
            success=success,
            dry_run=self.config.dry_run,
        )

        self.console.print(
            f"`{result.name}` << {result.size} bytes from {result.source.value} << `{result.full_command}`",
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
        self.sink.append(name, stdout)
        return result

    def _execute(self, full_command: str):
        """Return (success, stdout, stderr); launch problems count as a failed run."""
        try:
            output = build_command(full_command).run()
        except CommandBuildError as e:
            logger.warning("Failed to build command: %s", e)
            return False, b"", str(e).encode("utf-8")
        except OSError as e:
            logger.warning("Failed to launch command: %s (%s)", full_command, e)
            return False, b"", f"Failed to launch command: {e}".encode("utf-8")
        return output.success, output.stdout, output.stderr
