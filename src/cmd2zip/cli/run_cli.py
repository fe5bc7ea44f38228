"""
The `run` command: execute commands and capture their output into a zip archive.

Focuses on CLI option handling; the work itself is done by the execution
and archive packages.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from cmd2zip.archive.sink import ArchiveSink
from cmd2zip.core.config import build_run_config, get_settings
from cmd2zip.core.errors import Cmd2ZipError
from cmd2zip.core.logging_setup import configure_logging
from cmd2zip.execution.job_runner import JobRunner
from cmd2zip.execution.scheduler import ExecutionScheduler
from cmd2zip.execution.sources import open_command_source
from cmd2zip.naming.generator import build_name_generator

logger = logging.getLogger(__name__)
console = Console(emoji=False)
err_console = Console(stderr=True, soft_wrap=True, emoji=False)


def run_commands(
    commands: Optional[List[str]] = typer.Argument(
        None, help="The commands to run; each one is a single shell-quoted argument"
    ),
    input_path: Optional[Path] = typer.Option(
        None, "--input", "-i", help="Also pull commands from the given file, or stdin via '-'"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="The zip archive to write to (default: $CMD2ZIP_OUTPUT or output.zip)"
    ),
    append: bool = typer.Option(
        False, "--append", "-a", help="Append to the archive instead of replacing it"
    ),
    cmd_prefix: Optional[str] = typer.Option(
        None, "--cmd-prefix", help="Prefix prepended to all commands; not used for naming"
    ),
    cmd_postfix: Optional[str] = typer.Option(
        None, "--cmd-postfix", help="Postfix appended to all commands; not used for naming"
    ),
    name_pattern: Optional[str] = typer.Option(
        None, "--name-pattern", "-p", help="Regex pattern to extract an entry name from each command"
    ),
    name_replace: Optional[str] = typer.Option(
        None, "--name-replace", "-r",
        help="Replacement template for the pattern: $N for positional, $NAME for named captures"
    ),
    name_prefix: Optional[str] = typer.Option(
        None, "--name-prefix", help="Prefix for all generated names, applied after match/replace"
    ),
    name_postfix: Optional[str] = typer.Option(
        None, "--name-postfix", help="Postfix for all generated names, applied after the name prefix"
    ),
    threads: Optional[int] = typer.Option(
        None, "--threads", "-t", help="Child processes to run in parallel; 0 for all cores (default: $CMD2ZIP_THREADS or 0)"
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", help="The maximum number of commands to run"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-d", help="Write the commands themselves to the archive instead of running them"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default: $CMD2ZIP_LOG_LEVEL or INFO)"
    ),
):
    """
    Run commands as child processes, capturing their output as entries of a zip archive.

    Commands starting with '#' are logged without being run. Failed commands are
    archived with an '.err' suffix. Finished commands are listed on stdout;
    everything else goes to stderr.
    """
    settings = get_settings()

    try:
        configure_logging(log_level or settings.log_level)
    except ValueError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    try:
        config = build_run_config(
            output=output or settings.output,
            append=append,
            input=input_path,
            cmd_prefix=cmd_prefix,
            cmd_postfix=cmd_postfix,
            name_pattern=name_pattern,
            name_replace=name_replace,
            name_prefix=name_prefix,
            name_postfix=name_postfix,
            threads=settings.threads if threads is None else threads,
            limit=limit,
            dry_run=dry_run,
        )
        name_generator = build_name_generator(config)
        source = open_command_source(config.input, commands or [])
        sink = ArchiveSink(config.output, append=config.append)

        runner = JobRunner(config, name_generator, sink, console=console)
        scheduler = ExecutionScheduler(runner, sink, threads=config.threads, limit=config.limit)
        summary = scheduler.run(source)
    except Cmd2ZipError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if summary.failed:
        logger.warning("%d of %d commands failed", len(summary.failed), summary.dispatched)
    logger.info("Wrote %d entries to %s", len(summary.results), config.output)
