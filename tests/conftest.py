"""Shared fixtures for the cmd2zip test suite."""

import io
import sys
import shlex

import pytest
from rich.console import Console

from cmd2zip.archive.sink import ArchiveSink
from cmd2zip.core.config import build_run_config
from cmd2zip.execution.job_runner import JobRunner
from cmd2zip.naming.generator import build_name_generator

PYTHON = shlex.quote(sys.executable)


@pytest.fixture
def py():
    """Build a command line that runs a Python snippet with the current interpreter."""
    def _command(code: str) -> str:
        return f"{PYTHON} -c {shlex.quote(code)}"
    return _command


@pytest.fixture
def archive_path(tmp_path):
    return tmp_path / "output.zip"


@pytest.fixture
def output_console():
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def make_runner(output_console):
    """Create a JobRunner writing to the given sink with the given options."""
    def _make(sink: ArchiveSink, platform=None, **options) -> JobRunner:
        config = build_run_config(output=sink.archive_path, **options)
        return JobRunner(
            config,
            build_name_generator(config),
            sink,
            console=output_console,
            platform=platform,
        )
    return _make


