"""Tests for command assembly, splitting and execution."""

import pytest

from cmd2zip.core.errors import CommandBuildError
from cmd2zip.execution.command_builder import (
    Executable,
    assemble_command,
    build_command,
    normalize_glob_separators,
)


def test_assemble_with_prefix_and_postfix():
    assert assemble_command("icon.svg", "resvg -w 128", " -c") == "resvg -w 128 icon.svg -c"


def test_assemble_without_prefix_adds_no_space():
    assert assemble_command("echo hi") == "echo hi"
    assert assemble_command("echo hi", postfix=" there") == "echo hi there"


def test_build_splits_with_shell_quoting():
    executable = build_command("""grep -e "two words" 'single quoted' escaped\\ space""")

    assert executable.program == "grep"
    assert executable.args == ["-e", "two words", "single quoted", "escaped space"]
    assert executable.argv == ["grep", "-e", "two words", "single quoted", "escaped space"]


def test_build_rejects_unterminated_quote():
    with pytest.raises(CommandBuildError):
        build_command('echo "unterminated')


def test_build_rejects_empty_command():
    with pytest.raises(CommandBuildError):
        build_command("   ")


@pytest.mark.parametrize("platform", ["win32", "cygwin-not-windows", "linux", "darwin"])
def test_backslashes_only_rewritten_on_windows(platform):
    command = r"resvg icons\sub\home.svg"
    expected = "resvg icons/sub/home.svg" if platform == "win32" else command

    assert normalize_glob_separators(command, platform=platform) == expected


def test_run_captures_both_streams(py):
    code = 'import sys; sys.stdout.write("out"); sys.stderr.write("err"); sys.exit(3)'
    output = build_command(py(code)).run()

    assert output.returncode == 3
    assert not output.success
    assert output.stdout == b"out"
    assert output.stderr == b"err"


def test_run_child_gets_no_stdin(py):
    output = build_command(py("import sys; sys.stdout.write(repr(sys.stdin.read()))")).run()

    assert output.success
    assert output.stdout == b"''"


def test_run_missing_program_raises_os_error():
    with pytest.raises(OSError):
        Executable(program="cmd2zip-no-such-program-xyz").run()
