"""
Top-level CLI that registers the run command and the archive sub-app.
"""

import typer
from cmd2zip.cli.run_cli import run_commands
from cmd2zip.cli.archive_cli import app as archive_app


main_app = typer.Typer(
    help="cmd2zip: run commands, capture their output into a zip archive. No temporary files.",
    no_args_is_help=True,
)

main_app.command("run")(run_commands)
main_app.add_typer(archive_app, name="archive")


def main():
    main_app()

if __name__ == "__main__":
    main()
