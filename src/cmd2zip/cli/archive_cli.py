"""Command-line interface for inspecting archives written by cmd2zip."""

from pathlib import Path

import typer
from rich.table import Table
from rich.console import Console
from rich.markup import escape

from cmd2zip.archive.reader import ArchiveReader
from cmd2zip.core.errors import ArchiveError

app = typer.Typer(help="Tools for inspecting archives written by cmd2zip")
console = Console(emoji=False)
err_console = Console(stderr=True, soft_wrap=True, emoji=False)


@app.command("list")
def list_entries(
    archive_path: Path = typer.Argument(..., help="Path to the archive zip file"),
    failed_only: bool = typer.Option(False, "--failed", "-f", help="Only show entries of failed commands"),
):
    """List the entries of an archive."""
    try:
        reader = ArchiveReader(str(archive_path))
        entries = reader.list_entries()
        stats = reader.get_archive_stats()
    except ArchiveError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if failed_only:
        entries = [e for e in entries if e['name'].endswith('.err')]

    table = Table(title=f"Entries in {archive_path.name}")
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right", style="magenta")
    table.add_column("Compressed", justify="right")
    table.add_column("Modified", style="green")

    for entry in entries:
        name = escape(entry['name'])
        if entry['name'].endswith('.err'):
            name = f"[red]{name}[/red]"
        table.add_row(
            name,
            str(entry['size']),
            str(entry['compressed_size']),
            entry['modified'].strftime('%Y-%m-%d %H:%M:%S'),
        )

    console.print(table)
    console.print(
        f"[bold]Entries:[/bold] {stats['entries']}  "
        f"[bold]Failed:[/bold] {stats['failed_entries']}  "
        f"[bold]Archive size:[/bold] {stats['archive_size']} bytes"
    )


@app.command("show")
def show_entry(
    archive_path: Path = typer.Argument(..., help="Path to the archive zip file"),
    name: str = typer.Argument(..., help="Name of the entry to print"),
):
    """Write the raw content of one entry to stdout."""
    try:
        reader = ArchiveReader(str(archive_path))
        content = reader.read_entry(name)
    except ArchiveError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if content is None:
        err_console.print(f"[bold red]Error:[/bold red] Entry '{escape(name)}' not found")
        raise typer.Exit(code=1)

    typer.echo(content, nl=False)
