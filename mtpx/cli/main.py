"""mtpx CLI - Main commands."""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List

import typer
from rich.console import Console
from rich.progress import Progress, TextColumn, BarColumn, TaskProgressColumn, DownloadColumn
from rich.table import Table
from rich.tree import Tree

from ..client import MtpxClient
from ..core.exceptions import MtpxError
from ..core.logging import setup_logging
from ..core.models import FileInfo, LocalEntry
from ..stores import DirectoryObjectStore

app = typer.Typer(
    name="mtpx",
    help="Browse and copy files on handle-addressed object stores",
    add_completion=False
)
console = Console()


def format_size(size: int) -> str:
    """Format a byte count for humans."""
    value = float(size)
    for unit in ('B', 'KB', 'MB', 'GB', 'TB'):
        if value < 1024 or unit == 'TB':
            return f"{value:.0f} {unit}" if unit == 'B' else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def get_client(ctx: typer.Context) -> MtpxClient:
    return ctx.obj


@contextmanager
def domain_errors():
    """Print mtpx errors in red and exit with status 1."""
    try:
        yield
    except MtpxError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    root: Path = typer.Option(
        Path("."), "--root", "-r", envvar="MTPX_ROOT",
        help="Directory exposed as the storage root", exists=True, file_okay=False
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Open the storage every command works on."""
    if verbose:
        logging.basicConfig(format="%(name)s: %(message)s")
        setup_logging(logging.DEBUG)
    ctx.obj = MtpxClient(DirectoryObjectStore(root))


@app.command()
def ls(
    ctx: typer.Context,
    path: str = typer.Argument("/", help="Path to list"),
    long: bool = typer.Option(False, "-l", "--long", help="Long format with details"),
    all_: bool = typer.Option(False, "-a", "--all", help="Show excluded system files"),
):
    """List files and folders."""
    client = get_client(ctx)

    with domain_errors():
        entries = client.ls(path, skip_excluded=not all_)

    if long:
        table = Table()
        table.add_column("Type", style="cyan")
        table.add_column("Size", justify="right")
        table.add_column("Modified")
        table.add_column("Name")
        table.add_column("Handle", style="dim")

        for entry in entries:
            type_str = "D" if entry.is_dir else "F"
            size_str = "-" if entry.is_dir else f"{entry.size:,}"
            mod_str = entry.mod_time.strftime("%Y-%m-%d %H:%M") if entry.mod_time else "-"
            table.add_row(type_str, size_str, mod_str, entry.name, str(entry.object_id))

        console.print(table)
    else:
        for entry in entries:
            if entry.is_dir:
                console.print(f"[blue]{entry.name}/[/blue]")
            else:
                console.print(entry.name)


@app.command()
def tree(
    ctx: typer.Context,
    path: str = typer.Argument("/", help="Directory to walk"),
    all_: bool = typer.Option(False, "-a", "--all", help="Show excluded system files"),
):
    """Show a directory tree."""
    client = get_client(ctx)

    with domain_errors():
        anchor = client.resolve(path)
        root = Tree(f"[bold]{anchor.full_path}[/bold]")
        branches: Dict[str, Tree] = {anchor.full_path: root}

        def visit(handle: int, entry: FileInfo) -> None:
            parent = branches.get(entry.parent_path, root)
            if entry.is_dir:
                branches[entry.full_path] = parent.add(f"[blue]{entry.name}/[/blue]")
            else:
                parent.add(f"{entry.name} [dim]({format_size(entry.size)})[/dim]")

        total = client.walk(anchor.full_path, skip_excluded=not all_, visit=visit)

    console.print(root)
    console.print(f"{total} entries")


@app.command()
def stat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path to describe"),
):
    """Show the descriptor of a file or folder."""
    client = get_client(ctx)

    with domain_errors():
        entry = client.resolve(path)

    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in entry.to_dict().items():
        table.add_row(key, "" if value is None else str(value))
    console.print(table)


@app.command()
def mkdir(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Directory to create (parents included)"),
):
    """Create a folder and any missing parents."""
    client = get_client(ctx)

    with domain_errors():
        handle = client.makedirs(path)

    console.print(f"[green]Created {path}[/green] [dim]({handle})[/dim]")


@app.command()
def put(
    ctx: typer.Context,
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    dest: str = typer.Argument("/", help="Destination folder path"),
    name: str = typer.Option(None, "--name", "-n", help="Custom file name"),
    overwrite: bool = typer.Option(False, "--overwrite", "-f", help="Replace an existing file"),
):
    """Upload a file."""
    client = get_client(ctx)

    with Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        DownloadColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(file_path.name, total=None)

        def on_progress(total: int, sent: int) -> None:
            progress.update(task, total=total, completed=sent)

        with domain_errors():
            handle = client.upload(
                file_path, dest, name=name, overwrite=overwrite, progress_callback=on_progress
            )

    console.print(f"[green]Uploaded {file_path.name}[/green] [dim]({handle})[/dim]")


@app.command()
def get(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Remote file to download"),
    dest: Path = typer.Argument(Path("."), help="Local file or folder"),
):
    """Download a file."""
    client = get_client(ctx)

    with domain_errors():
        result = client.download(path, dest)

    console.print(f"[green]Downloaded to {result}[/green]")


@app.command()
def du(
    ctx: typer.Context,
    sources: List[Path] = typer.Argument(..., help="Local files or folders"),
    verbose: bool = typer.Option(False, "--list", "-l", help="List every entry"),
):
    """Count local files, folders and bytes, the way an upload would see them."""
    client = get_client(ctx)

    def visit(entry: LocalEntry) -> None:
        if verbose:
            console.print(f"{entry.path}{'/' if entry.is_dir else ''}")

    with domain_errors():
        result = client.walk_local(sources, visit)

    console.print(
        f"{result.file_count} files, {result.dir_count} folders, "
        f"{format_size(result.total_size)} ({result.total_size:,} bytes)"
    )


if __name__ == "__main__":
    app()
