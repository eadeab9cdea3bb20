import logging
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .. import get_download_service
from ..config import load_settings
from ..domain.errors import DistFetchError
from ..fetch.cache import LocalCache
from ..services.download import DownloadService
from ..ui.progress import ProgressManager

app = typer.Typer(help="Download spark, flink and hadoop distributions into the local cache.")
console = Console()
# spinner and log output share one console
err_console = Console(stderr=True)

PROJECTS = ["spark", "flink", "hadoop"]

def get_service() -> DownloadService:
    return get_download_service(load_settings(), ProgressManager(err_console))

def get_cache() -> LocalCache:
    return LocalCache(load_settings().cache_root)

@app.callback()
def main_callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log shell commands and their output")):
    """configure logging before every command."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )

@app.command()
def spark(version: str, hadoop: str = typer.Argument(..., help="Hadoop version of the build, e.g. 3")):
    """download a spark distribution and print SPARK_HOME."""
    try:
        home = get_service().download_spark(version, hadoop)
    except DistFetchError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(str(home))

@app.command()
def flink(version: str, scala: str = typer.Argument(..., help="Scala version of the build, e.g. 2.12")):
    """download a flink distribution with its hive/hadoop jars and print FLINK_HOME."""
    try:
        home = get_service().download_flink(version, scala)
    except DistFetchError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(str(home))

@app.command()
def hadoop(version: str):
    """download a hadoop distribution and print HADOOP_HOME."""
    try:
        home = get_service().download_hadoop(version)
    except DistFetchError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(str(home))

@app.command("list")
def list_installs():
    """list cached distributions."""
    try:
        cache = get_cache()
    except DistFetchError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    table = Table(title="Cached distributions")
    table.add_column("Project", style="cyan")
    table.add_column("Install", style="green")
    table.add_column("Path", style="dim")

    count = 0
    for project in PROJECTS:
        for path in cache.installs(project):
            table.add_row(project, path.name, str(path))
            count += 1

    if not count:
        console.print(f"[dim]No distributions cached under {cache.cache_dir}[/dim]")
        return
    console.print(table)

@app.command()
def clear(
    project: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """remove every cached distribution of a project."""
    if project not in PROJECTS:
        console.print(f"[red]Error:[/red] unknown project '{project}', expected one of {', '.join(PROJECTS)}")
        raise typer.Exit(1)

    try:
        cache = get_cache()
    except DistFetchError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not yes and not typer.confirm(f"Remove {cache.cache_dir / project}?"):
        raise typer.Exit(0)
    cache.clear(project)
    console.print(f"[green]✓[/green] cleared {project} cache")

if __name__ == "__main__":
    app()
