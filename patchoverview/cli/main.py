"""
Command-line interface for Patch Overview.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import Settings
from ..core.errors import PatchOverviewError
from ..core.scanner import PatchOverviewScanner
from ..services.report import FORMATS, build_rows, emit

app = typer.Typer(
    name="patch-overview",
    help="Show which composer-patches patches are applied to installed packages",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)


@app.command()
def show(
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Drupal root; composer.json is read from its parent"),
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, csv"),
    include_dev: bool = typer.Option(True, "--include-dev/--no-dev", help="Include packages-dev from composer.lock"),
    http_user: Optional[str] = typer.Option(None, "--http-user", help="User for remote patch downloads"),
    http_password: Optional[str] = typer.Option(None, "--http-password", help="Password for remote patch downloads"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Show patches applied by the cweagans/composer-patches Composer plugin."""
    if verbose:
        logging.basicConfig(level=logging.INFO)

    if format not in FORMATS:
        err_console.print(f"[red]Error: Unsupported format '{format}'. Choose one of: {', '.join(FORMATS)}[/red]")
        raise typer.Exit(1)

    try:
        settings = Settings.from_env(
            root=root,
            include_dev=include_dev,
            http_user=http_user,
            http_password=http_password,
        )
        records = PatchOverviewScanner(settings).scan()
    except PatchOverviewError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", soft_wrap=True)
        raise typer.Exit(1)

    emit(build_rows(records), format, console)


app.command("patchs", hidden=True, help="Alias for show.")(show)


@app.command()
def version():
    """Show version information."""
    from .. import __version__
    console.print(f"[bold blue]Patch Overview[/bold blue] v{__version__}")
    console.print("Status report for patches declared through cweagans/composer-patches")


if __name__ == "__main__":
    app()
