"""Command line entry point: `wget-hsts-updater DESTINATION SOURCE`."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from cli.ui_components import build_summary_table, build_usage_panel, console_hooks
from core.config import AppSettings
from core.domain.errors import HstsUpdateError
from core.logging_utils import configure_logging
from core.services.update_pipeline import update_database

PROGRAM = "wget-hsts-updater"

app = typer.Typer(
    add_completion=False,
    help="Update a GNU Wget HSTS database from the Chromium preload list.",
)

_console = Console()
_err_console = Console(stderr=True)


def _package_version() -> str:
    try:
        return version(PROGRAM)
    except PackageNotFoundError:
        return "unknown"


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"{PROGRAM} {_package_version()}")
        raise typer.Exit()


@app.command()
def update(
    destination: Optional[Path] = typer.Argument(
        None,
        help="Wget HSTS database to update (e.g. ~/.wget-hsts); created if absent.",
        show_default=False,
    ),
    source: Optional[str] = typer.Argument(
        None,
        help="Preload list: local path or http(s) URL.",
        show_default=False,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Compute and report changes without touching the destination.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show diagnostic logging.",
    ),
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Reconcile DESTINATION with the preload list at SOURCE."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level, console=_err_console)

    if destination is None or source is None:
        _console.print(build_usage_panel(PROGRAM, settings.default_source_url))
        return

    try:
        result = update_database(
            destination.expanduser(),
            source,
            settings=settings,
            hooks=console_hooks(_console),
            dry_run=dry_run,
        )
    except HstsUpdateError as exc:
        _console.print()
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _console.print()
    _console.print(build_summary_table(result))


def run() -> None:
    app(prog_name=PROGRAM)
