"""Doctor command for environment diagnostics."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.hsts_database import read_database
from adapters.http_client import build_client
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import HstsUpdateError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        with build_client(settings) as client:
            response = client.head(url)
        response.raise_for_status()
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc)


def _check_database(path: Path) -> tuple[str, str]:
    if not path.exists():
        return "OPTIONAL", "Does not exist yet; it will be created"
    try:
        entries = read_database(path)
    except HstsUpdateError as exc:
        return "FAIL", str(exc)
    preloaded = sum(1 for entry in entries.values() if entry.is_preloaded)
    return "OK", f"{len(entries)} entries ({preloaded} preload-derived)"


@app.command()
def run(
    destination: Optional[Path] = typer.Option(
        None,
        "--destination",
        "-d",
        help="HSTS database to check (defaults to ~/.wget-hsts).",
    ),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    destination = (destination or Path("~/.wget-hsts")).expanduser()

    table = Table(title="wget-hsts-updater Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("User config", "OK" if get_user_env_file().exists() else "OPTIONAL", escape(str(get_user_env_file())))
    table.add_row("Default source", "OK", escape(settings.default_source_url))
    table.add_row("Scratch dir", "OK", escape(str(settings.scratch_dir or "system temp dir")))

    # Connectivity (best-effort)
    ok_http, detail_http = _check_http(settings.default_source_url, settings)
    table.add_row("Source reachable", "OK" if ok_http else "FAIL", escape(detail_http))

    status, detail = _check_database(destination)
    table.add_row(f"Database {escape(str(destination))}", status, escape(detail))

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] SOURCE can also be a local copy of the preload list."
        )


@app.command(name="set-source")
def set_source(
    url: str = typer.Argument(..., help="Preload list URL used by default."),
) -> None:
    """Store the default preload list URL in the user config .env."""

    if not url.strip():
        raise typer.BadParameter("url must not be empty")

    env_path = write_user_env_vars({"WGET_HSTS_DEFAULT_SOURCE_URL": url.strip()})
    _console.print(f"[green]Saved default source to:[/green] {escape(str(env_path))}")


def main() -> None:
    app(prog_name="wget-hsts-doctor")
