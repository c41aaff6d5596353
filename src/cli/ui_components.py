"""Rich components for the CLI.

Why separate components:
- Keeps command functions free of presentation details.
- Lets the updater and the doctor share the same look.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.services.update_pipeline import PipelineHooks, UpdateResult


def console_hooks(console: Console) -> PipelineHooks:
    """Pipeline hooks printing `label... outcome` lines, one per stage."""

    def started(label: str) -> None:
        console.print(f"{escape(label)}... ", end="", highlight=False)

    def finished(detail: str) -> None:
        console.print(escape(detail), highlight=False)

    return PipelineHooks(step_started=started, step_finished=finished)


def build_usage_panel(program: str, default_source_url: str) -> Panel:
    body = Text()
    body.append("Typical usage:\n\n", style="bold")
    body.append(f"  {program} ~/.wget-hsts {default_source_url}\n", style="cyan")
    body.append("\nDESTINATION is created if it does not exist; SOURCE is a path or an http(s) URL.", style="dim")
    return Panel(body, title=Text(program, style="bold cyan"), border_style="cyan")


def build_summary_table(result: UpdateResult) -> Table:
    """Table with the counts of an update run."""

    table = Table(title="HSTS database update")
    table.add_column("Item", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    if result.fetched_bytes is not None:
        table.add_row("Downloaded", f"{result.fetched_bytes // 1024} kB")
    table.add_row("Preload list entries", str(result.source_entries))
    table.add_row("Known hosts", str(result.known_entries))
    table.add_row("Preload-derived rows", str(result.preloaded_entries))
    table.add_row("Removed", str(result.removed))
    table.add_row("Updated", str(result.updated))
    table.add_row("Inserted", str(result.inserted))

    if result.written:
        table.add_row("Destination", escape(str(result.destination)), style="green")
        if result.backup_path is not None:
            table.add_row("Backup", escape(str(result.backup_path)))
        if result.atomic is False:
            table.add_row("Replace", "non-atomic (cross-device move)", style="yellow")
    else:
        table.add_row("Destination", "unchanged", style="dim")
    return table
