"""HSTS database update orchestration.

This module sequences one update run:

    acquire source -> decode preload list -> release source
    -> decode destination (if any) -> reconcile -> write (if needed)

It has no console output of its own. Progress is reported through
`PipelineHooks` so the CLI can narrate each stage, and through the ``hsts``
logger for diagnostics. Any stage failure raises an `HstsUpdateError`
subclass; the destination is only touched by the final write.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from adapters.hsts_database import read_database, write_database
from adapters.preload_list import load_preload_list
from adapters.source_fetcher import HttpSourceAcquirer, is_remote
from core.config import AppSettings
from core.domain.errors import HstsUpdateError
from core.domain.models import KnownHostEntry, PreloadEntry
from core.interfaces.source import SourceAcquirer
from core.logging_utils import get_logger
from core.services.reconciliation import reconcile

logger = get_logger("pipeline")


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers.

    `step_started` receives a label such as "Parsing source file 'x'";
    `step_finished` receives the outcome of that step ("12 entries found").
    """

    step_started: Callable[[str], None] | None = None
    step_finished: Callable[[str], None] | None = None


@dataclass
class UpdateResult:
    """Output of a pipeline invocation."""

    destination: Path
    source_entries: int
    known_entries: int
    preloaded_entries: int
    removed: int
    updated: int
    inserted: int
    fetched_bytes: int | None = None
    written: bool = False
    backup_path: Path | None = None
    atomic: bool | None = None


def _count(value: int) -> str:
    return "none" if value == 0 else str(value)


class _Narrator:
    def __init__(self, hooks: PipelineHooks) -> None:
        self._hooks = hooks

    def start(self, label: str) -> None:
        if self._hooks.step_started:
            self._hooks.step_started(label)

    def finish(self, detail: str) -> None:
        if self._hooks.step_finished:
            self._hooks.step_finished(detail)


def _load_source(
    source: str,
    acquirer: SourceAcquirer,
    narrator: _Narrator,
) -> tuple[dict[str, PreloadEntry], int | None]:
    if is_remote(source):
        narrator.start(f"Downloading '{source}'")
    source_file = acquirer.acquire(source)
    if source_file.fetched_bytes is not None:
        narrator.finish(f"{source_file.fetched_bytes // 1024} kB fetched")

    try:
        narrator.start(f"Parsing source file '{source_file.path}'")
        preload = load_preload_list(source_file.path)
    except BaseException:
        # A failed cleanup is logged; the parse error propagates.
        try:
            acquirer.release(source_file)
        except HstsUpdateError as exc:
            logger.warning("%s", exc)
        raise
    acquirer.release(source_file)
    narrator.finish(f"{len(preload)} entries found")
    return preload, source_file.fetched_bytes


def update_database(
    destination: Path,
    source: str,
    *,
    settings: AppSettings | None = None,
    acquirer: SourceAcquirer | None = None,
    hooks: PipelineHooks | None = None,
    dry_run: bool = False,
) -> UpdateResult:
    """Reconcile `destination` with the preload list found at `source`."""

    settings = settings or AppSettings()
    acquirer = acquirer or HttpSourceAcquirer(settings)
    narrator = _Narrator(hooks or PipelineHooks())

    preload, fetched_bytes = _load_source(source, acquirer, narrator)
    logger.info("Preload list has %d entries", len(preload))

    known_hosts: dict[str, KnownHostEntry] = {}
    exists = destination.exists()
    if exists:
        narrator.start(f"Parsing destination file '{destination}'")
        known_hosts = read_database(destination)
        narrator.finish(f"{len(known_hosts)} entries found")

    plan = reconcile(preload, known_hosts)
    if exists:
        narrator.start("Computing entries to delete")
        narrator.finish(_count(len(plan.to_remove)))
        narrator.start("Computing entries to update")
        narrator.finish(_count(len(plan.to_update)))
    narrator.start("Computing entries to insert")
    narrator.finish(_count(plan.insert_count))

    logger.info(
        "Known %d, preloaded %d, remove %d, update %d, insert %d",
        len(known_hosts),
        len(plan.preloaded),
        len(plan.to_remove),
        len(plan.to_update),
        plan.insert_count,
    )

    result = UpdateResult(
        destination=destination,
        source_entries=len(preload),
        known_entries=len(known_hosts),
        preloaded_entries=len(plan.preloaded),
        removed=len(plan.to_remove),
        updated=len(plan.to_update),
        inserted=plan.insert_count,
        fetched_bytes=fetched_bytes,
    )

    if not plan.needs_write:
        logger.info("%s is up to date", destination)
        return result

    if dry_run:
        narrator.start("Dry run")
        narrator.finish(f"'{destination}' left untouched")
        return result

    narrator.start(f"Updating destination file '{destination}'")
    outcome = write_database(destination, plan.rows(), scratch_dir=settings.scratch_dir)
    narrator.finish("done" if outcome.backup_path is None else f"done (backup -> '{outcome.backup_path}')")

    result.written = True
    result.backup_path = outcome.backup_path
    result.atomic = outcome.atomic
    return result
