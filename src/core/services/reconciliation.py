"""Reconciliation of a preload list with a known-hosts database.

Pure functions, no I/O. The database carries no provenance column, so rows
previously synthesized from a preload list are recognised by their sentinel
`created`/`max_age` pair (`KnownHostEntry.is_preloaded`). Only those rows are
ever removed or rewritten; rows learned from live traffic are left alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping

from core.domain.models import KnownHostEntry, PreloadEntry


def preloaded_subset(known_hosts: Mapping[str, KnownHostEntry]) -> dict[str, KnownHostEntry]:
    """Rows of the database that came from an earlier preload run."""

    return {name: entry for name, entry in known_hosts.items() if entry.is_preloaded}


def hosts_to_remove(
    preload: Mapping[str, PreloadEntry],
    preloaded: Mapping[str, KnownHostEntry],
) -> frozenset[str]:
    """Preload-derived hosts that the authoritative list no longer carries."""

    return frozenset(name for name in preloaded if name not in preload)


def hosts_to_update(
    preload: Mapping[str, PreloadEntry],
    preloaded: Mapping[str, KnownHostEntry],
) -> frozenset[str]:
    """Preload-derived hosts whose subdomain flag changed upstream."""

    changed: set[str] = set()
    for name, entry in preloaded.items():
        source = preload.get(name)
        if source is None:
            continue
        if source.effective_include_subdomains != entry.include_subdomains:
            changed.add(name)
    return frozenset(changed)


def entries_to_write(
    preload: Mapping[str, PreloadEntry],
    known_hosts: Mapping[str, KnownHostEntry],
    updates: frozenset[str],
) -> tuple[PreloadEntry, ...]:
    """Force-HTTPS entries that are new to the database or need rewriting."""

    return tuple(
        entry
        for entry in preload.values()
        if entry.forces_https and (entry.name not in known_hosts or entry.name in updates)
    )


@dataclass(frozen=True)
class ReconciliationPlan:
    """Everything `reconcile` decided, ready for the writer."""

    known_hosts: Mapping[str, KnownHostEntry]
    preloaded: Mapping[str, KnownHostEntry]
    to_remove: frozenset[str]
    to_update: frozenset[str]
    to_write: tuple[PreloadEntry, ...] = ()

    @property
    def insert_count(self) -> int:
        return sum(1 for entry in self.to_write if entry.name not in self.to_update)

    @property
    def needs_write(self) -> bool:
        return bool(self.to_write) or bool(self.to_remove)

    def retained(self) -> Iterator[KnownHostEntry]:
        dropped = self.to_remove | self.to_update
        return (entry for entry in self.known_hosts.values() if entry.hostname not in dropped)

    def synthesized(self) -> list[KnownHostEntry]:
        rows = [KnownHostEntry.from_preload(entry) for entry in self.to_write]
        rows.sort(key=lambda row: row.hostname)
        return rows

    def rows(self) -> Iterator[KnownHostEntry]:
        """Final database rows: retained rows in file order, then new rows by name."""

        yield from self.retained()
        yield from self.synthesized()


def reconcile(
    preload: Mapping[str, PreloadEntry],
    known_hosts: Mapping[str, KnownHostEntry],
) -> ReconciliationPlan:
    preloaded = preloaded_subset(known_hosts)
    to_update = hosts_to_update(preload, preloaded)
    return ReconciliationPlan(
        known_hosts=known_hosts,
        preloaded=preloaded,
        to_remove=hosts_to_remove(preload, preloaded),
        to_update=to_update,
        to_write=entries_to_write(preload, known_hosts, to_update),
    )
