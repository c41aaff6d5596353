"""Safe rewrite of the HSTS database.

Sequence:
1. build the full new content in a scratch file (deleted on any failure);
2. gzip-copy the current destination to the first free `<dest>.bak[.N].gz`;
3. move the scratch file over the destination, atomically when the
   filesystem allows it.

The destination is only touched by step 3, so a failure anywhere before it
leaves the old database in place.
"""

from __future__ import annotations

import errno
import gzip
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from adapters.hsts_database.codec import HEADER_LINES, encode_entry
from core.domain.errors import BackupError, DatabaseWriteError
from core.domain.models import KnownHostEntry
from core.logging_utils import get_logger

logger = get_logger("writer")


@dataclass(frozen=True)
class WriteResult:
    """Outcome of `write_database`."""

    destination: Path
    backup_path: Path | None
    atomic: bool


def create_scratch_database(
    rows: Iterable[KnownHostEntry],
    *,
    scratch_dir: Path | None = None,
) -> Path:
    """Write header and rows to a fresh scratch file and return its path."""

    try:
        fd, name = tempfile.mkstemp(prefix="wget-hsts-", dir=scratch_dir)
    except OSError as exc:
        location = scratch_dir or tempfile.gettempdir()
        raise DatabaseWriteError(f"Cannot create scratch database in '{location}': {exc}") from exc
    path = Path(name)
    completed = False
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            for line in HEADER_LINES:
                fh.write(line + "\n")
            for row in rows:
                fh.write(encode_entry(row) + "\n")
        completed = True
    except OSError as exc:
        raise DatabaseWriteError(f"Cannot write scratch database '{path}': {exc}") from exc
    finally:
        if not completed:
            path.unlink(missing_ok=True)
    return path


def next_backup_path(destination: Path) -> Path:
    candidate = destination.with_name(f"{destination.name}.bak.gz")
    i = 1
    while candidate.exists():
        candidate = destination.with_name(f"{destination.name}.bak.{i}.gz")
        i += 1
    return candidate


def backup_database(destination: Path) -> Path:
    """Gzip-copy `destination` next to itself; returns the backup path."""

    backup = next_backup_path(destination)
    try:
        with destination.open("rb") as src, backup.open("xb") as raw:
            with gzip.GzipFile(fileobj=raw, mode="wb") as gz:
                shutil.copyfileobj(src, gz)
    except FileExistsError as exc:
        raise BackupError(f"Backup '{backup}' appeared while backing up: {exc}") from exc
    except OSError as exc:
        backup.unlink(missing_ok=True)
        raise BackupError(f"Cannot back up '{destination}' to '{backup}': {exc}") from exc
    return backup


def replace_database(scratch: Path, destination: Path) -> bool:
    """Move `scratch` over `destination`.

    Returns False when the move had to fall back to a non-atomic copy because
    the two paths live on different filesystems.
    """

    try:
        os.replace(scratch, destination)
        return True
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise
        logger.debug("Atomic move %s -> %s not supported: %s", scratch, destination, exc)

    shutil.move(str(scratch), str(destination))
    return False


def write_database(
    destination: Path,
    rows: Iterable[KnownHostEntry],
    *,
    scratch_dir: Path | None = None,
) -> WriteResult:
    """Replace `destination` with `rows`, backing up the previous content."""

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DatabaseWriteError(f"Cannot create '{destination.parent}': {exc}") from exc

    scratch = create_scratch_database(rows, scratch_dir=scratch_dir)
    try:
        backup: Path | None = None
        if destination.exists():
            try:
                shutil.copymode(destination, scratch)
            except OSError as exc:
                raise DatabaseWriteError(f"Cannot copy mode of '{destination}': {exc}") from exc
            backup = backup_database(destination)
            logger.info("Backed up %s to %s", destination, backup)

        try:
            atomic = replace_database(scratch, destination)
        except OSError as exc:
            raise DatabaseWriteError(f"Cannot replace '{destination}': {exc}") from exc
    finally:
        scratch.unlink(missing_ok=True)

    logger.info("Wrote %s (atomic=%s)", destination, atomic)
    return WriteResult(destination=destination, backup_path=backup, atomic=atomic)
