"""GNU Wget HSTS database line format.

One record per line, five whitespace separated columns:

    <hostname> <port> <incl. subdomains> <created> <max-age>

Lines starting with `#` and blank lines are comments. Lines with any other
column count are skipped rather than rejected, matching how Wget itself reads
the file.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from core.domain.errors import DatabaseDecodeError, DuplicateKeyError
from core.domain.models import KnownHostEntry
from core.logging_utils import get_logger

logger = get_logger("codec")

HEADER_LINES = (
    "# HSTS 1.0 Known Hosts database for GNU Wget.",
    "# Edit at your own risk.",
    "# <hostname>\t<port>\t<incl. subdomains>\t<created>\t<max-age>",
)

_FIELD_COUNT = 5
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


def _parse_int(value: str, column: str, lineno: int) -> int:
    if not _INTEGER.fullmatch(value):
        raise DatabaseDecodeError(
            f"line {lineno}: {column} is not an integer: {value!r}"
        )
    number = int(value)
    if not _INT_MIN <= number <= _INT_MAX:
        raise DatabaseDecodeError(
            f"line {lineno}: {column} is out of the 32-bit range: {value!r}"
        )
    return number


def decode_line(line: str, lineno: int = 0) -> KnownHostEntry | None:
    """Decode one line; returns None for comments and malformed widths."""

    line = line.strip()
    if not line or line.startswith("#"):
        return None

    fields = line.split()
    if len(fields) != _FIELD_COUNT:
        logger.debug("Skipping line %d with %d fields", lineno, len(fields))
        return None

    hostname, port, include_subdomains, created, max_age = fields
    return KnownHostEntry(
        hostname=hostname,
        port=_parse_int(port, "port", lineno),
        include_subdomains=include_subdomains == "1",
        created=_parse_int(created, "created", lineno),
        max_age=_parse_int(max_age, "max-age", lineno),
    )


def decode_database(lines: Iterable[str]) -> dict[str, KnownHostEntry]:
    """Decode database lines into `hostname -> KnownHostEntry` (file order)."""

    entries: dict[str, KnownHostEntry] = {}
    for lineno, line in enumerate(lines, start=1):
        entry = decode_line(line, lineno)
        if entry is None:
            continue
        if entry.hostname in entries:
            raise DuplicateKeyError(entry.hostname)
        entries[entry.hostname] = entry
    return entries


def read_database(path: Path) -> dict[str, KnownHostEntry]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return decode_database(fh)
    except UnicodeDecodeError as exc:
        raise DatabaseDecodeError(f"'{path}' is not UTF-8: {exc}") from exc
    except OSError as exc:
        raise DatabaseDecodeError(f"Cannot read '{path}': {exc}") from exc


def encode_entry(entry: KnownHostEntry) -> str:
    return "\t".join(
        (
            entry.hostname,
            str(entry.port),
            "1" if entry.include_subdomains else "0",
            str(entry.created),
            str(entry.max_age),
        )
    )
