"""Loading of the authoritative preload list (JSON).

Supports the Chromium `transport_security_state_static.json` layout:
{"pinsets": [...], "entries": [{"name": ..., "mode": ...}, ...]}

The upstream file starts with `//` comment lines, which strict JSON rejects;
they are dropped before parsing.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from adapters.preload_list.models import PreloadListFile
from core.domain.errors import (
    DuplicateKeyError,
    PreloadListDecodeError,
    SourceAcquisitionError,
)
from core.domain.models import PreloadEntry


def _strip_line_comments(raw: str) -> str:
    return "\n".join(
        "" if line.lstrip().startswith("//") else line for line in raw.splitlines()
    )


def decode_preload_list(raw: str) -> dict[str, PreloadEntry]:
    """Decode a preload list document into `name -> PreloadEntry`."""

    try:
        data = json.loads(_strip_line_comments(raw))
        document = PreloadListFile.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise PreloadListDecodeError(f"Malformed preload list: {exc}") from exc

    entries: dict[str, PreloadEntry] = {}
    for entry in document.entries:
        if entry.name in entries:
            raise DuplicateKeyError(entry.name)
        entries[entry.name] = entry
    return entries


def load_preload_list(path: Path) -> dict[str, PreloadEntry]:
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise PreloadListDecodeError(f"Preload list '{path}' is not UTF-8: {exc}") from exc
    except OSError as exc:
        raise SourceAcquisitionError(f"Cannot read preload list '{path}': {exc}") from exc
    return decode_preload_list(raw)
