"""Shared fixtures for the updater tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from adapters.hsts_database import HEADER_LINES
from core.config import AppSettings


@pytest.fixture
def settings() -> AppSettings:
    """Settings isolated from any .env file on the machine."""

    return AppSettings(_env_file=None)


@pytest.fixture
def write_preload(tmp_path: Path) -> Callable[..., Path]:
    """Write a preload list JSON document and return its path."""

    def _write(entries: list[dict[str, Any]], *, name: str = "preload.json", comments: bool = False) -> Path:
        path = tmp_path / name
        body = json.dumps({"pinsets": [], "entries": entries}, indent=2)
        if comments:
            body = "// Copyright header\n// More comments\n" + body
        path.write_text(body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_database(tmp_path: Path) -> Callable[..., Path]:
    """Write a known-hosts database (header plus raw lines) and return its path."""

    def _write(lines: list[str], *, name: str = "wget-hsts") -> Path:
        path = tmp_path / name
        path.write_text("\n".join([*HEADER_LINES, *lines]) + "\n", encoding="utf-8")
        return path

    return _write
