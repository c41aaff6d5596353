"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Adapters (HTTP client, database writer) read their knobs consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CHROMIUM_PRELOAD_LIST_URL = (
    "https://raw.githubusercontent.com/chromium/chromium/main/"
    "net/http/transport_security_state_static.json"
)


APP_NAME = "wget-hsts-updater"
ENV_FILE_HEADER = f"# {APP_NAME} user config (.env)"


def get_user_config_dir() -> Path:
    """Per-user directory holding the global `.env` written by the doctor."""

    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or Path.home()) / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    """`KEY=value` pairs of a .env file; comments and bare words are ignored."""

    data: dict[str, str] = {}
    for line in map(str.strip, text.splitlines()):
        if line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if sep and key:
            data[key] = value.strip().strip("\"'")
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Merge `values` into the user's global .env, keys kept sorted."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged = _parse_env_lines(env_path.read_text(encoding="utf-8")) if env_path.exists() else {}
    merged.update((key, value) for key, value in values.items() if value is not None)

    body = "".join(f"{key}={merged[key]}\n" for key in sorted(merged))
    env_path.write_text(f"{ENV_FILE_HEADER}\n{body}", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Why pydantic-settings:
    - Typed, validated env vars at the edge without leaking into the core.
    - One configuration contract shared by the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="WGET_HSTS_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (development), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for the preload list download (seconds).",
    )
    user_agent: str = Field(
        default="wget-hsts-updater/1.0",
        min_length=1,
        description="User-Agent sent when downloading the preload list.",
    )
    default_source_url: str = Field(
        default=CHROMIUM_PRELOAD_LIST_URL,
        min_length=8,
        description="Preload list shown in the usage hint and checked by the doctor.",
    )
    scratch_dir: Path | None = Field(
        default=None,
        description="Directory for the scratch database (system temp dir when unset).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Level for diagnostic logging (DEBUG, INFO, WARNING...).",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unknown log level: {value}")
        return level
