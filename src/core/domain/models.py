"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Frozen models give us immutable records with named-field construction.
- Validation happens once, at the edge where files are decoded.

Note:
- These models describe *what* an HSTS record is, not *how* it is read or
  written. The line format lives in ``adapters.hsts_database.codec``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# Largest 32-bit signed integer. Together with ``max_age == 0`` it marks a row
# that was synthesized from a preload list rather than learned from traffic.
PRELOADED_CREATED = 2_147_483_647
PRELOADED_MAX_AGE = 0

FORCE_HTTPS_MODE = "force-https"


class PreloadEntry(BaseModel):
    """One record of the authoritative preload list.

    Only the fields needed for reconciliation are modelled; everything else in
    the upstream JSON (pinsets, policies, expect-ct...) is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(
        ...,
        min_length=1,
        description="Host name, unique within a preload list.",
    )
    mode: str | None = Field(
        default=None,
        description="Preload mode; only 'force-https' entries are materialized.",
    )
    include_subdomains: bool = Field(
        default=False,
        description="HSTS applies to every subdomain of `name`.",
    )
    include_subdomains_for_pinning: bool = Field(
        default=False,
        description="Key pinning applies to every subdomain of `name`.",
    )

    @property
    def forces_https(self) -> bool:
        return self.mode is not None and self.mode.lower() == FORCE_HTTPS_MODE

    @property
    def effective_include_subdomains(self) -> bool:
        """Subdomain flag as written to the database.

        Inclusion for either HSTS or pinning is enough to force it.
        """

        return self.include_subdomains or self.include_subdomains_for_pinning


class KnownHostEntry(BaseModel):
    """One row of a GNU Wget HSTS known-hosts database."""

    model_config = ConfigDict(frozen=True)

    hostname: str = Field(
        ...,
        min_length=1,
        description="Host name, unique within a database.",
    )
    port: int = Field(
        default=0,
        description="Port the policy applies to (0 means the default port).",
    )
    include_subdomains: bool = Field(
        default=False,
        description="Policy also applies to subdomains.",
    )
    created: int = Field(
        ...,
        description="Unix time the policy was learned, or PRELOADED_CREATED.",
    )
    max_age: int = Field(
        ...,
        description="Policy lifetime in seconds.",
    )

    @property
    def is_preloaded(self) -> bool:
        """True when the row was synthesized from a preload list.

        The file format has no provenance column; the sentinel pair is the
        only marker.
        """

        return self.created == PRELOADED_CREATED and self.max_age == PRELOADED_MAX_AGE

    @classmethod
    def from_preload(cls, entry: PreloadEntry) -> "KnownHostEntry":
        return cls(
            hostname=entry.name,
            include_subdomains=entry.effective_include_subdomains,
            created=PRELOADED_CREATED,
            max_age=PRELOADED_MAX_AGE,
        )


class SourceFile(BaseModel):
    """A preload list available on the local filesystem.

    `temporary` files were downloaded by us and must be deleted after use;
    anything else belongs to the user and is never removed.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    temporary: bool = False
    fetched_bytes: int | None = Field(
        default=None,
        ge=0,
        description="Bytes written to `path` when the list was downloaded.",
    )
