"""Domain errors.

Every fatal condition of an update run is one of these. Adapters translate
library exceptions (``OSError``, ``httpx.HTTPError``, ``ValidationError``) into
this hierarchy so the CLI can report them without knowing about I/O details.
"""

from __future__ import annotations


class HstsUpdateError(Exception):
    """Base class for errors that abort an update run."""


class SourceAcquisitionError(HstsUpdateError):
    """The authoritative source could not be fetched or opened."""


class DecodeError(HstsUpdateError):
    """A document or database could not be decoded."""


class PreloadListDecodeError(DecodeError):
    """The preload list is not a valid JSON document with an ``entries`` list."""


class DatabaseDecodeError(DecodeError):
    """A known-hosts database line carries a non-integer numeric field."""


class DuplicateKeyError(DecodeError):
    """The same host name appears twice in a list or database."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Duplicate key {key}")
        self.key = key


class DatabaseWriteError(HstsUpdateError):
    """The new database could not be built or moved into place."""


class BackupError(HstsUpdateError):
    """The existing database could not be backed up."""
