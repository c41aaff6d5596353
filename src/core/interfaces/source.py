"""Contract for preload list acquisition.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The update pipeline can be driven by the HTTP adapter in production and by
  an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import SourceFile


@runtime_checkable
class SourceAcquirer(Protocol):
    """Turns a source locator into a readable local file.

    Design rules:
    - `acquire` is synchronous; a run performs exactly one fetch attempt.
    - `release` must be called once the file has been decoded, on every path.
    """

    def acquire(self, locator: str) -> SourceFile:
        """Resolve `locator` (path or URL) to a local file."""

        ...

    def release(self, source: SourceFile) -> None:
        """Dispose of `source`; temporary files are deleted, others are kept."""

        ...
