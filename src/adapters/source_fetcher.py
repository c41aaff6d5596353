"""Preload list acquisition.

Implements `core.interfaces.source.SourceAcquirer`:
- http(s) URLs are downloaded once into a temporary file (no retries);
- `file://` URLs and plain paths are used in place and never deleted.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from urllib.parse import SplitResult, urlsplit
from urllib.request import url2pathname

import httpx

from adapters.http_client import build_client
from core.config import AppSettings
from core.domain.errors import SourceAcquisitionError
from core.domain.models import SourceFile
from core.interfaces.source import SourceAcquirer
from core.logging_utils import get_logger

logger = get_logger("source")

_REMOTE_SCHEMES = ("http", "https")


def _split(locator: str) -> SplitResult | None:
    try:
        return urlsplit(locator)
    except ValueError:
        # Unparseable URLs (e.g. an unclosed IPv6 bracket) are local paths.
        return None


def is_remote(locator: str) -> bool:
    parts = _split(locator)
    if parts is None:
        return False
    return parts.scheme.lower() in _REMOTE_SCHEMES and bool(parts.netloc)


class HttpSourceAcquirer(SourceAcquirer):
    """Resolves a path or URL to a local preload list file."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    def acquire(self, locator: str) -> SourceFile:
        if is_remote(locator):
            return self._download(locator)

        parts = _split(locator)
        if parts is not None and parts.scheme.lower() == "file":
            path = Path(url2pathname(parts.path))
        else:
            path = Path(locator).expanduser()
        logger.debug("Using local preload list %s", path)
        return SourceFile(path=path, temporary=False)

    def release(self, source: SourceFile) -> None:
        if not source.temporary:
            return
        try:
            source.path.unlink(missing_ok=True)
        except OSError as exc:
            raise SourceAcquisitionError(
                f"Cannot delete temporary file '{source.path}': {exc}"
            ) from exc
        logger.debug("Deleted temporary preload list %s", source.path)

    def _download(self, url: str) -> SourceFile:
        try:
            fd, name = tempfile.mkstemp(prefix="hsts-", suffix=".json")
        except OSError as exc:
            raise SourceAcquisitionError(f"Cannot create temporary file for '{url}': {exc}") from exc
        path = Path(name)
        written = 0
        client = self._client or build_client(self._settings)
        try:
            with os.fdopen(fd, "wb") as out, client.stream("GET", url) as response:
                response.raise_for_status()
                logger.debug(
                    "GET %s -> %s (content-encoding: %s)",
                    url,
                    response.status_code,
                    response.headers.get("content-encoding", "identity"),
                )
                # iter_bytes() yields the decoded payload, gzip included.
                for chunk in response.iter_bytes():
                    out.write(chunk)
                    written += len(chunk)
        except (httpx.HTTPError, OSError) as exc:
            path.unlink(missing_ok=True)
            raise SourceAcquisitionError(f"Cannot download '{url}': {exc}") from exc
        finally:
            if self._client is None:
                client.close()

        logger.info("Downloaded %d bytes from %s into %s", written, url, path)
        return SourceFile(path=path, temporary=True, fetched_bytes=written)
