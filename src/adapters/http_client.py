"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and redirect policy for every download.
- Eases testing: a client built on `httpx.MockTransport` can be passed in.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

PRELOAD_LIST_HEADERS = {
    "Accept": "application/json,*/*;q=0.9",
    "Accept-Encoding": "gzip",
}


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with safe defaults.

    Gzip responses are decoded by httpx itself, so callers always read the
    plain payload.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        **PRELOAD_LIST_HEADERS,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
