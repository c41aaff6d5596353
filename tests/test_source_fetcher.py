"""
Unit tests for preload list acquisition.

HTTP is served by `httpx.MockTransport`; temporary files are redirected to
`tmp_path` so leaks are visible.
"""

from __future__ import annotations

import gzip
import tempfile
from pathlib import Path

import httpx
import pytest

from adapters.http_client import build_client
from adapters.source_fetcher import HttpSourceAcquirer, is_remote
from core.domain.errors import SourceAcquisitionError

PAYLOAD = b'{"entries": [{"name": "example.com", "mode": "force-https"}]}' * 40
URL = "https://preload.example/transport_security_state_static.json"


@pytest.fixture
def temp_dir(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "tmp"
    path.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(path))
    return path


def acquirer_for(settings, handler) -> HttpSourceAcquirer:
    client = build_client(settings, transport=httpx.MockTransport(handler))
    return HttpSourceAcquirer(settings, client=client)


@pytest.mark.parametrize(
    ("locator", "expected"),
    [
        ("https://example.com/list.json", True),
        ("HTTP://example.com/list.json", True),
        ("http:///no-host.json", False),
        ("ftp://example.com/list.json", False),
        ("/home/user/list.json", False),
        ("list.json", False),
        ("C:\\lists\\list.json", False),
        ("http://[::1/list.json", False),
    ],
)
def test_is_remote(locator: str, expected: bool) -> None:
    assert is_remote(locator) is expected


class TestDownload:
    def test_gzip_response_is_decoded_into_temp_file(self, settings, temp_dir: Path) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                content=gzip.compress(PAYLOAD),
                headers={"Content-Encoding": "gzip", "Content-Type": "application/json"},
            )

        acquirer = acquirer_for(settings, handler)

        source = acquirer.acquire(URL)

        assert source.temporary is True
        assert source.path.parent == temp_dir
        assert source.path.read_bytes() == PAYLOAD
        assert source.fetched_bytes == len(PAYLOAD)

        request = seen[0]
        assert request.headers["Accept-Encoding"] == "gzip"
        assert request.headers["Accept"] == "application/json,*/*;q=0.9"
        assert request.headers["User-Agent"] == settings.user_agent

        acquirer.release(source)
        assert not source.path.exists()

    def test_plain_response(self, settings, temp_dir: Path) -> None:
        acquirer = acquirer_for(settings, lambda request: httpx.Response(200, content=PAYLOAD))

        source = acquirer.acquire(URL)

        assert source.path.read_bytes() == PAYLOAD
        acquirer.release(source)

    def test_http_error_status_is_fatal_and_cleans_up(self, settings, temp_dir: Path) -> None:
        acquirer = acquirer_for(settings, lambda request: httpx.Response(404, content=b"gone"))

        with pytest.raises(SourceAcquisitionError):
            acquirer.acquire(URL)

        assert list(temp_dir.iterdir()) == []

    def test_network_error_is_fatal_and_cleans_up(self, settings, temp_dir: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        acquirer = acquirer_for(settings, handler)

        with pytest.raises(SourceAcquisitionError):
            acquirer.acquire(URL)

        assert list(temp_dir.iterdir()) == []

    def test_unusable_temp_dir_is_an_acquisition_error(self, settings, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path / "missing"))
        acquirer = acquirer_for(settings, lambda request: httpx.Response(200, content=PAYLOAD))

        with pytest.raises(SourceAcquisitionError):
            acquirer.acquire(URL)


class TestLocalSource:
    def test_path_is_used_in_place(self, settings, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_bytes(PAYLOAD)
        acquirer = HttpSourceAcquirer(settings)

        source = acquirer.acquire(str(path))
        acquirer.release(source)

        assert source.path == path
        assert source.temporary is False
        assert source.fetched_bytes is None
        assert path.exists()

    def test_file_url_resolves_to_path(self, settings, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_bytes(PAYLOAD)

        source = HttpSourceAcquirer(settings).acquire(path.as_uri())

        assert source.path == path
        assert source.temporary is False

    def test_unparseable_url_is_a_local_path(self, settings, tmp_path: Path) -> None:
        locator = "http://[::1/list.json"

        source = HttpSourceAcquirer(settings).acquire(locator)

        assert source.path == Path(locator)
        assert source.temporary is False
