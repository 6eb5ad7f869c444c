"""Shared pytest fixtures for the vidlink test suite.

Guidelines
----------
* No internet access in any test.
* Outbound HTTP goes through :class:`FakeNetwork`, which answers from
  in-memory tables and records every call.
* yt-dlp is patched at the extractor boundary.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from vidlink.app.media_service import MediaService
from vidlink.app.proxy_service import DownloadProxy
from vidlink.core.config import Settings
from vidlink.core.entities import PageResponse, ProbeResult, UpstreamStream
from vidlink.core.errors import NetworkError
from vidlink.core.interfaces import NetworkAdapter
from vidlink.web.server import PreviewServer


class FakeNetwork(NetworkAdapter):
    def __init__(self) -> None:
        self.heads: Dict[str, ProbeResult] = {}
        self.pages: Dict[str, PageResponse] = {}
        self.json: Dict[str, Dict[str, Any]] = {}
        self.streams: Dict[str, UpstreamStream] = {}
        self.calls: List[tuple] = []
        self.closed: List[str] = []

    # -- table helpers -----------------------------------------------------

    def add_head(self, url: str, content_type: Optional[str], status: int = 200) -> None:
        self.heads[url] = ProbeResult(ok=200 <= status < 300, status=status, content_type=content_type)

    def add_page(self, url: str, html: str, content_type: str = "text/html; charset=utf-8",
                 status: int = 200) -> None:
        self.pages[url] = PageResponse(url=url, status=status, content_type=content_type, text=html)

    def add_stream(self, url: str, chunks: List[bytes], status: int = 200,
                   headers: Optional[Dict[str, str]] = None) -> None:
        self.streams[url] = UpstreamStream(
            status_code=status,
            headers=headers or {},
            chunks=iter(chunks),
            close=lambda: self.closed.append(url),
        )

    # -- NetworkAdapter ----------------------------------------------------

    def head(self, url, timeout=None):
        self.calls.append(("HEAD", url, timeout))
        return self.heads.get(url, ProbeResult.failed())

    def fetch_page(self, url, timeout=None):
        self.calls.append(("GET", url, timeout))
        return self.pages.get(url)

    def fetch_json(self, url, timeout=None):
        self.calls.append(("JSON", url, timeout))
        return self.json.get(url)

    def open_stream(self, url, headers=None):
        self.calls.append(("STREAM", url, headers))
        if url not in self.streams:
            raise NetworkError(f"Connection failed: {url}")
        return self.streams[url]


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture()
def media_service(network: FakeNetwork, settings: Settings) -> MediaService:
    return MediaService(network, settings=settings)


@pytest.fixture()
def proxy(network: FakeNetwork, media_service: MediaService) -> DownloadProxy:
    return DownloadProxy(network, media_service)


@pytest.fixture()
def client(media_service: MediaService, proxy: DownloadProxy, settings: Settings) -> TestClient:
    server = PreviewServer(media_service, proxy, settings)
    return TestClient(server.app)
