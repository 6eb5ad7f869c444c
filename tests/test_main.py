"""Tests for the CLI entry point and application wiring."""

from __future__ import annotations

import json

from fastapi.testclient import TestClient

from vidlink.bootstrap import create_app, create_container
from vidlink.core.config import Settings
from vidlink.infra.network.http import HttpNetworkAdapter
from vidlink.main import main


def test_container_wiring():
    settings = Settings(request_timeout=3.0, chunk_size=1024)
    container = create_container(settings)
    network = container["network"]
    assert isinstance(network, HttpNetworkAdapter)
    assert network.timeout == 3.0
    assert network.chunk_size == 1024
    assert container["media_service"].network is network
    assert container["proxy"].media_service is container["media_service"]


def test_create_app_serves_ping():
    client = TestClient(create_app(Settings()))
    assert client.get("/ping").json() == {"status": "ok"}


def test_cli_resolve_prints_json(capsys, tmp_path):
    code = main(["--env-file", str(tmp_path / "none.env"), "resolve", "https://youtu.be/abc123"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["provider"] == "youtube"
    assert data["previewUrl"] == "https://www.youtube.com/embed/abc123"


def test_cli_invalid_url_exits_nonzero(capsys, tmp_path):
    code = main(["--env-file", str(tmp_path / "none.env"), "resolve", "ftp://nope"])
    assert code == 1
    assert "Invalid url" in capsys.readouterr().err


def test_cli_without_command(capsys):
    assert main([]) == 1
