"""Tests for the HTTP surface (/resolve, /download, /ping).

Uses FastAPI's TestClient, whose requests carry ``Host: testserver``.
"""

from __future__ import annotations

import pytest


# ---------------------------------------------------------------------------
# /resolve
# ---------------------------------------------------------------------------

def test_ping(client):
    resp = client.get("/ping")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_resolve_get_youtube(client):
    resp = client.get("/resolve", params={"url": "https://www.youtube.com/watch?v=abc123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["provider"] == "youtube"
    assert body["previewUrl"] == "https://www.youtube.com/embed/abc123"
    assert body["originalUrl"] == "https://www.youtube.com/watch?v=abc123"
    assert body["downloadable"] is False


def test_resolve_post_body(client):
    resp = client.post("/resolve", json={"url": "https://youtu.be/abc123"})
    assert resp.status_code == 200
    assert resp.json()["previewUrl"] == "https://www.youtube.com/embed/abc123"


def test_resolve_twitch_parent_is_request_host(client):
    resp = client.get("/resolve", params={"url": "https://twitch.tv/channel1"})
    assert resp.json()["previewUrl"] == (
        "https://player.twitch.tv/?channel=channel1&parent=testserver&autoplay=false"
    )


def test_resolve_twitch_parent_from_forwarded_host(client):
    resp = client.get(
        "/resolve",
        params={"url": "https://twitch.tv/channel1"},
        headers={"X-Forwarded-Host": "preview.example.com:8443, internal"},
    )
    assert "parent=preview.example.com&" in resp.json()["previewUrl"]


def test_resolve_direct_media(client, network):
    network.add_head("https://cdn.test/a.mp4", "video/mp4")
    body = client.get("/resolve", params={"url": "https://cdn.test/a.mp4"}).json()
    assert body["provider"] == "direct"
    assert body["downloadable"] is True
    assert body["isHls"] is False


def test_resolve_hls(client, network):
    network.add_head("https://cdn.test/a.m3u8", "application/x-mpegURL")
    body = client.get("/resolve", params={"url": "https://cdn.test/a.m3u8"}).json()
    assert body["provider"] == "direct"
    assert body["downloadable"] is False
    assert body["isHls"] is True


@pytest.mark.parametrize("params", [
    {},
    {"url": ""},
    {"url": "ftp://cdn.test/a.mp4"},
    {"url": "cdn.test/a.mp4"},
    {"url": "javascript:alert(1)"},
])
def test_resolve_get_rejects_invalid_url(client, params):
    resp = client.get("/resolve", params=params)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid url"}


@pytest.mark.parametrize("payload", [
    {},
    {"url": 42},
    {"url": "mailto:a@b.test"},
    ["https://cdn.test/a.mp4"],
])
def test_resolve_post_rejects_invalid_body(client, payload):
    resp = client.post("/resolve", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid url"}


def test_resolve_post_rejects_malformed_json(client):
    resp = client.post("/resolve", content=b"{nope", headers={"content-type": "application/json"})
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# /download
# ---------------------------------------------------------------------------

def test_download_streams_upstream_body(client, network):
    url = "https://cdn.test/media/movie.mp4"
    network.add_stream(url, [b"abc", b"def"], headers={"content-type": "video/mp4", "content-length": "6"})
    resp = client.get("/download", params={"url": url})
    assert resp.status_code == 200
    assert resp.content == b"abcdef"
    assert resp.headers["content-type"] == "video/mp4"
    assert resp.headers["content-length"] == "6"
    assert resp.headers["content-disposition"] == 'attachment; filename="movie.mp4"'
    assert resp.headers["cache-control"] == "no-store"
    assert network.closed == [url]


def test_download_sends_origin_of_proxy_host(client, network):
    url = "https://cdn.test/a.mp4"
    network.add_stream(url, [b"x"])
    client.get("/download", params={"url": url})
    method, called_url, headers = network.calls[-1]
    assert method == "STREAM"
    assert headers == {"Origin": "https://testserver"}


def test_download_defaults(client, network):
    url = "https://cdn.test/stream"
    network.add_stream(url, [b"x"])
    resp = client.get("/download", params={"url": url})
    assert resp.headers["content-type"] == "application/octet-stream"
    assert resp.headers["content-disposition"] == 'attachment; filename="stream.mp4"'


def test_download_forwards_upstream_status(client, network):
    url = "https://cdn.test/missing.mp4"
    network.add_stream(url, [], status=404)
    resp = client.get("/download", params={"url": url})
    assert resp.status_code == 404
    assert resp.text == "Upstream error: 404"
    assert network.closed == [url]


def test_download_connection_failure_is_502(client):
    resp = client.get("/download", params={"url": "https://down.test/a.mp4"})
    assert resp.status_code == 502


@pytest.mark.parametrize("params", [{}, {"url": "ftp://cdn.test/a.mp4"}, {"url": "nope"}])
def test_download_rejects_invalid_url(client, params):
    resp = client.get("/download", params=params)
    assert resp.status_code == 400
    assert resp.text == "Invalid url"
