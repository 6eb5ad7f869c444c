"""Tests for media discovery in HTML pages."""

from __future__ import annotations

import json

from vidlink.extractors.generic.extractor import (
    MAX_JSON_LD_DEPTH,
    collect_candidates,
    extract_media,
    find_content_url,
)

PAGE = "https://site.test/articles/clip.html"


def _page(head: str = "", body: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


def _ld(data) -> str:
    return f'<script type="application/ld+json">{json.dumps(data)}</script>'


# ---------------------------------------------------------------------------
# Selection policy
# ---------------------------------------------------------------------------

def test_progressive_beats_hls_regardless_of_position():
    html = _page(
        head='<meta name="twitter:player:stream" content="https://x.test/live.m3u8">'
             '<meta property="og:video:secure_url" content="https://x.test/a.mp4">',
    )
    media = extract_media(PAGE, html)
    assert media.url == "https://x.test/a.mp4"
    assert media.content_type == "video/mp4"
    assert media.is_hls is False


def test_hls_is_chosen_when_no_progressive_file():
    html = _page(head='<meta property="og:video" content="https://x.test/master.m3u8?token=1">')
    media = extract_media(PAGE, html)
    assert media.url == "https://x.test/master.m3u8?token=1"
    assert media.is_hls is True
    assert media.content_type == "application/x-mpegURL"


def test_first_candidate_when_no_known_extension():
    html = _page(
        head='<meta property="og:video:url" content="https://x.test/player?id=7">'
             '<meta property="og:video" content="https://x.test/other">',
    )
    media = extract_media(PAGE, html)
    assert media.url == "https://x.test/player?id=7"
    assert media.content_type is None
    assert media.is_hls is False


def test_webm_and_mov_types():
    webm = extract_media(PAGE, _page(body='<video src="/media/a.WEBM"></video>'))
    assert webm.content_type == "video/webm"
    mov = extract_media(PAGE, _page(body='<video src="/media/a.mov?dl=1"></video>'))
    assert mov.content_type == "video/quicktime"


def test_no_media_returns_none():
    assert extract_media(PAGE, _page(body="<p>nothing here</p>")) is None


def test_extraction_is_idempotent():
    html = _page(
        head='<meta property="og:video:secure_url" content="https://x.test/a.mp4">',
        body='<video><source src="https://x.test/b.m3u8"></video>',
    )
    assert extract_media(PAGE, html) == extract_media(PAGE, html)


# ---------------------------------------------------------------------------
# Candidate collection
# ---------------------------------------------------------------------------

def test_candidate_priority_order():
    html = _page(
        head=(
            '<link rel="preload" as="video" href="https://x.test/5">'
            '<meta name="twitter:player" content="https://x.test/4">'
            '<meta property="og:video" content="https://x.test/3">'
            '<meta property="og:video:url" content="https://x.test/2">'
            '<meta property="og:video:secure_url" content="https://x.test/1">'
        ),
        body=(
            '<video src="https://x.test/6"><source src="https://x.test/7"></video>'
            + _ld({"@type": "VideoObject", "contentUrl": "https://x.test/8"})
        ),
    )
    assert collect_candidates(PAGE, html) == [f"https://x.test/{i}" for i in range(1, 9)]


def test_relative_candidates_are_absolutized():
    html = _page(body='<video><source src="../media/clip.mp4"><source src="//cdn.test/b.mp4"></video>')
    assert collect_candidates(PAGE, html) == [
        "https://site.test/media/clip.mp4",
        "https://cdn.test/b.mp4",
    ]


def test_non_http_candidates_are_dropped():
    html = _page(body=(
        '<video src="blob:https://site.test/123">'
        '<source src="data:video/mp4;base64,AAAA">'
        '<source src="javascript:void(0)">'
        '<source src="  ">'
        '</video>'
    ))
    assert collect_candidates(PAGE, html) == []


def test_twitter_player_stream_value_attribute():
    html = _page(head='<meta name="twitter:player:stream" value="https://x.test/s.mp4">')
    assert collect_candidates(PAGE, html) == ["https://x.test/s.mp4"]


def test_malformed_json_ld_is_skipped():
    html = _page(body=(
        '<script type="application/ld+json">{not json</script>'
        + _ld({"video": {"contentUrl": "https://x.test/ok.mp4"}})
    ))
    assert collect_candidates(PAGE, html) == ["https://x.test/ok.mp4"]


# ---------------------------------------------------------------------------
# JSON-LD walk
# ---------------------------------------------------------------------------

def test_find_content_url_in_nested_arrays():
    data = {"@graph": [{"@type": "WebPage"}, {"video": [{"name": "x"}, {"contentUrl": "https://x.test/v.mp4"}]}]}
    assert find_content_url(data) == "https://x.test/v.mp4"


def test_find_content_url_ignores_non_string_values():
    data = {"contentUrl": 42, "child": {"contentUrl": "https://x.test/v.mp4"}}
    assert find_content_url(data) == "https://x.test/v.mp4"


def test_find_content_url_depth_limit():
    def nest(levels):
        node = {"contentUrl": "https://x.test/deep.mp4"}
        for _ in range(levels):
            node = {"child": node}
        return node

    assert find_content_url(nest(MAX_JSON_LD_DEPTH)) == "https://x.test/deep.mp4"
    assert find_content_url(nest(MAX_JSON_LD_DEPTH + 1)) is None


def test_find_content_url_scalars():
    assert find_content_url("https://x.test/a.mp4") is None
    assert find_content_url(None) is None
