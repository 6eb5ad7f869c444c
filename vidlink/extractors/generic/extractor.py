"""
Media discovery in arbitrary HTML pages.

Candidates are collected from a fixed list of metadata locations, in
priority order, and a single one is chosen by extension: progressive files
first because they can be downloaded, HLS manifests second because they can
only be previewed.
"""
import json
import logging
import re
from typing import Any, List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from vidlink.core.entities import MediaCandidate

logger = logging.getLogger(__name__)

MAX_JSON_LD_DEPTH = 10

_PROGRESSIVE = re.compile(r"\.(mp4|webm|mov)(\?|$)", re.IGNORECASE)
_HLS = re.compile(r"\.m3u8(\?|$)", re.IGNORECASE)
_EXT_TYPES = {
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mov": "video/quicktime",
}
HLS_TYPE = "application/x-mpegURL"

# (attribute, value, content attribute), scanned in this order
_META_TAGS = (
    ("property", "og:video:secure_url", "content"),
    ("property", "og:video:url", "content"),
    ("property", "og:video", "content"),
    ("name", "twitter:player:stream", "content"),
    ("name", "twitter:player:stream", "value"),
    ("name", "twitter:player", "content"),
    ("property", "twitter:player", "content"),
)


def find_content_url(node: Any, depth: int = 0) -> Optional[str]:
    """
    Depth-first search for the first string `contentUrl` in parsed JSON-LD.

    Walks dicts and lists only; scalars end the branch. Nodes deeper than
    MAX_JSON_LD_DEPTH are not visited.
    """
    if depth > MAX_JSON_LD_DEPTH:
        return None
    if isinstance(node, dict):
        value = node.get("contentUrl")
        if isinstance(value, str) and value:
            return value
        children = node.values()
    elif isinstance(node, list):
        children = node
    else:
        return None
    for child in children:
        found = find_content_url(child, depth + 1)
        if found:
            return found
    return None


def _absolute(url: str, base: str) -> Optional[str]:
    url = url.strip()
    if not url:
        return None
    try:
        joined = urljoin(base, url)
        parsed = urlparse(joined)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return joined


def collect_candidates(page_url: str, html: str) -> List[str]:
    """Absolute http(s) media URLs found in the page, highest priority first."""
    soup = BeautifulSoup(html, "lxml")
    raw: List[str] = []

    def push(value):
        if isinstance(value, str) and value.strip():
            raw.append(value)

    for attr, name, content_attr in _META_TAGS:
        tag = soup.find("meta", attrs={attr: name})
        if tag is not None:
            push(tag.get(content_attr))

    for link in soup.find_all("link", rel="preload", attrs={"as": "video"}):
        push(link.get("href"))

    video = soup.find("video")
    if video is not None:
        push(video.get("src"))
    for source in soup.select("video source"):
        push(source.get("src"))

    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        text = script.string or script.get_text()
        if not text or not text.strip():
            continue
        try:
            data = json.loads(text)
        except ValueError:
            logger.debug("Skipping malformed JSON-LD block on %s", page_url)
            continue
        push(find_content_url(data))

    candidates = []
    for value in raw:
        absolute = _absolute(value, page_url)
        if absolute:
            candidates.append(absolute)
    return candidates


def select_candidate(candidates: List[str]) -> Optional[MediaCandidate]:
    for url in candidates:
        match = _PROGRESSIVE.search(url)
        if match:
            return MediaCandidate(url=url, content_type=_EXT_TYPES[match.group(1).lower()])
    for url in candidates:
        if _HLS.search(url):
            return MediaCandidate(url=url, content_type=HLS_TYPE, is_hls=True)
    if candidates:
        return MediaCandidate(url=candidates[0])
    return None


def extract_media(page_url: str, html: str) -> Optional[MediaCandidate]:
    """Pick the best media URL from a page, or None if it has none."""
    return select_candidate(collect_candidates(page_url, html))
