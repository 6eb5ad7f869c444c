import re
from typing import Optional

_VIDEO_HINT = re.compile(r"(mp4|webm|quicktime)", re.IGNORECASE)
_HLS_MIME = re.compile(r"application/(x-mpegurl|vnd\.apple\.mpegurl)", re.IGNORECASE)
_HLS_SUFFIX = re.compile(r"\.m3u8(\?|$)", re.IGNORECASE)


def is_video_content_type(value: Optional[str]) -> bool:
    """True for `video/*` types and anything naming mp4/webm/quicktime."""
    if not value:
        return False
    return value.lower().startswith("video/") or bool(_VIDEO_HINT.search(value))


def is_hls_content_type(value: Optional[str]) -> bool:
    """
    True for the two standard HLS MIME types.

    Also accepts a URL or path ending in `.m3u8` (optionally followed by a
    query string), so the same check works on candidate URLs.
    """
    if not value:
        return False
    return bool(_HLS_MIME.search(value) or _HLS_SUFFIX.search(value))
