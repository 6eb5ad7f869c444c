import logging
from typing import Optional
from urllib.parse import parse_qs

from vidlink.core.entities import Provider
from vidlink.sources.detector import is_valid_hostname, parse_url, path_parts
from ..base import BaseExtractor, EMBED_ONLY_NOTICE, RequestContext
from ..result import ExtractResult
from .models import ProgressiveStream

logger = logging.getLogger(__name__)

EMBED_URL = "https://www.youtube.com/embed/{video_id}"
# /shorts/<id>, /embed/<id>, /live/<id>
_PATH_PREFIXES = ("shorts", "embed", "live")
_PROGRESSIVE_EXTS = ("mp4", "webm")


def youtube_video_id(url: str) -> Optional[str]:
    parsed = parse_url(url)
    if parsed is None:
        return None
    if is_valid_hostname(parsed.hostname, "youtu.be"):
        parts = path_parts(parsed)
        return parts[0] if parts else None
    if not is_valid_hostname(parsed.hostname, "youtube.com"):
        return None
    video_id = parse_qs(parsed.query).get("v", [None])[0]
    if video_id:
        return video_id
    parts = path_parts(parsed)
    if len(parts) >= 2 and parts[0].lower() in _PATH_PREFIXES:
        return parts[1]
    return None


def youtube_embed_url(url: str) -> Optional[str]:
    video_id = youtube_video_id(url)
    return EMBED_URL.format(video_id=video_id) if video_id else None


class YouTubeExtractor(BaseExtractor):
    """YouTube embed extractor.

    Progressive downloads are off unless `Settings.youtube_downloads` is set;
    only then is yt-dlp asked for a muxed http(s) format.
    """

    provider = Provider.YOUTUBE
    domains = ("youtube.com", "youtu.be")

    def extract(self, url: str, context: RequestContext) -> Optional[ExtractResult]:
        embed = youtube_embed_url(url)
        if not embed:
            return None

        if not context.settings.youtube_downloads:
            return ExtractResult(platform=self.provider, source_url=url, preview_url=embed,
                                 notice=EMBED_ONLY_NOTICE)

        stream = self.resolve_progressive_stream(url)
        if stream is None:
            return ExtractResult(platform=self.provider, source_url=url, preview_url=embed,
                                 notice="No progressive format is available for this video.")
        return ExtractResult(platform=self.provider, source_url=url, preview_url=embed,
                             downloadable=True, content_type=stream.content_type)

    def resolve_progressive_stream(self, url: str) -> Optional[ProgressiveStream]:
        """Ask yt-dlp for the tallest muxed format served over http(s)."""
        import yt_dlp

        ydl_opts = {
            'quiet': True,
            'no_warnings': True,
            'skip_download': True,
            'noplaylist': True,
        }
        try:
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                info = ydl.extract_info(url, download=False)
        except yt_dlp.utils.YoutubeDLError as e:
            logger.warning("yt-dlp could not read %s: %s", url, e)
            return None

        if not info:
            return None

        progressive = [
            f for f in info.get('formats') or []
            if f.get('url')
            and f.get('vcodec') not in (None, 'none')
            and f.get('acodec') not in (None, 'none')
            and f.get('protocol') in ('http', 'https')
            and f.get('ext') in _PROGRESSIVE_EXTS
        ]
        if not progressive:
            return None

        best = max(progressive, key=lambda f: f.get('height') or 0)
        return ProgressiveStream(
            url=best['url'],
            ext=best['ext'],
            title=info.get('title'),
            height=best.get('height'),
        )
