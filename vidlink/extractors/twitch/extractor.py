from typing import Optional
from urllib.parse import quote, urlencode

from vidlink.core.entities import Provider
from vidlink.sources.detector import is_valid_hostname, parse_url, path_parts
from ..base import BaseExtractor, EMBED_ONLY_NOTICE, RequestContext
from ..result import ExtractResult

CLIP_EMBED = "https://clips.twitch.tv/embed"
PLAYER = "https://player.twitch.tv/"


def _embed(base: str, key: str, value: str, parent: str) -> str:
    # Twitch rejects embeds whose parent does not match the hosting page
    query = urlencode([(key, value), ("parent", parent), ("autoplay", "false")], quote_via=quote)
    return f"{base}?{query}"


def twitch_embed_url(url: str, parent_host: str) -> Optional[str]:
    """
    Build the official player URL for a clip, VOD or live channel.

    Returns None for Twitch URLs without a usable path (e.g. the home page).
    """
    parsed = parse_url(url)
    if parsed is None or not is_valid_hostname(parsed.hostname, "twitch.tv"):
        return None
    parts = path_parts(parsed)

    if is_valid_hostname(parsed.hostname, "clips.twitch.tv"):
        return _embed(CLIP_EMBED, "clip", parts[0], parent_host) if parts else None

    if len(parts) >= 2 and parts[0] == "videos":
        return _embed(PLAYER, "video", parts[1], parent_host)
    if len(parts) >= 3 and parts[1] == "clip":
        return _embed(CLIP_EMBED, "clip", parts[2], parent_host)
    if parts:
        return _embed(PLAYER, "channel", parts[0], parent_host)
    return None


class TwitchExtractor(BaseExtractor):
    """Twitch clips, VODs and live channels."""

    provider = Provider.TWITCH
    domains = ("twitch.tv",)

    def extract(self, url: str, context: RequestContext) -> Optional[ExtractResult]:
        embed = twitch_embed_url(url, context.parent_host)
        if not embed:
            return None
        return ExtractResult(platform=self.provider, source_url=url, preview_url=embed,
                             notice=EMBED_ONLY_NOTICE)
