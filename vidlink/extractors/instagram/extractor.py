from html import escape
from typing import Optional

from vidlink.core.entities import Provider
from vidlink.sources.detector import is_valid_hostname, parse_url, path_parts
from ..base import BaseExtractor, EMBED_ONLY_NOTICE, RequestContext
from ..oembed import INSTAGRAM_OEMBED, fetch_oembed_html
from ..result import ExtractResult

EMBED_KINDS = ("p", "reel", "tv")

# Rendered client-side by Instagram's embed.js
BLOCKQUOTE_TEMPLATE = (
    '<blockquote class="instagram-media" data-instgrm-permalink="{permalink}" '
    'data-instgrm-version="14" style="background:#FFF; border:0; border-radius:12px; '
    'box-shadow:0 1px 10px rgba(0,0,0,0.08); margin: 0 auto; max-width:540px; '
    'min-width: 326px; width:100%;">'
    '<div style="padding:16px;">'
    '<a href="{permalink}" target="_blank" rel="noopener noreferrer" '
    'style="color:#3897f0; text-decoration:none;">View on Instagram</a>'
    '</div>'
    '</blockquote>'
)


def normalize_permalink(url: str) -> Optional[str]:
    """
    Canonical https://www.instagram.com/<kind>/<id>/ form of a post URL.

    Only posts, reels and IGTV paths can be embedded; anything else
    (profiles, stories, explore) returns None.
    """
    parsed = parse_url(url)
    if parsed is None or not is_valid_hostname(parsed.hostname, "instagram.com"):
        return None
    parts = path_parts(parsed)
    if len(parts) < 2:
        return None
    kind = parts[0].lower()
    if kind not in EMBED_KINDS:
        return None
    return f"https://www.instagram.com/{kind}/{parts[1]}/"


def instagram_embed_html(url: str) -> Optional[str]:
    permalink = normalize_permalink(url)
    if not permalink:
        return None
    return BLOCKQUOTE_TEMPLATE.format(permalink=escape(permalink, quote=True))


class InstagramExtractor(BaseExtractor):
    """Instagram posts, reels and IGTV."""

    provider = Provider.INSTAGRAM
    domains = ("instagram.com",)

    def extract(self, url: str, context: RequestContext) -> Optional[ExtractResult]:
        embed_html = instagram_embed_html(url)
        if embed_html is None:
            # oEmbed may still refuse without an access token
            embed_html = fetch_oembed_html(INSTAGRAM_OEMBED, url, context)
        return ExtractResult(platform=self.provider, source_url=url, embed_html=embed_html,
                             notice=EMBED_ONLY_NOTICE)
