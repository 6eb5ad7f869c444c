from html import escape
from typing import Optional
from urllib.parse import quote

from vidlink.core.entities import Provider
from vidlink.sources.detector import url_matches
from ..base import BaseExtractor, EMBED_ONLY_NOTICE, RequestContext
from ..oembed import FACEBOOK_OEMBED, fetch_oembed_html
from ..result import ExtractResult

PLUGIN_URL = "https://www.facebook.com/plugins/video.php?href={href}&show_text=false&height=360&width=560"

IFRAME_TEMPLATE = (
    '<iframe src="{src}" '
    'style="border:none; overflow:hidden; width:100%; height:100%;" '
    'scrolling="no" frameborder="0" allowfullscreen="true" '
    'allow="autoplay; clipboard-write; encrypted-media; picture-in-picture; web-share">'
    '</iframe>'
)


def facebook_embed_url(url: str) -> Optional[str]:
    # The video plugin accepts videos, reels and fb.watch links alike
    if not url_matches(url, "facebook.com", "fb.watch"):
        return None
    return PLUGIN_URL.format(href=quote(url, safe=""))


def facebook_embed_html(url: str) -> Optional[str]:
    embed = facebook_embed_url(url)
    if not embed:
        return None
    return IFRAME_TEMPLATE.format(src=escape(embed, quote=True))


class FacebookExtractor(BaseExtractor):
    """Facebook video plugin, with oEmbed markup preferred when available."""

    provider = Provider.FACEBOOK
    domains = ("facebook.com", "fb.watch")

    def extract(self, url: str, context: RequestContext) -> Optional[ExtractResult]:
        preview = facebook_embed_url(url)
        if not preview:
            return None

        oembed = None
        # fb.watch short links are not accepted by the oEmbed endpoint
        if url_matches(url, "facebook.com"):
            oembed = fetch_oembed_html(FACEBOOK_OEMBED, url, context)

        return ExtractResult(
            platform=self.provider,
            source_url=url,
            preview_url=preview,
            embed_html=oembed or facebook_embed_html(url),
            notice=EMBED_ONLY_NOTICE,
        )
