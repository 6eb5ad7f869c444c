import logging
from typing import Optional
from urllib.parse import quote

from .base import RequestContext

logger = logging.getLogger(__name__)

INSTAGRAM_OEMBED = "https://api.instagram.com/oembed/?url={url}"
FACEBOOK_OEMBED = "https://www.facebook.com/plugins/video/oembed.json/?url={url}"


def fetch_oembed_html(endpoint: str, url: str, context: RequestContext) -> Optional[str]:
    """Return the `html` field of an oEmbed response, or None."""
    data = context.network.fetch_json(endpoint.format(url=quote(url, safe="")),
                                      timeout=context.settings.request_timeout)
    html = data.get("html") if data else None
    if not isinstance(html, str) or not html.strip():
        logger.debug("oEmbed gave no markup for %s", url)
        return None
    return html
