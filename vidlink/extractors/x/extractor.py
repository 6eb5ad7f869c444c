import re
from typing import Optional
from urllib.parse import quote

from vidlink.core.entities import Provider
from vidlink.sources.detector import parse_url, path_parts
from ..base import BaseExtractor, EMBED_ONLY_NOTICE, RequestContext
from ..result import ExtractResult

TWEET_EMBED = "https://platform.twitter.com/embed/Tweet.html?id={tweet_id}"
FALLBACK_EMBED = "https://twitframe.com/show?url={url}"

_TWEET_ID = re.compile(r"^\d{5,}$")


def tweet_id(url: str) -> Optional[str]:
    """Numeric id from /<user>/status/<id> or /<user>/statuses/<id>."""
    parsed = parse_url(url)
    if parsed is None:
        return None
    parts = path_parts(parsed)
    for i, part in enumerate(parts[:-1]):
        if part.lower() in ("status", "statuses"):
            candidate = parts[i + 1]
            return candidate if _TWEET_ID.match(candidate) else None
    return None


class XExtractor(BaseExtractor):
    """X / Twitter posts."""

    provider = Provider.X
    domains = ("twitter.com", "x.com")

    def extract(self, url: str, context: RequestContext) -> Optional[ExtractResult]:
        tid = tweet_id(url)
        if tid:
            embed = TWEET_EMBED.format(tweet_id=tid)
        else:
            embed = FALLBACK_EMBED.format(url=quote(url, safe=""))
        return ExtractResult(platform=self.provider, source_url=url, preview_url=embed,
                             notice=EMBED_ONLY_NOTICE)
