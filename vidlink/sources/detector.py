from typing import Optional
from urllib.parse import urlparse, ParseResult


def parse_url(url: str) -> Optional[ParseResult]:
    """Parse an http(s) URL with a hostname, or return None."""
    if not url or not isinstance(url, str):
        return None
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
        # raises on malformed netlocs such as a non-numeric port
        _ = parsed.port
    except ValueError:
        return None
    if parsed.scheme.lower() not in ("http", "https") or not hostname:
        return None
    return parsed


def is_http_url(url: str) -> bool:
    return parse_url(url) is not None


def is_valid_hostname(hostname: Optional[str], *domains: str) -> bool:
    """
    Match a hostname against an allow-list.

    A domain matches exactly, with a `www.` prefix, or as a proper parent
    domain (`m.youtube.com` matches `youtube.com`). `evil-youtube.com` and
    `youtube.com.evil.net` do not.
    """
    if not hostname:
        return False
    lower = hostname.lower().rstrip(".")
    for domain in domains:
        if lower == domain or lower == f"www.{domain}" or lower.endswith(f".{domain}"):
            return True
    return False


def url_matches(url: str, *domains: str) -> bool:
    parsed = parse_url(url)
    return parsed is not None and is_valid_hostname(parsed.hostname, *domains)


def path_parts(parsed: ParseResult) -> list:
    return [p for p in parsed.path.split("/") if p]
