from urllib.parse import parse_qs

from vidlink.sources.detector import is_http_url, is_valid_hostname, parse_url

SHIM_DOMAINS = ("facebook.com", "instagram.com")


def _unwrap_once(url: str) -> str:
    parsed = parse_url(url)
    if parsed is None:
        return url
    host = parsed.hostname.lower()
    # l.facebook.com/l.php?u=... and l.instagram.com/?u=...
    if not host.startswith("l.") or not is_valid_hostname(host, *SHIM_DOMAINS):
        return url
    target = parse_qs(parsed.query).get("u", [None])[0]
    if target and is_http_url(target):
        return target
    return url


def unwrap_redirect(url: str) -> str:
    """
    Resolve outbound link-shim URLs to their real destination.

    Nested shims are followed until the URL stops changing, so applying
    this to its own output is a no-op.

    Args:
        url: The input URL.

    Returns:
        The destination URL, or the input unchanged.
    """
    # every step yields a strictly shorter URL, so this terminates
    current = url
    while True:
        unwrapped = _unwrap_once(current)
        if unwrapped == current:
            return current
        current = unwrapped
