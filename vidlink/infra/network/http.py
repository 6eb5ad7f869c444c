import logging
from typing import Any, Callable, Dict, Iterator, Optional

import requests

from vidlink.core.config import DEFAULT_USER_AGENT
from vidlink.core.entities import PageResponse, ProbeResult, UpstreamStream
from vidlink.core.errors import NetworkError
from vidlink.core.interfaces import NetworkAdapter

logger = logging.getLogger(__name__)

PAGE_ACCEPT = "text/html,application/xhtml+xml"
PROBE_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"


class HttpNetworkAdapter(NetworkAdapter):
    """
    Outbound HTTP on top of `requests`.

    A fresh Session is used per call so concurrent requests share no
    connection state. Every method except open_stream swallows transport
    errors and reports them as an absent/failed result.
    """

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, timeout: float = 8.0,
                 chunk_size: int = 64 * 1024,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self.user_agent = user_agent
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._session_factory = session_factory

    def _browser_headers(self, accept: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent, "Accept": accept}
        if extra:
            for k, v in extra.items():
                # Host and Content-Length belong to the transport
                if k.lower() in ("host", "content-length"):
                    continue
                headers[k] = v
        return headers

    def head(self, url: str, timeout: Optional[float] = None) -> ProbeResult:
        try:
            with self._session_factory() as s:
                resp = s.head(url, headers=self._browser_headers(PROBE_ACCEPT),
                              allow_redirects=True, timeout=timeout or self.timeout)
                return ProbeResult(ok=resp.ok, status=resp.status_code,
                                   content_type=resp.headers.get("Content-Type"))
        except requests.exceptions.RequestException as e:
            logger.debug("HEAD %s failed: %s", url, e)
            return ProbeResult.failed()

    def fetch_page(self, url: str, timeout: Optional[float] = None) -> Optional[PageResponse]:
        """
        GET a page, reading the body only when it is HTML.

        Non-HTML responses come back with an empty `text` so a media file
        behind a server that rejects HEAD is never pulled into memory.
        """
        try:
            with self._session_factory() as s:
                resp = s.get(url, headers=self._browser_headers(PAGE_ACCEPT),
                             allow_redirects=True, stream=True, timeout=timeout or self.timeout)
                try:
                    content_type = resp.headers.get("Content-Type", "")
                    text = resp.text if "text/html" in content_type.lower() else ""
                finally:
                    resp.close()
                return PageResponse(url=resp.url or url, status=resp.status_code,
                                    content_type=content_type, text=text)
        except requests.exceptions.RequestException as e:
            logger.debug("GET %s failed: %s", url, e)
            return None

    def fetch_json(self, url: str, timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        try:
            with self._session_factory() as s:
                resp = s.get(url, headers=self._browser_headers("application/json"),
                             timeout=timeout or self.timeout)
                if not resp.ok:
                    logger.debug("GET %s returned HTTP %s", url, resp.status_code)
                    return None
                data = resp.json()
        except requests.exceptions.RequestException as e:
            logger.debug("GET %s failed: %s", url, e)
            return None
        except ValueError:
            logger.debug("GET %s returned invalid JSON", url)
            return None
        return data if isinstance(data, dict) else None

    def open_stream(self, url: str, headers: Optional[Dict[str, str]] = None) -> UpstreamStream:
        s = self._session_factory()
        try:
            # No read timeout: the body streams for as long as upstream sends it
            resp = s.get(url, headers=self._browser_headers("*/*", headers),
                         allow_redirects=True, stream=True,
                         timeout=(self.timeout, None))
        except requests.exceptions.RequestException as e:
            s.close()
            raise NetworkError(f"Connection failed: {e}") from e

        def close():
            resp.close()
            s.close()

        return UpstreamStream(
            status_code=resp.status_code,
            headers={k.lower(): v for k, v in resp.headers.items()},
            chunks=self._iter_body(resp),
            close=close,
        )

    def _iter_body(self, resp: requests.Response) -> Iterator[bytes]:
        for chunk in resp.iter_content(chunk_size=self.chunk_size):
            if chunk:
                yield chunk
