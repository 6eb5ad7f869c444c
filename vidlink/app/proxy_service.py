import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional
from urllib.parse import quote

from vidlink.core.entities import UpstreamStream
from vidlink.core.errors import UpstreamStatusError
from vidlink.core.interfaces import NetworkAdapter
from .media_service import DEFAULT_FILENAME, MediaService

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class ProxyResponse:
    headers: Dict[str, str]
    body: Iterator[bytes]
    filename: str = DEFAULT_FILENAME
    status_code: int = 200


def content_disposition(filename: str) -> str:
    """attachment header with an ASCII fallback and an RFC 5987 filename*."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "").strip()
    if not ascii_name:
        ascii_name = "video.mp4"
    elif ascii_name.startswith("."):
        # only the extension survived
        ascii_name = "video" + ascii_name
    header = f'attachment; filename="{ascii_name}"'
    if ascii_name != filename:
        header += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return header


def relay(upstream: UpstreamStream) -> Iterator[bytes]:
    """Yield upstream chunks as they arrive; close upstream however iteration ends."""
    sent = 0
    try:
        for chunk in upstream.chunks:
            sent += len(chunk)
            yield chunk
    finally:
        upstream.close()
        logger.debug("Relay closed after %d bytes", sent)


class DownloadProxy:
    """
    Streams a remote media file back to the caller as an attachment.

    The body is never buffered server-side; bytes flow through as they
    arrive and the upstream connection is closed once the consumer stops.
    """

    def __init__(self, network: NetworkAdapter, media_service: MediaService):
        self.network = network
        self.media_service = media_service

    def open(self, url: str, origin_host: Optional[str] = None) -> ProxyResponse:
        """
        Open the upstream download for a validated URL.

        Args:
            url: http(s) URL supplied by the caller.
            origin_host: The proxy's own host; some CDNs refuse requests
                without a matching Origin.

        Raises:
            InvalidUrlError: If the URL is not http(s).
            NetworkError: If upstream cannot be reached.
            UpstreamStatusError: If upstream answers with a non-OK status.
        """
        target = self.media_service.resolve_download_target(url)

        headers = {}
        if origin_host:
            headers["Origin"] = f"https://{origin_host}"

        upstream = self.network.open_stream(target.url, headers=headers)
        if not upstream.ok:
            upstream.close()
            logger.info("Upstream %s answered HTTP %s", target.url, upstream.status_code)
            raise UpstreamStatusError(upstream.status_code)

        response_headers = {
            "content-type": upstream.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
            "content-disposition": content_disposition(target.filename),
            "cache-control": "no-store",
        }
        if upstream.headers.get("content-length"):
            response_headers["content-length"] = upstream.headers["content-length"]

        logger.info("Proxying %s as %s", target.url, target.filename)
        return ProxyResponse(headers=response_headers, body=relay(upstream), filename=target.filename)
