from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from vidlink.core.entities import PageResponse, ProbeResult, UpstreamStream


class NetworkAdapter(ABC):
    @abstractmethod
    def head(self, url: str, timeout: Optional[float] = None) -> ProbeResult:
        """HEAD the URL. Never raises; returns ProbeResult.failed() on any error."""
        pass

    @abstractmethod
    def fetch_page(self, url: str, timeout: Optional[float] = None) -> Optional[PageResponse]:
        """GET the URL as a page. Returns None on network failure."""
        pass

    @abstractmethod
    def fetch_json(self, url: str, timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        """GET a JSON object. Returns None on failure, non-OK status or bad JSON."""
        pass

    @abstractmethod
    def open_stream(self, url: str, headers: Optional[Dict[str, str]] = None) -> UpstreamStream:
        """
        Open a streamed GET without reading the body.

        Raises:
            NetworkError: If the connection cannot be established.
        """
        pass
