from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from vidlink.core.config import Settings
from vidlink.core.entities import Provider
from vidlink.core.interfaces import NetworkAdapter
from vidlink.sources.detector import url_matches
from .result import ExtractResult

EMBED_ONLY_NOTICE = "This platform only allows playback through its embedded player."


@dataclass(frozen=True)
class RequestContext:
    """Per-request values handed to extractors."""
    parent_host: str
    settings: Settings
    network: NetworkAdapter


class BaseExtractor(ABC):
    """
    Abstract base class for all provider extractors.

    One subclass per platform. Extractors map a URL to an embeddable
    preview; they never stream media themselves.

    CRITICAL BOUNDARIES:
    - `supports` is a pure hostname check and must not raise.
    - `extract` may call oEmbed endpoints through the context's network
      adapter, but a failed call degrades to a smaller result, never an
      exception.
    """

    provider: Provider
    domains: tuple = ()

    def supports(self, url: str) -> bool:
        """
        Check if this extractor owns the given URL's hostname.

        Args:
            url: The URL to check.

        Returns:
            True if supported, False otherwise.
        """
        return url_matches(url, *self.domains)

    @abstractmethod
    def extract(self, url: str, context: RequestContext) -> Optional[ExtractResult]:
        """
        Build the preview for a supported URL.

        Returns:
            ExtractResult, or None when the URL belongs to the platform but
            has no embeddable shape (the caller falls through to generic
            handling).
        """
        pass
