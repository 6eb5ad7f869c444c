from typing import Iterator, List, Optional

from vidlink.core.entities import Provider
from .base import BaseExtractor


class ExtractorRegistry:
    """
    Registry for managing available provider extractors.

    Lookup order is registration order.
    """

    def __init__(self):
        self._extractors: List[BaseExtractor] = []

    def register(self, extractor: BaseExtractor):
        """Register an extractor instance."""
        if self.get(extractor.provider) is not None:
            raise ValueError(f"Extractor for {extractor.provider.value} already registered")
        self._extractors.append(extractor)

    def get(self, provider: Provider) -> Optional[BaseExtractor]:
        for extractor in self._extractors:
            if extractor.provider is provider:
                return extractor
        return None

    def candidates(self, url: str) -> Iterator[BaseExtractor]:
        """Yield every extractor that supports the URL, in order."""
        for extractor in self._extractors:
            if extractor.supports(url):
                yield extractor


def default_registry() -> ExtractorRegistry:
    from vidlink.extractors.instagram.extractor import InstagramExtractor
    from vidlink.extractors.youtube.extractor import YouTubeExtractor
    from vidlink.extractors.facebook.extractor import FacebookExtractor
    from vidlink.extractors.twitch.extractor import TwitchExtractor
    from vidlink.extractors.x.extractor import XExtractor

    registry = ExtractorRegistry()
    for extractor in (InstagramExtractor(), YouTubeExtractor(), FacebookExtractor(),
                      TwitchExtractor(), XExtractor()):
        registry.register(extractor)
    return registry
