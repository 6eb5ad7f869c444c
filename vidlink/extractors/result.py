from dataclasses import dataclass
from typing import Optional

from vidlink.core.entities import Provider


@dataclass(frozen=True)
class ExtractResult:
    """
    Unified result contract for all provider extractors.

    Describes how to preview a platform URL. It carries no media bytes;
    `downloadable` stays False unless the extractor found a progressive
    file the proxy can fetch directly.
    """
    platform: Provider
    source_url: str
    preview_url: Optional[str] = None
    embed_html: Optional[str] = None
    downloadable: bool = False
    content_type: Optional[str] = None
    notice: Optional[str] = None
