from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, Optional


class Provider(Enum):
    YOUTUBE = "youtube"
    FACEBOOK = "facebook"
    TWITCH = "twitch"
    X = "x"
    INSTAGRAM = "instagram"
    DIRECT = "direct"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ResolveResult:
    """
    Outcome of resolving a single user-supplied URL.

    Built once per request and never mutated afterwards. `downloadable` is
    True only for a directly fetchable progressive file; embeds and HLS
    manifests are previewable but not downloadable.
    """
    provider: Provider
    original_url: str
    preview_url: Optional[str] = None
    content_type: Optional[str] = None
    downloadable: bool = False
    is_hls: Optional[bool] = None
    embed_html: Optional[str] = None
    notice: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "provider": self.provider.value,
            "previewUrl": self.preview_url,
            "originalUrl": self.original_url,
            "downloadable": self.downloadable,
        }
        optional = {
            "contentType": self.content_type,
            "isHls": self.is_hls,
            "embedHtml": self.embed_html,
            "notice": self.notice,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class MediaCandidate:
    """A media URL picked out of a page's HTML."""
    url: str
    content_type: Optional[str] = None
    is_hls: bool = False


@dataclass(frozen=True)
class ProbeResult:
    ok: bool
    status: int
    content_type: Optional[str] = None

    @classmethod
    def failed(cls) -> "ProbeResult":
        return cls(ok=False, status=0, content_type=None)


@dataclass(frozen=True)
class PageResponse:
    url: str
    status: int
    content_type: str
    text: str


@dataclass
class UpstreamStream:
    """
    An open upstream response whose body has not been read yet.

    `chunks` must be consumed lazily; `close` releases the connection and
    must be called whether or not the body was read to the end.
    """
    status_code: int
    headers: Dict[str, str]
    chunks: Iterator[bytes]
    close: Callable[[], None] = field(default=lambda: None)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class DownloadTarget:
    url: str
    filename: str
