from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProgressiveStream:
    """A single muxed audio+video format served over plain http(s)."""
    url: str
    ext: str
    title: Optional[str] = None
    height: Optional[int] = None

    @property
    def content_type(self) -> str:
        return "video/webm" if self.ext == "webm" else "video/mp4"
