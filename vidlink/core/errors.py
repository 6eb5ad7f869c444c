from typing import Optional


class VidlinkError(Exception):
    """Base class for errors raised by vidlink."""


class InvalidUrlError(VidlinkError, ValueError):
    """The URL is missing, unparsable, or not http(s)."""


class NetworkError(VidlinkError):
    """Connection to an upstream host failed or timed out."""


class UpstreamStatusError(VidlinkError):
    """Upstream answered with a non-OK status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code or 502
        super().__init__(message or f"Upstream error: {self.status_code}")
