import logging
import re
from typing import Optional
from urllib.parse import unquote

from vidlink.core.config import Settings
from vidlink.core.entities import DownloadTarget, Provider, ResolveResult
from vidlink.core.errors import InvalidUrlError
from vidlink.core.interfaces import NetworkAdapter
from vidlink.core.mime import is_hls_content_type, is_video_content_type
from vidlink.extractors.base import RequestContext
from vidlink.extractors.generic.extractor import extract_media
from vidlink.extractors.registry import ExtractorRegistry, default_registry
from vidlink.extractors.youtube.extractor import YouTubeExtractor
from vidlink.sources.detector import is_http_url, parse_url
from vidlink.sources.resolver import unwrap_redirect

logger = logging.getLogger(__name__)

HLS_NOTICE = "This is an HLS stream (.m3u8); it can be previewed but not downloaded as a single file."
NOT_VIDEO_NOTICE = "The link does not point to a playable video file."

DEFAULT_FILENAME = "video.mp4"
_HAS_EXTENSION = re.compile(r"\.\w{2,5}$")
_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]+')


def infer_filename(url: str) -> str:
    """Filename from the URL's last path segment, defaulting to video.mp4."""
    parsed = parse_url(url)
    if parsed is None:
        return DEFAULT_FILENAME
    name = sanitize_filename(unquote(parsed.path.rsplit("/", 1)[-1]))
    if not name:
        return DEFAULT_FILENAME
    if _HAS_EXTENSION.search(name):
        return name
    return f"{name}.mp4"


def sanitize_filename(name: Optional[str]) -> str:
    if not name:
        return ""
    cleaned = _UNSAFE_FILENAME.sub(" ", name)
    return re.sub(r"\s+", " ", cleaned).strip(" .")


class MediaService:
    """
    Service resolving user URLs into previews and download targets.

    RESPONSIBILITIES:
    - Orchestrate the "Unwrap -> Classify -> Probe/Scrape" pipeline.
    - Return a ResolveResult describing how the UI can preview the link.
    - It does NOT stream media bytes (see DownloadProxy).

    Every outbound call degrades to the next fallback on failure, so
    resolve() only raises for invalid input.
    """

    def __init__(self, network: NetworkAdapter, settings: Optional[Settings] = None,
                 registry: Optional[ExtractorRegistry] = None):
        self.network = network
        self.settings = settings or Settings()
        self.registry = registry or default_registry()

    def resolve(self, url: str, parent_host: Optional[str] = None) -> ResolveResult:
        """
        Main entry point for resolving a URL.

        Args:
            url: The user-supplied http(s) URL.
            parent_host: Host of the page that will embed the preview.

        Raises:
            InvalidUrlError: If the URL is not http(s).
        """
        if not is_http_url(url):
            raise InvalidUrlError("Invalid url")

        original_url = url
        target = unwrap_redirect(url)
        if target != url:
            logger.debug("Unwrapped %s -> %s", url, target)

        context = RequestContext(
            parent_host=parent_host or self.settings.default_parent_host,
            settings=self.settings,
            network=self.network,
        )

        result = (self._from_extractors(target, original_url, context)
                  or self._probe_direct(target, original_url)
                  or self._scrape_page(target, original_url))
        if result is None:
            result = ResolveResult(provider=Provider.UNKNOWN, original_url=original_url,
                                   notice="No playable media was found at this address.")

        logger.info("Resolved %s as %s (downloadable=%s)", original_url,
                    result.provider.value, result.downloadable)
        return result

    def _from_extractors(self, target: str, original_url: str,
                         context: RequestContext) -> Optional[ResolveResult]:
        for extractor in self.registry.candidates(target):
            extracted = extractor.extract(target, context)
            if extracted is None:
                continue
            return ResolveResult(
                provider=extracted.platform,
                original_url=original_url,
                preview_url=extracted.preview_url,
                content_type=extracted.content_type,
                downloadable=extracted.downloadable,
                embed_html=extracted.embed_html,
                notice=None if extracted.downloadable else extracted.notice,
            )
        return None

    def _direct(self, media_url: str, original_url: str, content_type: Optional[str],
                hls_hint: bool = False) -> ResolveResult:
        hls = hls_hint or is_hls_content_type(content_type) or is_hls_content_type(media_url)
        downloadable = not hls and is_video_content_type(content_type)
        notice = None
        if hls:
            notice = HLS_NOTICE
        elif not downloadable:
            notice = NOT_VIDEO_NOTICE
        return ResolveResult(
            provider=Provider.DIRECT,
            original_url=original_url,
            preview_url=media_url,
            content_type=content_type or None,
            downloadable=downloadable,
            is_hls=hls,
            notice=notice,
        )

    def _probe_direct(self, target: str, original_url: str) -> Optional[ResolveResult]:
        probe = self.network.head(target, timeout=self.settings.request_timeout)
        if not probe.ok:
            logger.debug("HEAD %s inconclusive (HTTP %s)", target, probe.status)
            return None
        if is_video_content_type(probe.content_type) or is_hls_content_type(probe.content_type):
            return self._direct(target, original_url, probe.content_type)
        return None

    def _scrape_page(self, target: str, original_url: str) -> Optional[ResolveResult]:
        page = self.network.fetch_page(target, timeout=self.settings.request_timeout)
        if page is None:
            return None
        if not 200 <= page.status < 300:
            logger.debug("GET %s returned HTTP %s", target, page.status)
            return None

        if "text/html" not in page.content_type.lower():
            # Not a page: the URL itself is the artifact, whatever it is
            return self._direct(target, original_url, page.content_type)

        candidate = extract_media(page.url, page.text)
        if candidate is None:
            logger.debug("No media candidates in %s", target)
            return None

        probe = self.network.head(candidate.url, timeout=self.settings.request_timeout)
        content_type = probe.content_type or candidate.content_type
        return self._direct(candidate.url, original_url, content_type, hls_hint=candidate.is_hls)

    def resolve_download_target(self, url: str) -> DownloadTarget:
        """
        Resolve the URL the proxy should fetch and the filename to offer.

        Plain media URLs are fetched as-is. When YouTube downloads are
        enabled, a YouTube link is swapped for its progressive stream and
        named after the video title.

        Raises:
            InvalidUrlError: If the URL is not http(s).
        """
        if not is_http_url(url):
            raise InvalidUrlError("Invalid url")

        if self.settings.youtube_downloads:
            extractor = self.registry.get(Provider.YOUTUBE)
            if isinstance(extractor, YouTubeExtractor) and extractor.supports(url):
                stream = extractor.resolve_progressive_stream(url)
                if stream is not None:
                    title = sanitize_filename(stream.title) or "video"
                    return DownloadTarget(url=stream.url, filename=f"{title}.{stream.ext}")

        return DownloadTarget(url=url, filename=infer_filename(url))
