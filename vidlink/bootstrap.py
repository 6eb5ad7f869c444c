from typing import Optional

from vidlink.app.media_service import MediaService
from vidlink.app.proxy_service import DownloadProxy
from vidlink.core.config import Settings, load_settings
from vidlink.extractors.registry import default_registry
from vidlink.infra.network.http import HttpNetworkAdapter


def create_container(settings: Optional[Settings] = None) -> dict:
    # 1. Config
    settings = settings or load_settings()

    # 2. Infra
    network = HttpNetworkAdapter(
        user_agent=settings.user_agent,
        timeout=settings.request_timeout,
        chunk_size=settings.chunk_size,
    )

    # 3. Services
    media_service = MediaService(network, settings=settings, registry=default_registry())
    proxy = DownloadProxy(network, media_service)

    return {
        "settings": settings,
        "network": network,
        "media_service": media_service,
        "proxy": proxy,
    }


def create_app(settings: Optional[Settings] = None):
    """ASGI application factory (`uvicorn --factory vidlink.bootstrap:create_app`)."""
    from vidlink.web.server import PreviewServer

    container = create_container(settings)
    return PreviewServer(container["media_service"], container["proxy"], container["settings"]).app
