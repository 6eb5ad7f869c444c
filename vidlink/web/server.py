import logging
from typing import Optional
from urllib.parse import urlsplit

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool

from vidlink.app.media_service import MediaService
from vidlink.app.proxy_service import DownloadProxy
from vidlink.core.config import Settings
from vidlink.core.errors import InvalidUrlError, NetworkError, UpstreamStatusError
from vidlink.sources.detector import is_http_url

logger = logging.getLogger(__name__)

INVALID_URL = "Invalid url"


def request_host(request: Request) -> Optional[str]:
    """Host the browser used to reach us, honouring a reverse proxy."""
    forwarded = request.headers.get("x-forwarded-host")
    host = forwarded.split(",")[0].strip() if forwarded else request.headers.get("host")
    return host or None


def bare_hostname(host: Optional[str]) -> Optional[str]:
    """Strip the port from a Host header value ("example.com:3000" -> "example.com")."""
    if not host:
        return None
    try:
        return urlsplit(f"//{host}").hostname
    except ValueError:
        return None


class PreviewServer:
    """HTTP surface: /resolve for previews and /download for the streaming proxy."""

    def __init__(self, media_service: MediaService, proxy: DownloadProxy,
                 settings: Optional[Settings] = None):
        self.settings = settings or media_service.settings
        self.media_service = media_service
        self.proxy = proxy
        self.host = self.settings.host
        self.port = self.settings.port

        self.app = FastAPI(title="vidlink")
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
            expose_headers=["Content-Disposition"],
        )
        self._setup_routes()

    async def _resolve(self, request: Request, target: Optional[str]):
        if not target or not is_http_url(target):
            return JSONResponse({"error": INVALID_URL}, status_code=400)
        parent = bare_hostname(request_host(request))
        try:
            result = await run_in_threadpool(self.media_service.resolve, target, parent)
        except InvalidUrlError:
            return JSONResponse({"error": INVALID_URL}, status_code=400)
        return JSONResponse(result.to_dict())

    def _setup_routes(self):
        @self.app.get("/ping")
        async def ping():
            return {"status": "ok"}

        @self.app.get("/resolve")
        async def resolve_get(request: Request, url: Optional[str] = None):
            return await self._resolve(request, url)

        @self.app.post("/resolve")
        async def resolve_post(request: Request):
            try:
                body = await request.json()
            except ValueError:
                body = None
            target = body.get("url") if isinstance(body, dict) else None
            return await self._resolve(request, target if isinstance(target, str) else None)

        @self.app.get("/download")
        async def download(request: Request, url: Optional[str] = None):
            if not url or not is_http_url(url):
                return PlainTextResponse(INVALID_URL, status_code=400)
            try:
                proxied = await run_in_threadpool(self.proxy.open, url, request_host(request))
            except InvalidUrlError:
                return PlainTextResponse(INVALID_URL, status_code=400)
            except UpstreamStatusError as e:
                return PlainTextResponse(str(e), status_code=e.status_code)
            except NetworkError as e:
                logger.warning("Download of %s failed: %s", url, e)
                return PlainTextResponse("Upstream error: 502", status_code=502)
            return StreamingResponse(proxied.body, status_code=proxied.status_code,
                                     headers=proxied.headers)

    def run_server(self):
        config = uvicorn.Config(self.app, host=self.host, port=self.port,
                                log_level=self.settings.log_level)
        server = uvicorn.Server(config)
        logger.info("Serving on http://%s:%s", self.host, self.port)
        server.run()
