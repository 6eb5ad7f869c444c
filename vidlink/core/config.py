import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/125.0 Safari/537.36"
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """
    Process-level settings, read once at startup.

    Nothing here changes while the server runs; per-request values (such as
    the Twitch embed parent host) travel in a RequestContext instead.
    """
    host: str = "127.0.0.1"
    port: int = 8000
    request_timeout: float = 8.0
    user_agent: str = DEFAULT_USER_AGENT
    default_parent_host: str = "localhost"
    # Progressive YouTube downloads are switched off by policy.
    youtube_downloads: bool = False
    chunk_size: int = 64 * 1024
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "info"


def _env(name: str) -> Optional[str]:
    value = os.environ.get(f"VIDLINK_{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _as_bool(value: str) -> bool:
    return value.lower() in _TRUE_VALUES


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """
    Build Settings from VIDLINK_* environment variables.

    Args:
        env_file: Optional .env file loaded first. Variables already present
            in the environment win over the file.

    Raises:
        ValueError: If a numeric variable cannot be parsed.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    defaults = Settings()
    kwargs = {}

    if _env("HOST"):
        kwargs["host"] = _env("HOST")
    if _env("PORT"):
        kwargs["port"] = int(_env("PORT"))
    if _env("REQUEST_TIMEOUT"):
        timeout = float(_env("REQUEST_TIMEOUT"))
        if timeout <= 0:
            raise ValueError("VIDLINK_REQUEST_TIMEOUT must be positive")
        kwargs["request_timeout"] = timeout
    if _env("USER_AGENT"):
        kwargs["user_agent"] = _env("USER_AGENT")
    if _env("DEFAULT_PARENT_HOST"):
        kwargs["default_parent_host"] = _env("DEFAULT_PARENT_HOST")
    if _env("YOUTUBE_DOWNLOADS"):
        kwargs["youtube_downloads"] = _as_bool(_env("YOUTUBE_DOWNLOADS"))
    if _env("CHUNK_SIZE"):
        chunk_size = int(_env("CHUNK_SIZE"))
        if chunk_size <= 0:
            raise ValueError("VIDLINK_CHUNK_SIZE must be positive")
        kwargs["chunk_size"] = chunk_size
    if _env("CORS_ORIGINS"):
        kwargs["cors_origins"] = [o.strip() for o in _env("CORS_ORIGINS").split(",") if o.strip()]
    if _env("LOG_LEVEL"):
        kwargs["log_level"] = _env("LOG_LEVEL").lower()

    if not kwargs:
        return defaults
    return Settings(**kwargs)
