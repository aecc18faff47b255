"""Access Layer Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - API base URLs are normalized: no trailing slash, always ending in /api
    - Channel timeouts are fixed per channel, per attempt (not cumulative)
    - get_settings() is cached (lru_cache) - single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - TRILINGO_ env prefix: the host app's own variables never collide with ours
    - Production default targets the CDN-fronted origin; uploads need direct_api_base_url
"""

import json
from functools import lru_cache
from typing import Annotated
from urllib.parse import urlsplit

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from trilingo_access.core.retry_policy import RetryPolicy

DEFAULT_API_BASE_URL = "https://d3v81eez8ecmto.cloudfront.net/api"

# Placeholders left in .env templates; treated as "not configured"
_PLACEHOLDER_MARKERS = ("NEW_IP", "YOUR_IP")


def normalize_api_url(url: str) -> str:
    """Strip trailing slash and make sure the URL ends with /api."""
    trimmed = url.strip().rstrip("/")
    return trimmed if trimmed.endswith("/api") else f"{trimmed}/api"


def is_placeholder_url(url: str | None) -> bool:
    return not url or not url.strip() or any(m in url for m in _PLACEHOLDER_MARKERS)


def url_host(url: str) -> str:
    return (urlsplit(url).hostname or "").lower()


class Settings(BaseSettings):
    """Access layer settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TRILINGO_",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend
    api_base_url: str = DEFAULT_API_BASE_URL
    # Origin that bypasses the CDN (uploads only)
    direct_api_base_url: str | None = None
    cdn_host_suffixes: Annotated[list[str], NoDecode] = ["cloudfront.net"]
    fallback_api_urls: Annotated[list[str], NoDecode] = []
    user_agent: str = "trilingo-access/1.0"

    @field_validator("api_base_url", mode="before")
    @classmethod
    def normalize_base_url(cls, v: str) -> str:
        if isinstance(v, str) and not is_placeholder_url(v):
            return normalize_api_url(v)
        return DEFAULT_API_BASE_URL

    @field_validator("direct_api_base_url", mode="before")
    @classmethod
    def normalize_direct_url(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not is_placeholder_url(v):
            return normalize_api_url(v)
        return None

    @field_validator("fallback_api_urls", mode="before")
    @classmethod
    def normalize_fallback_urls(cls, v: list[str] | str) -> list[str]:
        if isinstance(v, str):
            v = json.loads(v) if v.lstrip().startswith("[") else v.split(",")
        return [normalize_api_url(u) for u in v if not is_placeholder_url(u)]

    @field_validator("cdn_host_suffixes", mode="before")
    @classmethod
    def split_cdn_suffixes(cls, v: list[str] | str) -> list[str]:
        if isinstance(v, str):
            v = json.loads(v) if v.lstrip().startswith("[") else v.split(",")
        return [s.strip().lower().lstrip(".") for s in v if s.strip()]

    # Timeouts (seconds, per attempt)
    request_timeout_seconds: float = 30.0
    upload_timeout_seconds: float = 30.0
    diagnostics_timeout_seconds: float = 5.0
    fallback_timeout_seconds: float = 3.0

    # Retry
    read_max_retries: int = 2
    write_max_retries: int = 3
    upload_max_retries: int = 0
    retry_base_delay_ms: int = 1000
    retry_max_delay_ms: int = 60_000
    retry_jitter_ratio: float = 0.0

    # Writes carry one Idempotency-Key per logical call, reused across retries
    idempotency_keys_enabled: bool = True

    # Local storage
    storage_url: str = "sqlite+aiosqlite:///trilingo_local.db"
    credential_key: str = "authToken"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @model_validator(mode="after")
    def check_retry_bounds(self) -> "Settings":
        for name in ("read_max_retries", "write_max_retries", "upload_max_retries"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if not 0.0 <= self.retry_jitter_ratio < 1.0:
            raise ValueError("retry_jitter_ratio must be in [0.0, 1.0)")
        return self

    @property
    def read_policy(self) -> RetryPolicy:
        return self._policy(self.read_max_retries)

    @property
    def write_policy(self) -> RetryPolicy:
        return self._policy(self.write_max_retries)

    @property
    def upload_policy(self) -> RetryPolicy:
        return self._policy(self.upload_max_retries)

    def _policy(self, max_retries: int) -> RetryPolicy:
        return RetryPolicy(
            max_retries=max_retries,
            base_delay_ms=self.retry_base_delay_ms,
            max_delay_ms=self.retry_max_delay_ms,
            jitter_ratio=self.retry_jitter_ratio,
        )

    def is_cdn_url(self, url: str) -> bool:
        host = url_host(url)
        return any(
            host == s or host.endswith("." + s) for s in self.cdn_host_suffixes
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
