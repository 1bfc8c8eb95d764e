"""Application configuration and constants."""
from __future__ import annotations

import os
from dataclasses import dataclass


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


@dataclass(frozen=True)
class Settings:
    """Simple settings container with environment variable overrides."""

    upstream_url: str = _get_env("UPSTREAM_URL", "https://dummyjson.com/products/search")
    upstream_timeout_seconds: float = float(_get_env("UPSTREAM_TIMEOUT_SECONDS", "5.0"))
    host: str = _get_env("HOST", "0.0.0.0")
    port: int = int(_get_env("PORT", "3055"))
    log_level: str = _get_env("LOG_LEVEL", "INFO")


settings = Settings()
