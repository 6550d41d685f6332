"""Runtime configuration loaded from the environment (and an optional ``.env`` file)."""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    env: str = "development"
    log_level: str = "DEBUG"
    host: str = "0.0.0.0"
    port: int = 8080
    fetch_timeout: float = 10.0
    max_content_size: int = 10 * 1024 * 1024  # 10 MB
    max_redirects: int = 10
    user_agent: str = "PageZen/1.0 (+https://github.com/page-zen)"
    allow_private_addresses: bool = False
    save_debug_html: bool = True
    debug_html_path: str = "tmp/article.html"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    rate_limit: str = "30/minute"

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def load_settings() -> Settings:
    """Build :class:`Settings` from environment variables.

    ``LOG_LEVEL`` defaults to ``DEBUG`` in development and ``INFO`` when
    ``ENV=production``.
    """
    env = os.getenv("ENV", "development").strip().lower()
    default_level = "INFO" if env == "production" else "DEBUG"

    return Settings(
        env=env,
        log_level=os.getenv("LOG_LEVEL", default_level).strip().upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        fetch_timeout=float(os.getenv("FETCH_TIMEOUT", "10")),
        max_content_size=int(os.getenv("MAX_CONTENT_SIZE", str(10 * 1024 * 1024))),
        max_redirects=int(os.getenv("MAX_REDIRECTS", "10")),
        user_agent=os.getenv("USER_AGENT", Settings.user_agent),
        allow_private_addresses=_get_bool("ALLOW_PRIVATE_ADDRESSES", False),
        save_debug_html=_get_bool("SAVE_DEBUG_HTML", True),
        debug_html_path=os.getenv("DEBUG_HTML_PATH", "tmp/article.html"),
        cors_origins=_get_list("CORS_ORIGINS", "*"),
        rate_limit=os.getenv("RATE_LIMIT", "30/minute"),
    )


settings = load_settings()
