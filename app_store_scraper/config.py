"""Runtime settings, read from the environment or a local .env file."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Scraper settings from APP_STORE_SCRAPER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APP_STORE_SCRAPER_",
        env_file=".env",
        extra="ignore",
    )

    country: str = "us"
    lang: Optional[str] = None

    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    accept: str = (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    )
    accept_language: str = "en-US,en;q=0.9"

    # Seconds; None disables the timeout
    timeout: Optional[float] = 30.0
    # Requests per second; None disables throttling
    throttle: Optional[int] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
