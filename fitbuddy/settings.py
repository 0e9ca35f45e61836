from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Hosting environments define upper-case names (e.g. ``BACKEND_URL``).
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    api_key: str
    backend_url: str = "http://localhost:8080/api"
    backend_session_cookie: Optional[str] = None
    backend_timeout_seconds: float = 30.0
    companion_url: str = "http://localhost:8000"
    rest_timer_seconds: int = 30
    mapbox_token: str = ""
    tile_url_template: str = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
    tile_api_key: str = ""
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
