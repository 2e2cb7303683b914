"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ---------------- DATABASE ----------------
    database_url: str = "sqlite+aiosqlite:///./urbanstay.db"
    database_timeout_seconds: float = 10.0
    database_echo: bool = False

    # ---------------- AUTH ----------------
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7

    # ---------------- APP ----------------
    app_name: str = "UrbanStay API"
    app_version: str = "1.0.0"
    debug: bool = False
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:5174"]

    # ---------------- LISTINGS ----------------
    search_page_size: int = 12
    seller_page_size: int = 10
    admin_page_size: int = 50
    max_page_size: int = 100
    featured_limit: int = 8
    similar_limit: int = 6
    featured_default_days: int = 30

    # ---------------- ALERTS ----------------
    alert_match_limit: int = 20
    max_active_alerts: int = 10

    # ---------------- CLIENT ----------------
    api_base_url: str = "http://localhost:8000"
    client_timeout_seconds: float = 10.0
    client_connect_timeout_seconds: float = 5.0

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
