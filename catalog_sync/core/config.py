from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Catalog Sync API"
    database_url: str = Field(default="sqlite:///./catalog_sync.db")

    shopify_shop: str | None = None
    shopify_access_token: str | None = None
    shopify_api_version: str = "2025-07"
    shopify_timeout_seconds: float = 30.0
    shopify_page_size: int = 250

    # Comma separated, e.g. "http://localhost:5173,https://admin.example.com"
    cors_allowed_origins: str = ""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
