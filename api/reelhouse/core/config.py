"""Application settings parsed from environment variables and defaults."""

import json
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
DEV_JWT_SECRET = "reelhouse-dev-secret"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "Reelhouse API"
    environment: str = "development"
    api_prefix: str = "/api"
    log_level: str = "INFO"
    cors_origins: list[str] | str = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.copy())

    document_backend: Literal["sql", "firestore"] = "sql"
    database_url: str = "sqlite+aiosqlite:///./reelhouse.db"
    test_database_url: Optional[str] = None
    firestore_project_id: Optional[str] = None

    storage_backend: Literal["local", "gcs"] = "local"
    storage_bucket: Optional[str] = None
    local_storage_dir: str = "./uploads"
    local_storage_base_url: str = "http://localhost:8000/uploads"
    signed_url_ttl_seconds: int = 15 * 60

    jwt_secret_key: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None

    feed_page_size: int = 5
    feed_max_page_size: int = 50
    related_shorts_limit: int = 10

    oembed_endpoint: str = "https://noembed.com/embed"
    oembed_timeout_seconds: float = 10.0

    placeholder_thumbnail_url: str = "https://placehold.co/1280x720.png"
    placeholder_poster_url: str = "https://placehold.co/400x600.png"
    placeholder_category_image_url: str = "https://placehold.co/400x300.png"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_cors_origins(cls, value: str | list[str] | None) -> list[str]:
        """Normalize CORS origins from JSON, CSV, or list inputs."""
        if isinstance(value, list):
            cleaned = [origin.strip() for origin in value if isinstance(origin, str) and origin.strip()]
            return cleaned or DEFAULT_CORS_ORIGINS.copy()
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return DEFAULT_CORS_ORIGINS.copy()
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                cleaned = [str(origin).strip() for origin in parsed if str(origin).strip()]
                if cleaned:
                    return cleaned
            origins = [origin.strip() for origin in stripped.split(",") if origin.strip()]
            if origins:
                return origins
        return DEFAULT_CORS_ORIGINS.copy()

    @model_validator(mode="after")
    def _validate_production_secrets(self) -> "Settings":
        """Refuse the development JWT secret outside of local environments."""
        if self.environment == "production" and self.jwt_secret_key == DEV_JWT_SECRET:
            msg = "JWT_SECRET_KEY must be set in production"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def _validate_backends(self) -> "Settings":
        """Ensure remote backends have the identifiers they need."""
        if self.storage_backend == "gcs" and not self.storage_bucket:
            raise ValueError("STORAGE_BUCKET must be set when STORAGE_BACKEND=gcs")
        if self.feed_page_size < 1 or self.feed_page_size > self.feed_max_page_size:
            raise ValueError("FEED_PAGE_SIZE must be between 1 and FEED_MAX_PAGE_SIZE")
        return self

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings to avoid re-parsing environment variables."""
    return Settings()


settings = get_settings()
