"""Provider configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``LOCAL_STORAGE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage root; falls back to the package directory when unset
    base_path: Path | None = None

    # Pre-signed URLs (HmacUrlSigner)
    signing_base_url: str = "http://localhost:8000/storage"
    signing_secret_key: str = "change-me-in-production"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience accessor
settings = get_settings()
