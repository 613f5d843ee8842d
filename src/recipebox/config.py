"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix ``RECIPEBOX_``)."""

    model_config = SettingsConfigDict(
        env_prefix="RECIPEBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # URL import
    fetch_timeout: float = 10.0  # seconds before a page fetch is abandoned
    fetch_max_chars: int = 2_000_000  # longer pages are truncated
    fetch_user_agent: str = "Recipebox/1.0"

    # Uploads and OCR
    upload_max_bytes: int = 10 * 1024 * 1024
    ocr_language: str = "eng"
    ocr_max_width: int = 1600

    # Unit data; None means the bundled units.json
    unit_tables_path: Path | None = None

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
