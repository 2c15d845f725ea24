"""Configuration for deckweave services, loaded from the environment."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from DECKWEAVE_* environment variables (or .env)."""

    model_config = SettingsConfigDict(
        env_prefix="DECKWEAVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    uploads_dir: Path = Field(default_factory=lambda: Path.cwd() / "uploads")

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Template analysis: theme, media and structure run side by side
    analysis_workers: int = 3

    # Document metadata
    author: str = "Auto PPT Generator"
    subject: str = "Generated Presentation"

    @property
    def images_dir(self) -> Path:
        return self.uploads_dir / "extracted_images"

    def ensure_dirs(self) -> None:
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        self.images_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
