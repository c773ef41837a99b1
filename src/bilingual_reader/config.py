"""Configuration management for Bilingual Reader."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BILINGUAL_",
    )

    # Paths
    output_dir: Path = Field(default=Path("data/chapters"))
    catalog_file: Path = Field(default=Path("data/books.json"))

    # Language pair written into artifacts when the source omits it
    source_language: str = Field(default="English")
    target_language: str = Field(default="Chinese")

    log_level: str = Field(default="WARNING", description="Root log level for the CLI")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
