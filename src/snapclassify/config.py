"""Environment-based configuration for SnapClassify."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from SNAPCLASSIFY_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SNAPCLASSIFY_",
        case_sensitive=False,
    )

    # Client
    base_url: str = "http://localhost:8001/"
    timeout: float = Field(default=30.0, gt=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Reference server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8001
    labels: list[str] = Field(
        default_factory=lambda: [
            "rosa-canina",
            "bellis-perennis",
            "taraxacum-officinale",
            "trifolium-repens",
            "papaver-rhoeas",
        ]
    )
    top_k: int = Field(default=3, ge=1)
    max_concurrent: int = Field(default=2, ge=1)
    acquire_timeout: float = Field(default=5.0, gt=0)
    max_file_size: int = Field(default=20_971_520, ge=1)


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
