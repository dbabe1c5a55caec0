"""
Runtime configuration helpers for the SocialHub service.

Loads DATABASE_URL, the image host credentials and the other variables from
the environment, falling back to the .env file in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required; comes from the environment or .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="SocialHub", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")

    # Hosted image API (imgbb compatible)
    imgbb_api_key: str | None = Field(default=None, alias="IMGBB_API_KEY")
    imgbb_upload_url: str = Field(default="https://api.imgbb.com/1/upload", alias="IMGBB_UPLOAD_URL")
    imgbb_timeout: float = Field(default=30.0, alias="IMGBB_TIMEOUT")
    max_upload_bytes: int = Field(default=32 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    default_avatar_base_url: str = Field(
        default="https://api.dicebear.com/7.x/avataaars/svg",
        alias="DEFAULT_AVATAR_BASE_URL",
    )

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def get_cors_origins_list(self) -> list[str]:
        if not self.cors_origins:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
