"""Application configuration loaded from environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3", alias="TMDB_BASE_URL")
    tmdb_image_base: str = Field(default="https://image.tmdb.org/t/p", alias="TMDB_IMAGE_BASE")
    tmdb_language: str = Field(default="en-US", alias="TMDB_LANGUAGE")
    tmdb_timeout: float = Field(default=10.0, alias="TMDB_TIMEOUT")
    port: int = Field(default=7000, alias="PORT")
    catalog_mode: Literal["bulk", "live"] = Field(default="bulk", alias="CATALOG_MODE")
    catalog_max_pages: int = Field(default=10, ge=1, alias="CATALOG_MAX_PAGES")
    catalog_min_vote_count: int = Field(default=500, ge=0, alias="CATALOG_MIN_VOTE_COUNT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@dataclass(frozen=True)
class CredentialStatus:
    """Outcome of the startup credential check."""

    present: bool

    @property
    def message(self) -> str:
        if self.present:
            return "TMDB_API_KEY configured"
        return "TMDB_API_KEY is not set. Catalog and meta requests will return empty results."


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


def check_credentials(settings: Settings | None = None) -> CredentialStatus:
    settings = settings or get_settings()
    return CredentialStatus(present=bool((settings.tmdb_api_key or "").strip()))
