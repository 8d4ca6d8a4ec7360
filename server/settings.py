"""
Configuration settings for the suggest server.

Uses Pydantic Settings to load the refresh source, refresh interval, HTTP
endpoint and logging options from environment variables (or a `.env` file).
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Refresh source
    source: str = Field("json_source.json", alias="SUGGEST_SOURCE")
    refresh_interval_seconds: float = Field(60.0, gt=0, alias="SUGGEST_REFRESH_INTERVAL")
    source_timeout_seconds: float = Field(5.0, gt=0, alias="SUGGEST_SOURCE_TIMEOUT")

    # HTTP
    endpoint: str = Field("/v1/api/suggest", alias="SUGGEST_ENDPOINT")
    host: str = Field("0.0.0.0", alias="SUGGEST_HOST")
    port: int = Field(8080, alias="SUGGEST_PORT")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
