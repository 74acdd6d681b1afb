"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini API (API_KEY is the name the browser build used)
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "api_key"),
    )
    gemini_model: str = "gemini-2.5-flash-image-preview"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"

    # Transport timeout for the model call; no retries are made
    api_timeout_seconds: int = 120

    # File upload
    max_upload_bytes: int = 10 * 1024 * 1024

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
