"""Runtime defaults, overridable through ``TYPEDOC_OPENAPI_*`` environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Defaults for the CLI; command line options take precedence."""

    model_config = SettingsConfigDict(
        env_prefix="TYPEDOC_OPENAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"
    openapi_version: str = "3.0.3"
    output_format: Literal["json", "yaml"] = "json"
    indent: int = 2


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
