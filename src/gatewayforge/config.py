from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GATEWAYFORGE_", env_file=".env", extra="ignore"
    )

    rest_api_name: str = Field(default="this", min_length=1)
    strict_identifiers: bool = False
    log_level: str = "WARNING"
    highlight: bool = True


def get_settings() -> Settings:
    return Settings()
