from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    promptsmith_env: Literal["local", "test", "prod"] = "local"
    promptsmith_log_level: str = "INFO"
    promptsmith_request_id_header: str = "X-Request-ID"

    # JSON document: {"models": [...]}. Takes precedence over models_config_path.
    models_config: str | None = None
    models_config_path: str | None = None

    # Outbound provider HTTP
    provider_timeout_seconds: float = 60.0
    provider_connect_timeout_seconds: float = 10.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
