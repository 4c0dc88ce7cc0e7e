"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `ANOMANET_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """AnomaNet settings.

    All fields are environment-configurable. Prefix is `ANOMANET_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="ANOMANET_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Document store
    storage_backend: Literal["memory", "filesystem", "redis"] = Field(default="filesystem")
    storage_dir: Path = Field(default=Path("data"))

    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_key_prefix: str = Field(default="anomanet")

    # Game rules
    max_active_cases: int = Field(default=3, ge=1, le=10)
    anonymous_entity_id: str = Field(default="anonymous")

    # Used when a request carries no X-User-Id header
    dev_user_id: str = Field(default="dev-user-00000000-0000-0000-0000-000000000000")


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("ANOMANET_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
