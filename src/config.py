# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings loaded from the environment."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

OverlapPolicy = Literal["skip", "queue", "overlap"]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = "sqlite:///./currency_rates.db"
    log_level: str = "INFO"

    # Open Exchange Rates provider
    openexchangerates_base_url: str = "https://openexchangerates.org/api"
    openexchangerates_api_key: str = ""
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)

    # Refresh scheduling
    scheduler_enabled: bool = True
    refresh_interval_seconds: int = Field(default=3600, ge=1)
    refresh_overlap_policy: OverlapPolicy = "skip"
    refresh_max_workers: int = Field(default=4, ge=1)
    refresh_on_startup: bool = True


settings = Settings()
