"""Application configuration objects."""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pydantic settings used to configure the application."""

    model_config = SettingsConfigDict(
        env_prefix="APEX_INVENTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = Field(
        default="Apex Inventory",
        description="Human friendly name for the app.",
    )
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment; production logs timestamps to the console.",
    )
    storage_path: Path = Field(
        default=Path("inventory_data.json"),
        description="Location of the JSON snapshot holding items and the activity log.",
    )
    max_log_entries: int = Field(
        default=10,
        ge=1,
        description="Number of activity log entries kept, newest first.",
    )
    low_stock_threshold: int = Field(
        default=10,
        ge=1,
        description="Quantities below this value (and above zero) count as low stock.",
    )
    log_level: str = Field(default="INFO", description="Level name for the app logger.")
    log_file: Optional[Path] = Field(
        default=None,
        description="Optional rotating log file in addition to console output.",
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"Unknown log level '{value}'")
        return normalized


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of :class:`Settings`."""

    return Settings()


__all__ = ["Settings", "get_settings"]
