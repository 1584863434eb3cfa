"""Application configuration for the rental back office."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    database_url: str = Field(default="sqlite:///./rentdar.db")
    database_echo: bool = Field(default=False)

    currency_code: str = Field(default="USD")
    user_name: str = Field(default="")
    timezone: str = Field(default="UTC")
    # 1 = Sunday ... 7 = Saturday, matching calendar grids that start on Sunday.
    first_weekday: int = Field(default=1, ge=1, le=7)

    # Stand-ins used by dashboard stats until real analytics exist.
    revenue_projection_nights: int = Field(default=20, ge=0)
    fallback_bookings: int = Field(default=4, ge=0)
    fallback_nights: int = Field(default=8, ge=0)
    placeholder_occupancy_rate: int = Field(default=86, ge=0, le=100)
    placeholder_revenue_trend: int = Field(default=12)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            parts = [item.strip() for item in value.split(",") if item.strip()]
            return parts
        return value

    @field_validator("currency_code", mode="before")
    @classmethod
    def _upper_currency(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
