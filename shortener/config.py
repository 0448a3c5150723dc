"""Configuration management for the URL shortener application.

This module provides centralized configuration management using Pydantic BaseSettings
with environment variable support and caching for performance.

Flow Diagram - get_settings()
=============================
::
    ┌─────────────┐
    │  Call get_  │
    │  settings() │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check cache  │
    │ (lru_cache)  │
    └──────┬──────┘
    HIT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ Create  │  │ Return  │
│ Settings│  │ cached  │
│ instance│  │ value   │
└─────────┘  └─────────┘

How to Use
===========
**Step 1 - Import**::
    from shortener.config import get_settings

**Step 2 - Get settings**::
    settings = get_settings()
    port = settings.PORT

**Step 3 - Override from the environment**::
    PORT=9000 LOG_LEVEL=DEBUG shortener

Key Behaviours
===============
- Settings are cached after first access.
- Environment variables override defaults automatically.
- An empty ``PORT`` falls back to the default 8080.
- Invalid values raise pydantic's ValidationError at load time.

Classes:
    Settings:  Pydantic model for all configuration values.

"""

__all__ = ["DEFAULT_PORT", "Settings", "get_settings"]

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 8080


class Settings(BaseSettings):
    APP_NAME: str = "url-shortener"

    # Listen port; the server always binds all interfaces
    PORT: int = DEFAULT_PORT

    LOG_LEVEL: str = "INFO"

    # Short code generation
    SHORT_CODE_MAX_ATTEMPTS: int = Field(default=10, ge=1)

    # Index page
    RECENT_MAPPINGS_LIMIT: int = Field(default=10, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    @field_validator("PORT", mode="before")
    @classmethod
    def default_empty_port(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return DEFAULT_PORT
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()
