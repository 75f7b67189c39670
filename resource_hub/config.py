"""
Application settings.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables and an optional .env file.

    Environment variables:
        STORE_BACKEND - "memory" (default, local dev/tests) or "prisma"
        DATABASE_URL - PostgreSQL connection string used by Prisma
        GEMINI_API_KEY - API key for metadata inference
        SENTRY_DSN - Enables Sentry error tracking when set
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Resource Hub API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Catalog of learning resources with filtering and AI-assisted metadata"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: list[str] = Field(default_factory=lambda: ["*"])

    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = Field(default=0.1, ge=0.0, le=1.0)

    STORE_BACKEND: str = Field(default="memory", pattern="^(memory|prisma)$")
    DATABASE_URL: str | None = None

    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-2.0-flash"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
