"""
Database configuration using pydantic-settings.

Handles environment variables and provides type-safe config access,
including basic validation of connection URLs and secrets.
"""

import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ASYNC_SCHEMES = ("postgresql+asyncpg://", "sqlite+aiosqlite://")
SYNC_SCHEMES = ("postgresql://", "sqlite://")


def _check_default_password(name: str, url: str) -> None:
    # Basic secret hygiene: disallow default password outside debug environments.
    debug_env = os.getenv("DEBUG", "").lower() in {"1", "true", "yes"}
    if "ticker_pass" in url and not debug_env:
        raise ValueError(
            f"{name} is using the default 'ticker_pass' password. "
            "Change it in production or set DEBUG."
        )


class DatabaseSettings(BaseSettings):
    """
    Database configuration loaded from environment variables.

    Env vars:
    - DATABASE_URL: async connection string (postgresql+asyncpg://... or
      sqlite+aiosqlite://... for local development)
    - DATABASE_URL_SYNC: sync connection string for Alembic
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Async URL (runtime)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./stock_ticker.db",
        description="Async database connection URL",
    )

    # Sync URL for Alembic migrations
    database_url_sync: str = Field(
        default="sqlite:///./stock_ticker.db",
        description="Sync database connection URL for migrations",
    )

    # Connection pool settings (PostgreSQL only)
    db_pool_size: int = Field(default=20, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_timeout: int = Field(default=30, ge=1, le=120)
    db_pool_recycle: int = Field(default=3600, ge=60)

    # Echo SQL queries (debug)
    db_echo: bool = Field(default=False)

    # Application settings
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    @field_validator("database_url")
    @classmethod
    def validate_async_url(cls, v: str) -> str:
        """Ensure async URL uses an async driver."""
        if not v.startswith(ASYNC_SCHEMES):
            raise ValueError(
                "DATABASE_URL must use postgresql+asyncpg:// or sqlite+aiosqlite:// scheme"
            )
        _check_default_password("DATABASE_URL", v)
        return v

    @field_validator("database_url_sync")
    @classmethod
    def validate_sync_url(cls, v: str) -> str:
        """Ensure sync URL uses a standard driver."""
        if not v.startswith(SYNC_SCHEMES):
            raise ValueError("DATABASE_URL_SYNC must use postgresql:// or sqlite:// scheme")
        _check_default_password("DATABASE_URL_SYNC", v)
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def get_engine_kwargs(self) -> dict:
        """Return SQLAlchemy engine configuration."""
        return engine_kwargs_for(self.database_url, self)


def engine_kwargs_for(database_url: str, settings: DatabaseSettings) -> dict:
    """Engine options for a URL. SQLite pools do not accept sizing options."""
    if database_url.startswith("sqlite"):
        return {"echo": settings.db_echo}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "echo": settings.db_echo,
        "pool_pre_ping": True,  # Verify connections before using
    }


@lru_cache
def get_settings() -> DatabaseSettings:
    """
    Cached settings singleton.

    Returns the same DatabaseSettings instance across the application.
    """
    return DatabaseSettings()
