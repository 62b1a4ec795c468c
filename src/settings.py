"""
Central application configuration using pydantic-settings.

This module provides typed access to environment-based configuration for:
- Game rules that operators may tune (dice seed, win threshold, seats)
- The HTTP/WebSocket server

Database configuration lives in `src.data.config.DatabaseSettings`.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.game.config import MAX_PLAYERS, MIN_PLAYERS, WIN_NET_WORTH, GameConfig


class GameSettings(BaseSettings):
    """
    Tunable game rules.

    Environment variables (prefix: TICKER_):
        TICKER_DICE_SEED     - Seed for reproducible dice (default: random)
        TICKER_WIN_NET_WORTH - Net worth in cents that ends the game;
                               0 disables the check (default: 1500000)
        TICKER_MAX_PLAYERS   - Seats per room (default: 6)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="TICKER_",
    )

    dice_seed: Optional[int] = Field(default=None, description="Seed for the dice RNG.")
    win_net_worth: int = Field(
        default=WIN_NET_WORTH,
        ge=0,
        description="Net worth in cents that ends the game (0 disables).",
    )
    max_players: int = Field(default=MAX_PLAYERS, ge=MIN_PLAYERS, le=MAX_PLAYERS)

    def to_config(self) -> GameConfig:
        return GameConfig(
            max_players=self.max_players,
            win_net_worth=self.win_net_worth or None,
        )


class ServerSettings(BaseSettings):
    """
    Configuration for the API server.

    Environment variables:
        SERVER_HOST   - Bind address (default: 127.0.0.1)
        SERVER_PORT   - Port (default: 8000)
        LOG_LEVEL     - Root log level (default: INFO)
        CREATE_TABLES - Create the schema on startup instead of running
                        Alembic (default: true, development only)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    server_host: str = Field(default="127.0.0.1", alias="SERVER_HOST")
    server_port: int = Field(default=8000, alias="SERVER_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    create_tables: bool = Field(default=True, alias="CREATE_TABLES")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Optional[str]) -> str:
        return (value or "INFO").upper()


@lru_cache
def get_game_settings() -> GameSettings:
    """Return cached game settings instance."""
    return GameSettings()


@lru_cache
def get_server_settings() -> ServerSettings:
    """Return cached server settings instance."""
    return ServerSettings()
