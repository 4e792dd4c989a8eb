# ABOUTME: Configuration settings for the Kanban Flow Game using Pydantic Settings.
# ABOUTME: Loads relay, client reconnection, logging and randomness options from the environment.

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    # Relay Server Configuration
    port: int = Field(
        default=8080,
        description="Port the relay server listens on"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Address the relay server binds to"
    )

    # Sync Client Configuration
    relay_url: str = Field(
        default="ws://localhost:8080",
        description="WebSocket URL clients connect to"
    )
    reconnect_delay_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Base reconnect delay, multiplied by the attempt number"
    )
    max_reconnect_attempts: int = Field(
        default=5,
        ge=0,
        description="Reconnect attempts before reporting the connection as lost"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_to_file: bool = Field(
        default=False,
        description="Also write rotating log files"
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for log files"
    )

    # Game Engine
    random_seed: int | None = Field(
        default=None,
        description="Seed for the engine random source (None = unseeded)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Singleton settings instance - lazy initialization to allow import without .env
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the singleton settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment"""
    global _settings
    _settings = None
