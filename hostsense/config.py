"""Configuration management for hostsense."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HOSTSENSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_to_file: bool = False
    log_dir: str = "data/logs"

    # HTTP Server Configuration
    host: str = "127.0.0.1"
    port: int = 8765

    # Collaborator Configuration
    command_timeout: int = 10
    http_timeout: float = 10.0
    weather_base_url: str = "https://wttr.in"
    user_agent: str = f"hostsense/{__version__}"

    # Bluetooth discovery window, in seconds
    ble_scan_seconds: int = 3

    # Interval between the two CPU samples used for usage percentages
    cpu_sample_interval: float = 0.2


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
