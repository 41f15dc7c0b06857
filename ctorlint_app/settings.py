"""
ctorlint Server Settings

Configuration management using pydantic settings.
Loads from environment variables with CTORLINT_ prefix.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Server configuration settings.

    Environment variables:
    - CTORLINT_CONFIG_PATH: Engine config file (YAML) used for every request (optional)
    - CTORLINT_DEBUG: Enable debug mode (default: false)
    - CTORLINT_MAX_REQUEST_FILES: Max files accepted by /validate (default: 200)
    - CTORLINT_HOST / CTORLINT_PORT: Bind address for the ctorlint-server command
    """

    model_config = SettingsConfigDict(
        env_prefix="CTORLINT_",
        env_file=".env",
        extra="ignore",
    )

    config_path: Optional[str] = None

    debug: bool = False

    max_request_files: int = 200

    host: str = "127.0.0.1"
    port: int = 8000


# Global settings instance
settings = Settings()
