"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from boneclone.utils.constants import DEFAULT_CONFIG_PATH


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # Path of the configuration file used when --config is not given
    BONECLONE_CONFIG: str = DEFAULT_CONFIG_PATH


settings = Settings()
