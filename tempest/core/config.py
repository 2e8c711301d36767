from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Largest payload a single UDP datagram can carry over IPv4.
MAX_UDP_PAYLOAD = 65507


def default_database_url() -> str:
    """
    Return the default SQLite URL, stored under the user's home directory.
    """
    return f"sqlite+aiosqlite:///{Path.home() / '.tempest' / 'weather.db3'}"


class Settings(BaseSettings):
    """
    Application configuration settings.

    This class loads configuration values from environment variables
    and optionally from a `.env` file. It uses Pydantic Settings
    to provide type validation and default values.

    Environment variables take precedence over `.env` values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ---------------------------------------------------------------------
    # Application settings
    # ---------------------------------------------------------------------

    app_name: str = Field(
        default="tempest",
        alias="APP_NAME",
        description="Application name displayed in logs and API documentation",
    )

    environment: str = Field(
        default="local",
        alias="ENVIRONMENT",
        description="Runtime environment (local, dev, prod)",
    )

    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ---------------------------------------------------------------------
    # Database settings
    # ---------------------------------------------------------------------

    database_url: str = Field(
        default_factory=default_database_url,
        alias="DATABASE_URL",
        description="SQLAlchemy async connection URL for the observation store",
    )

    # ---------------------------------------------------------------------
    # UDP listener settings
    # ---------------------------------------------------------------------

    listen_host: str = Field(
        default="0.0.0.0",
        alias="LISTEN_HOST",
        description="Interface the hub broadcasts are received on",
    )

    listen_port: int = Field(
        default=50222,
        ge=1,
        le=65535,
        alias="LISTEN_PORT",
        description="UDP port the weather station hub broadcasts to",
    )

    max_datagram_size: int = Field(
        default=MAX_UDP_PAYLOAD,
        ge=1,
        le=MAX_UDP_PAYLOAD,
        alias="MAX_DATAGRAM_SIZE",
        description="Receive buffer size for a single datagram",
    )


# Singleton settings instance
settings = Settings()
