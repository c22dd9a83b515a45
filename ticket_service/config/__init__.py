"""
Configuration Module
====================

Application settings and configuration management using Pydantic.

Nothing here carries credentials: the data source section is read from
``DB_*`` environment variables (or a ``.env`` file) at process start.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class DatabaseSettings(BaseSettings):
    """
    Connection parameters for the ticket data source.

    Either set ``DB_URL`` to a full SQLAlchemy URL, or set the individual
    parts (driver, host, port, user, password, database).
    """

    name: str = Field(default="ticket", description="Data source name")
    driver: str = Field(
        default="postgresql+asyncpg",
        description="SQLAlchemy dialect+driver (async driver required)"
    )
    host: Optional[str] = Field(default="localhost", description="Database host")
    port: Optional[int] = Field(default=5432, description="Database port", ge=1, le=65535)
    user: Optional[str] = Field(default=None, description="Database user")
    password: Optional[SecretStr] = Field(default=None, description="Database password")
    database: str = Field(default="tickets", description="Database name")
    url: Optional[str] = Field(
        default=None,
        description="Full connection URL; overrides the individual parts"
    )

    pool_size: int = Field(default=5, description="Connection pool size", ge=1)
    max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)
    echo: bool = Field(default=False, description="Log emitted SQL")

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def sqlalchemy_url(self) -> URL:
        """Build the SQLAlchemy URL for the configured store."""
        if self.url:
            return make_url(self.url)

        if self.driver.startswith("sqlite"):
            return URL.create(self.driver, database=self.database)

        return URL.create(
            self.driver,
            username=self.user,
            password=self.password.get_secret_value() if self.password else None,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.sqlalchemy_url.get_backend_name() == "sqlite"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="ticket-service", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Echo SQL statements")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables on startup"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def datasource_settings(self) -> DatabaseSettings:
        """Database settings for the data source; debug mode turns on SQL echo."""
        if self.debug and not self.database.echo:
            return self.database.model_copy(update={"echo": True})
        return self.database


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()
