"""Outbox settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

import re
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared_kernel.outbox.value_objects import OutboxTableNames

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        OUTBOX_DB_HOST: Database host (default: localhost)
        OUTBOX_DB_PORT: Database port (default: 5432)
        OUTBOX_DB_DATABASE: Database name (default: outbox)
        OUTBOX_DB_USERNAME: Database user (default: outbox)
        OUTBOX_DB_PASSWORD: Database password (required in production)
        OUTBOX_DB_POOL_SIZE: Connections kept in the engine pool (default: 5)
        OUTBOX_DB_ECHO: Log every SQL statement (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="OUTBOX_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="outbox", description="Database name")
    username: str = Field(default="outbox", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_size: int = Field(
        default=5,
        description="Connections kept in the engine pool",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log SQL statements")


class OutboxSettings(BaseSettings):
    """Outbox table layout and publishing behaviour.

    Environment variables:
        OUTBOX_TABLE_NAME: Outbox table (default: outbox)
        OUTBOX_ID_COLUMN: Primary key column (default: id)
        OUTBOX_DESTINATION_COLUMN: Topic column (default: destination)
        OUTBOX_HEADERS_COLUMN: Encoded headers column (default: headers)
        OUTBOX_MESSAGE_COLUMN: Payload column (default: message)
        OUTBOX_SERVICE_NAME_HEADER: Header compared by the test harness
            (default: grpc-service)
        OUTBOX_PUBLISH_ISOLATION_LEVEL: Isolation of publish transactions
            (default: READ COMMITTED)
        OUTBOX_PUBLISH_MAX_ATTEMPTS: Attempts for a retryable publish (default: 3)
    """

    model_config = SettingsConfigDict(
        env_prefix="OUTBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    table_name: str = Field(default="outbox", description="Outbox table name")
    id_column: str = Field(default="id", description="Primary key column")
    destination_column: str = Field(
        default="destination", description="Destination column"
    )
    headers_column: str = Field(default="headers", description="Headers column")
    message_column: str = Field(default="message", description="Payload column")
    service_name_header: str = Field(
        default="grpc-service",
        description="Header identifying the producing service",
        min_length=1,
    )
    publish_isolation_level: str | None = Field(
        default="READ COMMITTED",
        description="Isolation level for publish transactions (None keeps the engine default)",
    )
    publish_max_attempts: int = Field(
        default=3,
        description="Attempts for a publish transaction that hits a retryable error",
        ge=1,
        le=10,
    )

    @field_validator(
        "table_name",
        "id_column",
        "destination_column",
        "headers_column",
        "message_column",
    )
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        """Table and column names must be plain SQL identifiers."""
        if not _IDENTIFIER.match(value):
            raise ValueError(f"{value!r} is not a valid SQL identifier")
        return value

    def table_names(self) -> OutboxTableNames:
        """Return the configured table layout as a value object."""
        return OutboxTableNames(
            table_name=self.table_name,
            id_column=self.id_column,
            destination_column=self.destination_column,
            headers_column=self.headers_column,
            message_column=self.message_column,
        )


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_outbox_settings() -> OutboxSettings:
    """Get cached outbox settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return OutboxSettings()
