"""Configuration management for Assigner.

This module defines the configuration schema using Pydantic settings,
supporting TOML files, environment variables, and programmatic overrides.

Configuration loading priority (highest to lowest):
1. Environment variables (DB_*, SERVER_*, LOG_*, REVIEW_* prefixes)
2. TOML configuration file
3. Default values defined in this module

Example TOML configuration:
    [database]
    host = "db.internal"
    max_connections = 40

    [review]
    reviewer_quota = 1

Example environment variable override:
    DB_HOST=db.prod.internal
    DB_SSLMODE=verify-full
    SERVER_ADDR=:9090
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomli
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict
from sqlalchemy.engine import URL

VALID_SSL_MODES = ("disable", "require", "verify-full")


class DatabaseConfig(BaseSettings):
    """PostgreSQL connection and pool configuration.

    Attributes:
        host: Database server host name
        port: Database server port
        user: Database role used by the service
        password: Password for the database role
        name: Database name
        sslmode: SSL mode (disable, require, verify-full)
        url: Full SQLAlchemy URL; overrides the individual parts when set
        echo: Enable SQL query logging
        max_connections: Upper bound on open connections in the pool
        min_connections: Connections kept open while idle
        max_conn_lifetime_seconds: Connections older than this are recycled
        pool_timeout_seconds: How long a request waits for a free connection
        pool_pre_ping: Check a pooled connection is alive before handing it out
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="forbid",
    )

    host: str = Field(default="localhost")
    port: int = Field(default=5432, ge=1, le=65535)
    user: str = Field(default="assigner")
    password: str = Field(default="assigner")
    name: str = Field(default="assigner")
    sslmode: str = Field(default="disable")
    url: str | None = Field(default=None, description="Explicit SQLAlchemy URL")
    echo: bool = Field(default=False)

    max_connections: int = Field(default=25, ge=1, le=500)
    min_connections: int = Field(default=5, ge=1, le=500)
    max_conn_lifetime_seconds: int = Field(default=1800, ge=1)  # 30 min
    pool_timeout_seconds: int = Field(default=30, ge=1, le=600)
    pool_pre_ping: bool = Field(default=True)

    @field_validator("sslmode")
    @classmethod
    def validate_sslmode(cls, v: str) -> str:
        """Validate the SSL mode is one the driver understands."""
        v_lower = v.lower()
        if v_lower not in VALID_SSL_MODES:
            raise ValueError(f"Invalid sslmode: {v}. Must be one of {VALID_SSL_MODES}")
        return v_lower

    @model_validator(mode="after")
    def validate_pool_bounds(self) -> DatabaseConfig:
        """Ensure the idle floor does not exceed the pool ceiling."""
        if self.min_connections > self.max_connections:
            raise ValueError(
                f"min_connections ({self.min_connections}) must not exceed "
                f"max_connections ({self.max_connections})"
            )
        return self

    @property
    def dsn(self) -> str:
        """SQLAlchemy URL for the asyncpg driver."""
        if self.url:
            return self.url
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
        ).render_as_string(hide_password=False)


class ServerConfig(BaseSettings):
    """HTTP server configuration.

    Attributes:
        addr: Listen address in ``host:port`` form; an empty host binds all interfaces
        request_timeout_seconds: Upper bound on a single request's handling time
        idle_timeout_seconds: Keep-alive timeout for idle client connections
        shutdown_timeout_seconds: Grace period for draining requests on shutdown
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        extra="forbid",
    )

    addr: str = Field(default=":8080")
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=600)
    idle_timeout_seconds: int = Field(default=60, ge=1, le=3600)
    shutdown_timeout_seconds: int = Field(default=15, ge=0, le=600)

    @field_validator("addr")
    @classmethod
    def validate_addr(cls, v: str) -> str:
        """Validate the listen address has a numeric port."""
        _, sep, port = v.rpartition(":")
        if not sep or not port.isdigit() or not 1 <= int(port) <= 65535:
            raise ValueError(f"Invalid listen address: {v}. Expected host:port")
        return v

    @property
    def host(self) -> str:
        host = self.addr.rpartition(":")[0]
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        return int(self.addr.rpartition(":")[2])


class LoggingConfig(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json or console)
        file: Optional log file path (None for stdout only)
        rotation_size_mb: Log file rotation size in megabytes
        retention_count: Number of rotated log files to keep
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        extra="forbid",
    )

    level: str = Field(default="INFO")
    format: str = Field(default="json")
    file: Path | None = Field(default=None)
    rotation_size_mb: int = Field(default=50, ge=1, le=1000)
    retention_count: int = Field(default=10, ge=1, le=100)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format is recognized."""
        valid_formats = {"json", "console"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return v_lower


class ReviewConfig(BaseSettings):
    """Reviewer assignment configuration.

    Attributes:
        reviewer_quota: Number of reviewers auto-assigned when a PR is created
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_",
        extra="forbid",
    )

    reviewer_quota: int = Field(default=2, ge=0, le=2)


class AssignerConfig(BaseSettings):
    """Root configuration for Assigner.

    Aggregates all subsystem configurations. Each section reads its own
    environment prefix (``DB_``, ``SERVER_``, ``LOG_``, ``REVIEW_``).

    Example:
        DB_HOST=postgres
        REVIEW_REVIEWER_QUOTA=1
    """

    model_config = SettingsConfigDict(
        env_prefix="ASSIGNER_",
        extra="forbid",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)


_SECTIONS: dict[str, type[BaseSettings]] = {
    "database": DatabaseConfig,
    "server": ServerConfig,
    "logging": LoggingConfig,
    "review": ReviewConfig,
}


def _merge_section(section_cls: type[BaseSettings], file_values: dict[str, Any]) -> BaseSettings:
    """Build a config section with environment values layered over file values.

    Environment values are read raw and validated together with the file
    values, so cross-field checks see the merged result.
    """
    env_values = EnvSettingsSource(section_cls)()
    return section_cls(**{**file_values, **env_values})


def load_config(config_path: Path | None = None) -> AssignerConfig:
    """Load configuration from TOML file with environment variable overrides.

    Configuration search order (first found is used):
    1. config_path if explicitly provided
    2. ./assigner.toml (current directory)
    3. ~/.config/assigner/config.toml (user config directory)

    Args:
        config_path: Explicit path to TOML config file. If None, searches
                    default locations.

    Returns:
        AssignerConfig: Fully resolved configuration instance.

    Raises:
        FileNotFoundError: If config_path is explicitly provided but doesn't exist.
        ValueError: If the TOML file or environment contains invalid configuration.
    """
    toml_data: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        selected_path = config_path
    else:
        search_paths = [
            Path.cwd() / "assigner.toml",
            Path.home() / ".config" / "assigner" / "config.toml",
        ]
        selected_path = None
        for path in search_paths:
            if path.exists():
                selected_path = path
                break

    if selected_path is not None:
        with open(selected_path, "rb") as f:
            toml_data = tomli.load(f)

    try:
        unknown = set(toml_data) - set(_SECTIONS)
        if unknown:
            raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")
        sections = {
            name: _merge_section(section_cls, toml_data.get(name, {}))
            for name, section_cls in _SECTIONS.items()
        }
        return AssignerConfig(**sections)
    except Exception as e:
        if selected_path:
            raise ValueError(
                f"Invalid configuration in {selected_path}: {e}"
            ) from e
        else:
            raise ValueError(f"Invalid configuration: {e}") from e
