"""Unit tests for configuration management.

Tests cover:
- Default configuration values
- Listen address and SSL mode validation
- TOML file loading
- Environment variable overrides
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from assigner.config import (
    AssignerConfig,
    DatabaseConfig,
    LoggingConfig,
    ReviewConfig,
    ServerConfig,
    load_config,
)

_ENV_VARS = [
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "DB_SSLMODE",
    "DB_URL",
    "DB_MIN_CONNECTIONS",
    "DB_MAX_CONNECTIONS",
    "SERVER_ADDR",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "REVIEW_REVIEWER_QUOTA",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the caller's environment and config files."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


class TestDatabaseConfig:
    """Test DatabaseConfig defaults and validation."""

    def test_default_values(self) -> None:
        config = DatabaseConfig()
        assert config.host == "localhost"
        assert config.port == 5432
        assert config.user == "assigner"
        assert config.name == "assigner"
        assert config.sslmode == "disable"
        assert config.max_connections == 25
        assert config.min_connections == 5
        assert config.max_conn_lifetime_seconds == 1800
        assert config.pool_pre_ping is True

    def test_dsn_from_parts(self) -> None:
        config = DatabaseConfig(host="db", port=6543, user="svc", password="p@ss", name="prs")
        assert config.dsn == "postgresql+asyncpg://svc:p%40ss@db:6543/prs"

    def test_explicit_url_wins(self) -> None:
        config = DatabaseConfig(url="postgresql+asyncpg://other/db", host="ignored")
        assert config.dsn == "postgresql+asyncpg://other/db"

    @pytest.mark.parametrize("mode", ["disable", "require", "verify-full", "REQUIRE"])
    def test_valid_sslmodes(self, mode: str) -> None:
        assert DatabaseConfig(sslmode=mode).sslmode == mode.lower()

    def test_invalid_sslmode(self) -> None:
        with pytest.raises(ValidationError, match="Invalid sslmode"):
            DatabaseConfig(sslmode="prefer")

    def test_min_connections_cannot_exceed_max(self) -> None:
        with pytest.raises(ValidationError, match="must not exceed"):
            DatabaseConfig(min_connections=10, max_connections=5)

    def test_port_range(self) -> None:
        with pytest.raises(ValidationError):
            DatabaseConfig(port=0)
        with pytest.raises(ValidationError):
            DatabaseConfig(port=65536)


class TestServerConfig:
    """Test ServerConfig defaults and address parsing."""

    def test_default_values(self) -> None:
        config = ServerConfig()
        assert config.addr == ":8080"
        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.request_timeout_seconds == 10.0
        assert config.idle_timeout_seconds == 60
        assert config.shutdown_timeout_seconds == 15

    def test_explicit_host(self) -> None:
        config = ServerConfig(addr="127.0.0.1:9090")
        assert config.host == "127.0.0.1"
        assert config.port == 9090

    @pytest.mark.parametrize("addr", ["8080", "localhost:", ":http", ":70000"])
    def test_invalid_addr(self, addr: str) -> None:
        with pytest.raises(ValidationError, match="Invalid listen address"):
            ServerConfig(addr=addr)


class TestLoggingConfig:
    def test_level_is_normalized(self) -> None:
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="verbose")

    def test_invalid_format(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")


class TestReviewConfig:
    def test_default_quota(self) -> None:
        assert ReviewConfig().reviewer_quota == 2

    def test_quota_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ReviewConfig(reviewer_quota=3)
        with pytest.raises(ValidationError):
            ReviewConfig(reviewer_quota=-1)


class TestLoadConfig:
    """Test TOML configuration loading."""

    def test_defaults_when_no_file(self) -> None:
        config = load_config()
        assert isinstance(config, AssignerConfig)
        assert config.database.host == "localhost"
        assert config.server.addr == ":8080"

    def test_explicit_path_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "missing.toml")

    def test_load_from_toml_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            """
[database]
host = "db.internal"
max_connections = 40

[server]
addr = "0.0.0.0:9000"

[review]
reviewer_quota = 1
"""
        )

        config = load_config(config_file)
        assert config.database.host == "db.internal"
        assert config.database.max_connections == 40
        assert config.database.port == 5432
        assert config.server.port == 9000
        assert config.review.reviewer_quota == 1

    def test_search_current_directory(self, tmp_path: Path) -> None:
        (tmp_path / "assigner.toml").write_text('[database]\nname = "from_cwd"\n')

        assert load_config().database.name == "from_cwd"

    def test_search_user_config_directory(self, tmp_path: Path) -> None:
        config_dir = tmp_path / ".config" / "assigner"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text('[logging]\nlevel = "ERROR"\n')

        assert load_config().logging.level == "ERROR"

    def test_environment_overrides_toml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[database]\nhost = "from_file"\nport = 6000\n')
        monkeypatch.setenv("DB_HOST", "from_env")
        monkeypatch.setenv("SERVER_ADDR", ":9999")

        config = load_config(config_file)
        assert config.database.host == "from_env"
        assert config.database.port == 6000
        assert config.server.port == 9999

    def test_pool_bounds_checked_after_merge(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[database]\nmax_connections = 40\n")
        monkeypatch.setenv("DB_MIN_CONNECTIONS", "30")

        config = load_config(config_file)
        assert config.database.min_connections == 30
        assert config.database.max_connections == 40

    def test_pool_bounds_violation_across_sources(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[database]\nmin_connections = 30\n")
        monkeypatch.setenv("DB_MAX_CONNECTIONS", "20")

        with pytest.raises(ValueError, match="must not exceed"):
            load_config(config_file)

    def test_invalid_value_raises_value_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text('[database]\nport = "not a number"\n')

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(config_file)

    def test_unknown_section_rejected(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[web]\nport = 1\n")

        with pytest.raises(ValueError, match="Unknown configuration sections"):
            load_config(config_file)

    def test_invalid_environment_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_SSLMODE", "sometimes")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config()
