"""Unit tests for ConnectionConfig and ConnectionManager."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from row_scan.core.connection import ConnectionConfig, ConnectionManager
from row_scan.core.enums import DatabaseBackend
from row_scan.core.exceptions import ConnectionError, PoolError  # noqa: A004


class TestConnectionConfig:
    def test_defaults(self) -> None:
        config = ConnectionConfig(database="app")
        assert config.driver is DatabaseBackend.MYSQL
        assert config.name == "main"
        assert config.port == 3306
        assert config.protocol == "tcp"
        assert config.max_open_conns == 128
        assert config.max_idle_conns == 10
        assert config.conn_max_lifetime == 3600.0

    def test_driver_from_string(self) -> None:
        assert ConnectionConfig(driver="sqlite", database=":memory:").driver is (
            DatabaseBackend.SQLITE
        )

    def test_unknown_driver_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig(driver="oracle", database="app")

    def test_database_required(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig()  # type: ignore[call-arg]

    def test_from_env(self) -> None:
        environ = {
            "DB_HOST": "db.internal",
            "DB_PORT": "3307",
            "DB_USERNAME": "app",
            "DB_PASSWORD": "secret",
            "DB_DATABASE": "shop",
            "UNRELATED": "x",
        }
        config = ConnectionConfig.from_env(environ=environ)
        assert config.host == "db.internal"
        assert config.port == 3307
        assert config.user == "app"
        assert config.password == "secret"
        assert config.database == "shop"

    def test_from_env_prefix_and_overrides(self) -> None:
        environ = {"REPORTS_DATABASE": "reports", "REPORTS_HOST": "replica"}
        config = ConnectionConfig.from_env("REPORTS_", environ=environ, name="reports")
        assert config.database == "reports"
        assert config.host == "replica"
        assert config.name == "reports"

    def test_from_env_missing_database(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig.from_env(environ={})


class FailingAdapter:
    paramstyle = "qmark"

    def connect(self, config: ConnectionConfig) -> None:
        raise OSError("connection refused")


class TestConnectionManager:
    def test_get_connection_reuses_pooled_connection(
        self, sqlite_config: ConnectionConfig
    ) -> None:
        manager = ConnectionManager(sqlite_config)
        with manager.get_connection() as first:
            pass
        with manager.get_connection() as second:
            pass
        assert first is second
        manager.close_pool()

    def test_connect_failure_is_wrapped(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config, adapter=FailingAdapter())
        with pytest.raises(ConnectionError, match="connection refused"):
            with manager.get_connection():
                pass

    def test_close_pool_is_idempotent(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config)
        manager.initialize_pool()
        manager.close_pool()
        manager.close_pool()

    def test_closed_manager_refuses_connections(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config)
        manager.close_pool()
        with pytest.raises(PoolError, match="closed"):
            with manager.get_connection():
                pass
