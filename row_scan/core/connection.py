"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager uses the adapter protocol and a ConnectionPool for the
connection lifecycle.
"""

from __future__ import annotations

import importlib
import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel

from row_scan.core.enums import DatabaseBackend
from row_scan.core.exceptions import AdapterError, ConnectionError, PoolError  # noqa: A004
from row_scan.core.pool import ConnectionPool

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: DatabaseBackend = DatabaseBackend.MYSQL
    name: str = "main"
    host: str | None = None
    port: int = 3306
    protocol: str = "tcp"
    user: str | None = None
    password: str | None = None
    database: str
    max_open_conns: int = 128
    max_idle_conns: int = 10
    conn_max_lifetime: float | None = 3600.0
    pool_timeout: float = 30.0
    extra: dict[str, Any] = {}

    @classmethod
    def from_env(
        cls,
        prefix: str = "DB_",
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> ConnectionConfig:
        """Build a config from environment variables.

        Reads ``{prefix}HOST``, ``{prefix}PORT``, ``{prefix}PROTOCOL``,
        ``{prefix}USERNAME``, ``{prefix}PASSWORD``, ``{prefix}DATABASE``,
        ``{prefix}DRIVER``, ``{prefix}NAME`` and ``{prefix}MAX_IDLE_CONNS``.
        Keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        keys = {
            "driver": "DRIVER",
            "name": "NAME",
            "host": "HOST",
            "port": "PORT",
            "protocol": "PROTOCOL",
            "user": "USERNAME",
            "password": "PASSWORD",
            "database": "DATABASE",
            "max_idle_conns": "MAX_IDLE_CONNS",
        }
        data: dict[str, Any] = {
            field: env[prefix + key] for field, key in keys.items() if prefix + key in env
        }
        data.update(overrides)
        return cls.model_validate(data)


# Adapter module mapping: backend → (module_path, sync_class)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("row_scan.adapters.sqlite", "SqliteSyncAdapter"),
    DatabaseBackend.MYSQL: ("row_scan.adapters.mysql", "MysqlSyncAdapter"),
}


def _load_adapter(driver: DatabaseBackend) -> Any:
    """Load a sync adapter by backend."""
    if driver not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported database driver: {driver.value}")

    module_path, cls_name = _ADAPTER_MAP[driver]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver.value}': {e}") from e


class ConnectionManager:
    """Synchronous connection manager using the SyncAdapter protocol."""

    def __init__(self, config: ConnectionConfig, adapter: Any | None = None) -> None:
        self.config = config
        self._adapter = adapter if adapter is not None else _load_adapter(config.driver)
        self._pool: ConnectionPool | None = None
        self._closed = False

    @property
    def adapter(self) -> Any:
        return self._adapter

    def _connect(self) -> Any:
        try:
            return self._adapter.connect(self.config)
        except Exception as e:
            raise ConnectionError(
                f"Failed to connect to {self.config.driver.value} database "
                f"'{self.config.database}': {e}"
            ) from e

    def initialize_pool(self) -> ConnectionPool:
        """Initialize the connection pool.

        Raises:
            PoolError: If the manager has been closed.
        """
        if self._closed:
            raise PoolError(f"Database '{self.config.name}' is closed")
        if self._pool is None:
            self._pool = ConnectionPool(
                self._connect,
                max_open=self.config.max_open_conns,
                max_idle=self.config.max_idle_conns,
                max_lifetime=self.config.conn_max_lifetime,
                timeout=self.config.pool_timeout,
            )
            logger.debug(
                "Initialized %s pool '%s' (max_open=%d, max_idle=%d)",
                self.config.driver.value,
                self.config.name,
                self.config.max_open_conns,
                self.config.max_idle_conns,
            )
        return self._pool

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Get a connection from the pool as a context manager."""
        pool = self.initialize_pool()
        connection = pool.acquire()
        try:
            yield connection
        finally:
            pool.release(connection)

    def close_pool(self) -> None:
        """Close the connection pool. The manager cannot be reused afterwards."""
        self._closed = True
        if self._pool is not None:
            self._pool.close()
            self._pool = None
