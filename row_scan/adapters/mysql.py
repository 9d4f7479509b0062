"""MySQL adapter - mysql-connector-python."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from row_scan.core.connection import ConnectionConfig


class MysqlSyncAdapter:
    """Synchronous MySQL adapter using mysql-connector-python."""

    @property
    def paramstyle(self) -> str:
        return "format"

    def connect_args(self, config: ConnectionConfig) -> dict[str, Any]:
        """Keyword arguments for mysql.connector.connect."""
        args: dict[str, Any] = {
            "user": config.user,
            "password": config.password,
            "database": config.database,
        }
        if config.protocol == "unix":
            args["unix_socket"] = config.host
        else:
            args["host"] = config.host
            args["port"] = config.port
        args.update(config.extra)
        # reads must not pin a REPEATABLE READ snapshot on pooled connections
        args.setdefault("autocommit", True)
        return args

    def connect(self, config: ConnectionConfig) -> Any:
        """Open a MySQL connection."""
        import mysql.connector

        return mysql.connector.connect(**self.connect_args(config))

    def execute(
        self,
        connection: Any,
        sql: str,
        params: Sequence[Any] = (),
    ) -> Any:
        """Execute SQL on a buffered cursor and return it."""
        cursor = connection.cursor(buffered=True)
        try:
            cursor.execute(sql, tuple(params) or None)
        except BaseException:
            cursor.close()
            raise
        return cursor
