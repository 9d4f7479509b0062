"""SQLite adapter - stdlib sqlite3."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any

from row_scan.core.connection import ConnectionConfig


class SqliteSyncAdapter:
    """Synchronous SQLite adapter using stdlib sqlite3."""

    @property
    def paramstyle(self) -> str:
        return "qmark"

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        """Open a SQLite connection usable from pooled threads."""
        options = {"check_same_thread": False, **config.extra}
        return sqlite3.connect(config.database, **options)

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: Sequence[Any] = (),
    ) -> sqlite3.Cursor:
        """Execute SQL on a fresh cursor and return it."""
        cursor = connection.cursor()
        try:
            cursor.execute(sql, tuple(params))
        except BaseException:
            cursor.close()
            raise
        return cursor
