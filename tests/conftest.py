"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from row_scan.core.connection import ConnectionConfig, ConnectionManager
from row_scan.core.engine import Engine


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config with a single pooled connection."""
    return ConnectionConfig(driver="sqlite", database=":memory:", max_open_conns=1)


@pytest.fixture
def engine(sqlite_config: ConnectionConfig) -> Iterator[Engine]:
    """Engine over an in-memory users table holding Alice and Bob."""
    manager = ConnectionManager(sqlite_config)
    eng = Engine(manager)

    with manager.get_connection() as conn:
        conn.execute(
            "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, email TEXT)"
        )
        conn.execute("INSERT INTO users (name, email) VALUES ('Alice', 'alice@example.com')")
        conn.execute("INSERT INTO users (name, email) VALUES ('Bob', 'bob@example.com')")
        conn.commit()

    yield eng
    eng.close()
