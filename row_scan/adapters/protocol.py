"""Database adapter protocol.

Every adapter module MUST implement this protocol so the engine can treat
all backends alike.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from row_scan.core.connection import ConnectionConfig


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Placeholder style: 'qmark' (?) or 'format' (%s)."""
        ...

    def connect(self, config: ConnectionConfig) -> Any:
        """Open a new DB-API connection."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: Sequence[Any] = (),
    ) -> Any:
        """Execute SQL and return a cursor-like object.

        The cursor's ``description`` carries the column names and its rows
        are tuples in column order.
        """
        ...
