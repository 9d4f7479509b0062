"""Query execution engine.

The Engine classifies call arguments into query parameters and output
destinations, executes through the adapter, and copies result rows into
the destinations. Cursors are closed and connections returned to the
pool on every exit path.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from row_scan.core.arguments import explicit_args, split_args, split_last
from row_scan.core.connection import ConnectionConfig, ConnectionManager
from row_scan.core.exceptions import (
    ExecutionError,
    NoRowsError,
    UnsupportedDestinationError,
)
from row_scan.core.params import ensure_limit, normalize_placeholders
from row_scan.mapping.descriptor import describe
from row_scan.mapping.destination import DestinationShape, Rows, detect_shape
from row_scan.mapping.resolver import resolve
from row_scan.mapping.row import RowMapper, scan_scalars

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a statement that returns no rows."""

    rows_affected: int
    last_insert_id: int | None


def _columns(cursor: Any) -> tuple[str, ...]:
    if cursor.description is None:
        return ()
    return tuple(desc[0] for desc in cursor.description)


def _close(cursor: Any) -> None:
    close = getattr(cursor, "close", None)
    if close is not None:
        close()


class Engine:
    """Synchronous query execution engine."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._paramstyle = connection_manager.adapter.paramstyle

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Engine:
        """Create an Engine from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance

        Returns:
            Engine instance
        """
        return cls(ConnectionManager(config))

    @property
    def name(self) -> str:
        return self._connection_manager.config.name

    def _prepare(self, sql: str, params: Sequence[Any]) -> str:
        if not params:
            return sql
        return normalize_placeholders(sql, self._paramstyle)

    @contextmanager
    def _cursor(self, sql: str, params: Sequence[Any]) -> Iterator[Any]:
        """Execute a query and yield its cursor, closing it on exit."""
        prepared = self._prepare(sql, params)
        logger.debug("Executing: %s params=%r", prepared, params)

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = self._connection_manager.adapter.execute(conn, prepared, params)
            except Exception as e:
                raise ExecutionError(prepared, e) from e
            try:
                yield cursor
            finally:
                _close(cursor)

    def _fetch(self, cursor: Any, sql: str, method: str) -> Any:
        try:
            return getattr(cursor, method)()
        except Exception as e:
            raise ExecutionError(sql, e) from e

    def _split(
        self,
        args: Sequence[Any],
        params: Sequence[Any] | None,
        operation: str,
    ) -> tuple[tuple[Any, ...], tuple[Any, ...]]:
        if params is not None:
            return explicit_args(params, args, operation)
        return split_args(args, operation)

    def fetch_one(
        self,
        query: str,
        *args: Any,
        params: Sequence[Any] | None = None,
    ) -> Any:
        """Fetch a single row into the trailing destination arguments.

        Leading arguments are query parameters; the first output reference
        starts the destinations. Either pass ``Out`` slots (scanned by
        position) or one record instance (mapped by alias, name, then
        position). Record queries without a LIMIT get ``LIMIT 1`` appended.

        Returns:
            A tuple of the scanned values for Out slots, or the record.

        Raises:
            NoRowsError: If the query returns no rows.
        """
        query_params, dests = self._split(args, params, "fetch_one")
        shape = detect_shape(dests)

        if shape is DestinationShape.SCALAR_LIST:
            with self._cursor(query, query_params) as cursor:
                row = self._fetch(cursor, query, "fetchone")
                if row is None:
                    raise NoRowsError(query)
                scan_scalars(row, dests, _columns(cursor))
            return tuple(dest.value for dest in dests)

        if shape is not DestinationShape.SINGLE_RECORD:
            raise UnsupportedDestinationError(
                dests[-1], "fetch_one cannot fill a record sequence; use fetch_all"
            )

        record = dests[-1]
        query = ensure_limit(query)
        with self._cursor(query, query_params) as cursor:
            row = self._fetch(cursor, query, "fetchone")
            if row is None:
                raise NoRowsError(query)
            plan = resolve(_columns(cursor), describe(type(record)))
            RowMapper(plan).map_into(row, record)
        return record

    def fetch_all(
        self,
        query: str,
        *args: Any,
        params: Sequence[Any] | None = None,
    ) -> Rows[Any]:
        """Fetch every row, appending one record per row to a Rows destination.

        The last argument is the destination; everything before it is a
        query parameter. Rows mapped before a failing row stay appended.

        Returns:
            The destination Rows.
        """
        if params is not None:
            query_params, dests = explicit_args(params, args, "fetch_all")
            if len(dests) != 1:
                raise UnsupportedDestinationError(
                    dests[-1], "fetch_all takes exactly one Rows destination"
                )
            dest = dests[0]
        else:
            query_params, dest = split_last(args, "fetch_all")

        if detect_shape((dest,)) is not DestinationShape.RECORD_SEQUENCE:
            raise UnsupportedDestinationError(dest, "fetch_all requires Rows(RecordType)")

        with self._cursor(query, query_params) as cursor:
            plan = resolve(_columns(cursor), describe(dest.record_type))
            mapper = RowMapper(plan)
            while True:
                row = self._fetch(cursor, query, "fetchone")
                if row is None:
                    break
                dest.append(mapper.map_new(row))
        logger.debug("Mapped %d row(s) into %r", len(dest), dest.record_type.__name__)
        return dest

    def execute(self, query: str, *params: Any) -> ExecResult:
        """Execute a statement that returns no rows, and commit."""
        prepared = self._prepare(query, params)
        logger.debug("Executing: %s params=%r", prepared, params)

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = self._connection_manager.adapter.execute(conn, prepared, params)
            except Exception as e:
                conn.rollback()
                raise ExecutionError(prepared, e) from e
            try:
                try:
                    conn.commit()
                except Exception as e:
                    conn.rollback()
                    raise ExecutionError(prepared, e) from e
                return ExecResult(
                    rows_affected=int(cursor.rowcount),
                    last_insert_id=getattr(cursor, "lastrowid", None),
                )
            finally:
                _close(cursor)

    def execute_one(self, query: str, *params: Any) -> ExecResult:
        """Execute a statement bounded to one row (``LIMIT 1`` appended if absent)."""
        return self.execute(ensure_limit(query), *params)

    def close(self) -> None:
        """Close the underlying connection pool.

        A closed engine refuses further queries with PoolError.
        """
        self._connection_manager.close_pool()
