"""row-scan - map query result rows into scalars, records, and record lists."""

from __future__ import annotations

from row_scan.core.connection import ConnectionConfig, ConnectionManager
from row_scan.core.engine import Engine, ExecResult
from row_scan.core.enums import DatabaseBackend
from row_scan.core.exceptions import (
    AdapterError,
    ArgumentError,
    ConnectionError,  # noqa: A004
    DatabaseNotFoundError,
    ExecutionError,
    InvalidArgumentsError,
    MappingError,
    MissingDestinationError,
    NoRowsError,
    PoolError,
    QueryError,
    RegistryError,
    RowScanError,
    ScanError,
    UnsupportedDestinationError,
)
from row_scan.core.pool import ConnectionPool
from row_scan.core.registry import DatabaseRegistry
from row_scan.mapping.descriptor import Column, describe, record
from row_scan.mapping.destination import DestinationShape, Out, Rows

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    "ConnectionPool",
    # Engine
    "Engine",
    "ExecResult",
    # Registry
    "DatabaseRegistry",
    # Destinations
    "Out",
    "Rows",
    "DestinationShape",
    # Records
    "Column",
    "record",
    "describe",
    # Enums
    "DatabaseBackend",
    # Exceptions
    "RowScanError",
    "ArgumentError",
    "InvalidArgumentsError",
    "MissingDestinationError",
    "MappingError",
    "UnsupportedDestinationError",
    "ScanError",
    "QueryError",
    "NoRowsError",
    "ExecutionError",
    "RegistryError",
    "DatabaseNotFoundError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
