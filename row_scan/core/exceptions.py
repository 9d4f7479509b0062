"""row-scan exception hierarchy.

Every error surfaced by the library derives from RowScanError. Driver
exceptions are wrapped in ExecutionError with the original chained as the
cause, never reinterpreted.
"""

from __future__ import annotations


class RowScanError(Exception):
    """Base exception for all row-scan errors."""


# --- Arguments ---


class ArgumentError(RowScanError):
    """Base for malformed call arguments."""


class InvalidArgumentsError(ArgumentError):
    """Raised when call arguments cannot be split into params and destinations."""


class MissingDestinationError(ArgumentError):
    """Raised when an operation that needs a destination got no arguments."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} requires at least one destination argument")


# --- Mapping ---


class MappingError(RowScanError):
    """Base for mapping errors."""


class UnsupportedDestinationError(MappingError):
    """Raised when a destination is not a scalar list, record, or record sequence."""

    def __init__(self, destination: object, detail: str) -> None:
        self.destination = destination
        super().__init__(f"Unsupported destination {type(destination).__name__}: {detail}")


class ScanError(MappingError):
    """Raised when a column value cannot be converted into its target."""

    def __init__(
        self,
        column_index: int,
        column_name: str | None,
        target: str,
        detail: str,
    ) -> None:
        self.column_index = column_index
        self.column_name = column_name
        self.target = target
        label = f"column {column_index}"
        if column_name is not None:
            label += f" ('{column_name}')"
        super().__init__(f"Cannot scan {label} into {target}: {detail}")


# --- Query ---


class QueryError(RowScanError):
    """Base for query execution errors."""


class NoRowsError(QueryError):
    """Raised when a single-row fetch finds an empty result set."""

    def __init__(self, sql: str) -> None:
        self.sql = sql
        super().__init__(f"No rows in result set for query: {sql}")


class ExecutionError(QueryError):
    """Raised when the driver reports an error executing a query."""

    def __init__(self, sql: str, original: BaseException) -> None:
        self.sql = sql
        self.original = original
        super().__init__(f"Query failed ({type(original).__name__}): {original}")


# --- Registry ---


class RegistryError(RowScanError):
    """Base for database registry errors."""


class DatabaseNotFoundError(RegistryError):
    """Raised when no database is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Database '{name}' not found")


# --- Adapter ---


class AdapterError(RowScanError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
