"""Thread-safe DB-API connection pool.

Bounds the number of open connections, the number of idle connections
kept around, and the lifetime of each connection.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from row_scan.core.exceptions import PoolError

logger = logging.getLogger(__name__)


@dataclass
class _Pooled:
    connection: Any
    created_at: float


class ConnectionPool:
    """Pool over a zero-argument ``connect`` callable.

    Args:
        connect: Opens a new DB-API connection.
        max_open: Maximum connections open at once; <= 0 means unlimited.
        max_idle: Maximum idle connections kept; < 0 means 0.
        max_lifetime: Seconds a connection may be reused; None or <= 0
            means unlimited.
        timeout: Seconds to wait for a free connection before PoolError.
    """

    def __init__(
        self,
        connect: Callable[[], Any],
        *,
        max_open: int = 128,
        max_idle: int = 10,
        max_lifetime: float | None = 3600.0,
        timeout: float = 30.0,
    ) -> None:
        self._connect = connect
        self._max_open = max_open if max_open > 0 else None
        self._max_idle = max(max_idle, 0)
        self._max_lifetime = max_lifetime if max_lifetime and max_lifetime > 0 else None
        self._timeout = timeout

        self._idle: list[_Pooled] = []
        self._borrowed: dict[int, _Pooled] = {}
        self._opening = 0
        self._closed = False
        self._condition = threading.Condition()

    @property
    def open_count(self) -> int:
        with self._condition:
            return len(self._idle) + len(self._borrowed) + self._opening

    @property
    def idle_count(self) -> int:
        with self._condition:
            return len(self._idle)

    def _expired(self, pooled: _Pooled) -> bool:
        if self._max_lifetime is None:
            return False
        return time.monotonic() - pooled.created_at >= self._max_lifetime

    def _close_quietly(self, pooled: _Pooled) -> None:
        try:
            pooled.connection.close()
        except Exception:
            logger.warning("Error closing pooled connection", exc_info=True)

    def acquire(self) -> Any:
        """Borrow a connection, opening one if the pool has room.

        Raises:
            PoolError: If the pool is closed or no connection frees up
                within the timeout.
        """
        deadline = time.monotonic() + self._timeout
        with self._condition:
            while True:
                if self._closed:
                    raise PoolError("Connection pool is closed")

                while self._idle:
                    pooled = self._idle.pop()
                    if self._expired(pooled):
                        logger.debug("Closing connection past its max lifetime")
                        self._close_quietly(pooled)
                        continue
                    self._borrowed[id(pooled.connection)] = pooled
                    return pooled.connection

                total = len(self._borrowed) + self._opening
                if self._max_open is None or total < self._max_open:
                    self._opening += 1
                    break

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise PoolError(
                        f"Timed out after {self._timeout}s waiting for a connection "
                        f"({self._max_open} open)"
                    )
                self._condition.wait(remaining)

        try:
            connection = self._connect()
        except BaseException:
            with self._condition:
                self._opening -= 1
                self._condition.notify()
            raise

        with self._condition:
            self._opening -= 1
            self._borrowed[id(connection)] = _Pooled(connection, time.monotonic())
        return connection

    def release(self, connection: Any) -> None:
        """Return a borrowed connection to the pool."""
        with self._condition:
            pooled = self._borrowed.pop(id(connection), None)
            if pooled is None:
                raise PoolError("Connection does not belong to this pool")

            if self._closed or self._expired(pooled) or len(self._idle) >= self._max_idle:
                self._close_quietly(pooled)
            else:
                self._idle.append(pooled)
            self._condition.notify()

    def close(self) -> None:
        """Close idle connections and refuse further acquisition.

        Borrowed connections are closed when they are released.
        """
        with self._condition:
            self._closed = True
            idle, self._idle = self._idle, []
            self._condition.notify_all()
        for pooled in idle:
            self._close_quietly(pooled)
