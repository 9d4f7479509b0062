"""Database registry - named engines owned by the caller.

A registry is an ordinary object: create one, pass it where it is needed.
All methods are safe to call from multiple threads.

    registry = DatabaseRegistry()
    registry.register(Engine.from_config(config))        # as "main"
    registry.register(Engine.from_config(reports), "reports")
    registry.get().fetch_one(...)
"""

from __future__ import annotations

import logging
import threading

from row_scan.core.engine import Engine
from row_scan.core.exceptions import DatabaseNotFoundError, RegistryError

logger = logging.getLogger(__name__)

DEFAULT_NAME = "main"


class DatabaseRegistry:
    """Thread-safe mapping of names to engines."""

    def __init__(self) -> None:
        self._engines: dict[str, Engine] = {}
        self._lock = threading.Lock()

    def register(self, engine: Engine, name: str | None = None) -> Engine:
        """Register an engine under name (default: the engine's config name).

        An engine already registered under the same name is replaced; the
        replaced engine is not closed.
        """
        key = name or engine.name or DEFAULT_NAME
        with self._lock:
            if key in self._engines and self._engines[key] is not engine:
                logger.warning("Replacing database registered as '%s'", key)
            self._engines[key] = engine
        return engine

    def get(self, name: str = DEFAULT_NAME) -> Engine:
        """Look up an engine by name.

        Raises:
            RegistryError: If no engines are registered at all.
            DatabaseNotFoundError: If no engine is registered under name.
        """
        with self._lock:
            if not self._engines:
                raise RegistryError("no databases available")
            try:
                return self._engines[name]
            except KeyError:
                raise DatabaseNotFoundError(name) from None

    def remove(self, name: str) -> Engine:
        """Unregister and return the engine registered under name."""
        with self._lock:
            try:
                return self._engines.pop(name)
            except KeyError:
                raise DatabaseNotFoundError(name) from None

    @property
    def names(self) -> list[str]:
        """Registered names, sorted alphabetically."""
        with self._lock:
            return sorted(self._engines)

    def close_all(self) -> None:
        """Close every registered engine and empty the registry."""
        with self._lock:
            engines, self._engines = list(self._engines.values()), {}
        for engine in engines:
            engine.close()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._engines

    def __len__(self) -> int:
        """Number of registered engines."""
        with self._lock:
            return len(self._engines)
