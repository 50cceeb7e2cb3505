"""StrategyRegistry: name -> Strategy mapping owned by the Authenticator."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Generic

from passgate.strategy import Strategy, User

logger = logging.getLogger(__name__)


class StrategyRegistry(Generic[User]):
    """Maps strategy names to strategies.

    Writers serialize on a lock and publish a fresh snapshot, so lookups
    never take the lock and always see either the old or the new mapping.
    This keeps ``register``/``deregister`` safe even while requests are in
    flight.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._strategies: Mapping[str, Strategy[User]] = MappingProxyType({})

    def register(self, strategy: Strategy[User], name: str | None = None) -> str:
        """Bind ``strategy`` under ``name`` (or ``strategy.name``).

        An existing binding with the same name is replaced.

        Returns:
            The name the strategy was registered under.
        """
        key = name if name is not None else getattr(strategy, "name", None)
        if not key or not isinstance(key, str):
            raise ValueError(f"Cannot register strategy {strategy!r} without a name")
        with self._lock:
            replaced = key in self._strategies
            updated = dict(self._strategies)
            updated[key] = strategy
            self._strategies = MappingProxyType(updated)
        if replaced:
            logger.info("Strategy replaced: %s", key)
        else:
            logger.info("Strategy registered: %s", key)
        return key

    def deregister(self, name: str) -> bool:
        """Remove the binding for ``name``.

        Returns:
            True if a strategy was removed, False if the name was unknown.
        """
        with self._lock:
            if name not in self._strategies:
                return False
            updated = dict(self._strategies)
            del updated[name]
            self._strategies = MappingProxyType(updated)
        logger.info("Strategy deregistered: %s", name)
        return True

    def get(self, name: str) -> Strategy[User] | None:
        return self._strategies.get(name)

    def names(self) -> list[str]:
        return sorted(self._strategies)

    def snapshot(self) -> Mapping[str, Strategy[User]]:
        """Return a read-only view of the current bindings."""
        return self._strategies

    def __contains__(self, name: Any) -> bool:
        return name in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
