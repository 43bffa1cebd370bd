"""Serialized access to a shared command store."""

from __future__ import annotations

import threading

from termmon.domain.models import Command
from termmon.storage.base import DEFAULT_RECENT_LIMIT, CommandStore


class LockedStore(CommandStore):
    """Wraps a ``CommandStore`` so that only one call runs at a time.

    The lock covers exactly one store operation. Callers never hold it
    across several operations or while waiting on a client.
    """

    def __init__(self, inner: CommandStore) -> None:
        self._inner = inner
        self._lock = threading.Lock()

    @property
    def inner(self) -> CommandStore:
        return self._inner

    def initialize(self) -> None:
        with self._lock:
            self._inner.initialize()

    def insert(self, command: Command) -> int:
        with self._lock:
            return self._inner.insert(command)

    def recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[Command]:
        with self._lock:
            return self._inner.recent(limit)

    def count(self) -> int:
        with self._lock:
            return self._inner.count()

    def close(self) -> None:
        with self._lock:
            self._inner.close()
