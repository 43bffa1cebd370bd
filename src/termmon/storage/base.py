"""Abstract base class for command storage.

The HTTP layer only talks to this interface, so the SQLite backend can
be wrapped (see ``LockedStore``) or replaced in tests without changing
any request handling code.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from termmon.domain.models import Command

logger = logging.getLogger(__name__)

# Size of the recency window replayed by GET /commands.
DEFAULT_RECENT_LIMIT = 500


class CommandStore(ABC):
    """Durable, append-only store of executed commands.

    Example usage::

        store = SqliteCommandStore("sqlite:///termmon.db")
        store.initialize()
        command_id = store.insert(command)
        latest = store.recent(DEFAULT_RECENT_LIMIT)
    """

    @abstractmethod
    def initialize(self) -> None:
        """Create the backing table if it does not exist yet.

        Safe to call on every start.

        Raises:
            StorageError: If the storage medium is unreachable or the
                schema cannot be created.
        """
        ...

    @abstractmethod
    def insert(self, command: Command) -> int:
        """Persist one command and return its newly assigned id.

        The id is strictly greater than every id handed out before. The
        record is written atomically or not at all.

        Raises:
            ValueError: If ``command`` already carries an id.
            StorageError: If the write fails.
        """
        ...

    @abstractmethod
    def recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[Command]:
        """Return up to ``limit`` commands, most recent first.

        Ordered by timestamp descending; equal timestamps put the later
        insert first.

        Raises:
            StorageError: If the query fails.
        """
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of stored commands."""
        ...

    def close(self) -> None:
        """Release backend resources. Safe to call multiple times."""


class StorageError(Exception):
    """Raised when the storage backend fails to read or write."""
