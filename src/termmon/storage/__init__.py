"""Durable storage for reported commands.

Provides the abstract ``CommandStore`` interface, the SQLite backend and
the lock wrapper the HTTP server shares between requests.
"""

from termmon.storage.base import DEFAULT_RECENT_LIMIT, CommandStore, StorageError
from termmon.storage.locked import LockedStore
from termmon.storage.sqlite import SqliteCommandStore

__all__ = [
    "CommandStore",
    "DEFAULT_RECENT_LIMIT",
    "LockedStore",
    "SqliteCommandStore",
    "StorageError",
]
