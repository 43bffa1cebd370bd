"""Shared test fixtures for the termmon test suite.

Provides SQLite stores (on disk and in memory), a command factory and a
helper for encoding history lines the way shells send them.
"""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator

import pytest

from termmon.domain.models import Command
from termmon.storage.sqlite import SqliteCommandStore

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Encoding helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def encode_history() -> Callable[[str], str]:
    """Encode a ``"<index> <command>"`` line as the history form field."""

    def _encode(line: str) -> str:
        return base64.b64encode(line.encode("utf-8")).decode("ascii")

    return _encode


# ---------------------------------------------------------------------------
# Command fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_command() -> Callable[..., Command]:
    """Factory for unpersisted commands; ``offset`` shifts the timestamp in seconds."""

    def _make(command: str = "echo foo", offset: float = 0, **overrides) -> Command:
        fields = {
            "session_id": "session_id",
            "index": 1,
            "command": command,
            "pwd": "/",
            "status": 0,
            "timestamp": BASE_TIME + timedelta(seconds=offset),
        }
        fields.update(overrides)
        return Command(**fields)

    return _make


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'termmon.db'}"


@pytest.fixture
def store(db_url: str) -> Iterator[SqliteCommandStore]:
    """An initialized on-disk store, closed after the test."""
    s = SqliteCommandStore(db_url)
    s.initialize()
    yield s
    s.close()


@pytest.fixture
def memory_store() -> Iterator[SqliteCommandStore]:
    """An initialized in-memory store."""
    s = SqliteCommandStore("sqlite://")
    s.initialize()
    yield s
    s.close()
