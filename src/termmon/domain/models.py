"""Core domain models for termmon.

A ``Command`` is one executed shell command as reported by a terminal
session and recorded by the store. A ``HistoryLine`` is the decoded
form of the ``history`` field a session sends along with it.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Sequence indexes and exit statuses are unsigned 32-bit values on the wire.
U32_MAX = 2**32 - 1
U32_DIGITS = len(str(U32_MAX))


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class HistoryLine(BaseModel):
    """A decoded history line: the session's sequence index and command text."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, le=U32_MAX, description="Per-session sequence number")
    command: str = Field(description="Command text, surrounding whitespace removed")

    @property
    def is_empty(self) -> bool:
        """True when the line carries no command worth recording."""
        return not self.command


class Command(BaseModel):
    """A shell command executed in a terminal session.

    ``id`` is None until the store persists the command. ``timestamp`` is
    the server's receipt time and is the only ordering used for
    retrieval; the session's own ``index`` is kept verbatim and is
    neither unique nor monotonic.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Store-assigned identifier")
    session_id: str = Field(description="Client session identifier, lowercased")
    index: int = Field(ge=0, le=U32_MAX, description="Client per-session sequence number")
    command: str = Field(min_length=1, description="Literal shell command")
    pwd: str = Field(description="Working directory at execution time")
    status: int = Field(ge=0, le=U32_MAX, description="Exit status")
    timestamp: datetime = Field(default_factory=utcnow, description="Server receipt time (UTC)")

    @field_validator("session_id")
    @classmethod
    def _lowercase_session_id(cls, value: str) -> str:
        return value.lower()

    @field_validator("timestamp")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Naive datetimes are taken to be UTC already.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def persisted(self, command_id: int) -> Command:
        """Return a copy carrying the id the store assigned."""
        return self.model_copy(update={"id": command_id})
