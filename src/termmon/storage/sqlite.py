"""SQLite command store built on SQLAlchemy.

One table, ``command``, with an AUTOINCREMENT primary key so ids are
never handed out twice. Timestamps are stored as naive UTC ``DATETIME``
text, which SQLite sorts chronologically.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import timezone
from typing import Iterator

from sqlalchemy import Column, DateTime, Integer, Text, create_engine, func
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from termmon.domain.models import Command
from termmon.storage.base import DEFAULT_RECENT_LIMIT, CommandStore, StorageError

logger = logging.getLogger(__name__)

Base = declarative_base()


class CommandRecord(Base):
    """Row mapping for a persisted ``Command``."""

    __tablename__ = "command"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    session_id = Column(Text, nullable=False)
    index = Column(Integer, nullable=False)
    command = Column(Text, nullable=False)
    pwd = Column(Text, nullable=False)
    status = Column(Integer, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)

    @classmethod
    def from_command(cls, command: Command) -> CommandRecord:
        return cls(
            session_id=command.session_id,
            index=command.index,
            command=command.command,
            pwd=command.pwd,
            status=command.status,
            timestamp=command.timestamp.astimezone(timezone.utc).replace(tzinfo=None),
        )

    def to_command(self) -> Command:
        return Command(
            id=self.id,
            session_id=self.session_id,
            index=self.index,
            command=self.command,
            pwd=self.pwd,
            status=self.status,
            timestamp=self.timestamp.replace(tzinfo=timezone.utc),
        )


class SqliteCommandStore(CommandStore):
    """``CommandStore`` backed by a SQLite database.

    Not synchronized on its own; the server wraps it in a ``LockedStore``.

    Args:
        database_url: SQLAlchemy URL, e.g. ``sqlite:///termmon.db``.
            ``sqlite://`` gives a private in-memory database.
        echo: Log every SQL statement through SQLAlchemy's logger.
    """

    def __init__(self, database_url: str = "sqlite:///termmon.db", echo: bool = False) -> None:
        self._database_url = database_url
        url = make_url(database_url)
        if url.database in (None, "", ":memory:"):
            # A single shared connection, or every checkout sees an empty database.
            self._engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self._engine = create_engine(
                url, echo=echo, connect_args={"check_same_thread": False}
            )
        # Rows stay readable after commit; they are converted outside the session.
        self._session_factory = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @property
    def database_url(self) -> str:
        return self._database_url

    def initialize(self) -> None:
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to initialize {self._database_url}: {e}") from e
        logger.info("Command store ready at %s", self._database_url)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations.

        Commits on success, rolls back on exception and always closes the
        session. SQLAlchemy errors surface as ``StorageError``.
        """
        db: Session = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(str(e)) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def insert(self, command: Command) -> int:
        if command.is_persisted:
            raise ValueError(f"Command already persisted with id {command.id}")
        record = CommandRecord.from_command(command)
        with self.session_scope() as db:
            db.add(record)
            db.flush()
            command_id = record.id
        logger.debug("Stored command %d for session %s", command_id, command.session_id)
        return command_id

    def recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[Command]:
        if limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")
        with self.session_scope() as db:
            rows = (
                db.query(CommandRecord)
                .order_by(CommandRecord.timestamp.desc(), CommandRecord.id.desc())
                .limit(limit)
                .all()
            )
            return [row.to_command() for row in rows]

    def count(self) -> int:
        with self.session_scope() as db:
            return db.query(func.count(CommandRecord.id)).scalar() or 0

    def close(self) -> None:
        self._engine.dispose()
