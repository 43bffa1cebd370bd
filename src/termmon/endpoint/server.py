"""FastAPI HTTP server for command history collection.

    POST /commands   <- status=0&pwd=/home/me&session_id=ab12&history=<base64>
    GET  /commands   -> recent commands, oldest first, one per line

Every other method or path answers 400 ``error``. All store access goes
through one ``LockedStore`` shared by every request; store calls run in
the threadpool so a request waiting for the lock never blocks the event
loop, and the lock is never held while reading a request body.
"""

from __future__ import annotations

import logging
import os
import signal
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Literal
from urllib.parse import parse_qsl

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from termmon import __version__
from termmon.endpoint.handlers import IngestError, parse_ingest_form, render_digest
from termmon.storage.base import DEFAULT_RECENT_LIMIT, CommandStore, StorageError
from termmon.storage.locked import LockedStore
from termmon.storage.sqlite import SqliteCommandStore

logger = logging.getLogger(__name__)

COMMANDS_PATH = "/commands"

StorageFailurePolicy = Literal["respond", "exit"]


def _terminate_process() -> None:
    """Ask uvicorn for a graceful shutdown of this process."""
    os.kill(os.getpid(), signal.SIGTERM)


def get_store(request: Request) -> CommandStore:
    return request.app.state.store


async def read_form_fields(request: Request) -> dict[str, str]:
    """Decode the request body as form fields, last value winning.

    Multipart bodies go through the form parser. Anything else is read as
    ``application/x-www-form-urlencoded`` whatever the Content-Type says,
    including when the header is absent.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    body = await request.body()
    return dict(parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True))


def create_app(
    store: CommandStore | None = None,
    database_url: str = "sqlite:///termmon.db",
    echo: bool = False,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
    storage_failure: StorageFailurePolicy = "respond",
    on_fatal: Callable[[], None] | None = None,
) -> FastAPI:
    """Create the command history application.

    Args:
        store: Optional pre-built store (for testing). Wrapped in a
            ``LockedStore`` unless it already is one.
        database_url: SQLAlchemy URL used when no store is given.
        echo: Log SQL statements when no store is given.
        recent_limit: Size of the recency window served by GET.
        storage_failure: ``"respond"`` answers a storage error with HTTP
            500. ``"exit"`` does the same and then calls ``on_fatal``.
        on_fatal: Shutdown hook for the ``"exit"`` policy. Defaults to
            sending SIGTERM to this process.
    """
    if store is None:
        store = SqliteCommandStore(database_url, echo=echo)
    if not isinstance(store, LockedStore):
        store = LockedStore(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        s: CommandStore = app.state.store
        # A StorageError here aborts startup.
        await run_in_threadpool(s.initialize)
        logger.info("termmon started (recent window=%d)", app.state.recent_limit)
        yield
        await run_in_threadpool(s.close)
        logger.info("termmon stopped")

    app = FastAPI(
        title="termmon",
        description="Shell command history collection service",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.store = store
    app.state.recent_limit = recent_limit
    app.state.storage_failure = storage_failure
    app.state.on_fatal = on_fatal or _terminate_process

    # -------------------------------------------------------------------
    # Error responses
    # -------------------------------------------------------------------

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        if exc.status_code in (404, 405):
            # Unknown routes are a bad request, not a missing resource.
            return PlainTextResponse("error", status_code=400)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError) -> PlainTextResponse:
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        if app.state.storage_failure == "exit":
            logger.critical("Storage failure policy is 'exit', shutting down")
            app.state.on_fatal()
        return PlainTextResponse("internal error", status_code=500)

    # -------------------------------------------------------------------
    # /commands
    # -------------------------------------------------------------------

    @app.post(COMMANDS_PATH)
    async def record_command(
        request: Request, store: CommandStore = Depends(get_store)
    ) -> Response:
        fields = await read_form_fields(request)
        try:
            command = parse_ingest_form(fields)
        except IngestError as e:
            logger.warning("Rejected command report: %s", e)
            raise HTTPException(status_code=400, detail=str(e)) from e

        if command is None:
            logger.debug("Empty history line from session %s, nothing recorded", fields["session_id"])
        else:
            command_id = await run_in_threadpool(store.insert, command)
            logger.debug("Recorded command %d from session %s", command_id, command.session_id)
        return Response(status_code=200)

    @app.get(COMMANDS_PATH)
    async def recent_commands(store: CommandStore = Depends(get_store)) -> PlainTextResponse:
        commands = await run_in_threadpool(store.recent, app.state.recent_limit)
        return PlainTextResponse(render_digest(commands), media_type="text/plain")

    return app
