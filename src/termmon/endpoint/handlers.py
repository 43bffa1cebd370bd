"""Request handling for the ``/commands`` resource.

These functions hold the ingestion and retrieval rules and know nothing
about HTTP; ``termmon.endpoint.server`` maps their results and errors to
responses.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime

from termmon.codec.history import HistoryDecodeError, decode_history
from termmon.domain.models import U32_DIGITS, U32_MAX, Command, utcnow

logger = logging.getLogger(__name__)


class IngestError(ValueError):
    """A submitted form field is missing or invalid.

    ``str(error)`` is the short reason sent back to the client, e.g.
    ``"status missing"``.
    """

    def __init__(self, field: str, problem: str) -> None:
        self.field = field
        self.problem = problem
        super().__init__(f"{field} {problem}")


def _require(form: Mapping[str, str], field: str) -> str:
    value = form.get(field)
    if value is None:
        raise IngestError(field, "missing")
    return value


def _parse_status(value: str) -> int:
    # Unsigned decimal with an optional single leading "+".
    digits = value[1:] if value.startswith("+") else value
    if not digits.isascii() or not digits.isdigit():
        raise IngestError("status", "invalid")
    significant = digits.lstrip("0") or "0"
    if len(significant) > U32_DIGITS:
        raise IngestError("status", "invalid")
    status = int(significant)
    if status > U32_MAX:
        raise IngestError("status", "invalid")
    return status


def parse_ingest_form(
    form: Mapping[str, str], now: datetime | None = None
) -> Command | None:
    """Validate a submitted form and build the command to record.

    Fields are checked in the order status, pwd, session_id, history, and
    the first failure is reported.

    Args:
        form: Decoded ``application/x-www-form-urlencoded`` fields.
        now: Receipt time. Defaults to the current UTC time.

    Returns:
        The command to insert, or None when the history line carries an
        empty command (accepted, nothing to record).

    Raises:
        IngestError: If a field is missing or invalid.
    """
    status = _parse_status(_require(form, "status"))
    pwd = _require(form, "pwd")
    session_id = _require(form, "session_id")
    history = _require(form, "history")

    try:
        line = decode_history(history)
    except HistoryDecodeError as e:
        logger.debug("Rejected history from session %s: %s", session_id, e)
        raise IngestError("history", "invalid") from e

    if line.is_empty:
        return None

    return Command(
        session_id=session_id,
        index=line.index,
        command=line.command,
        pwd=pwd,
        status=status,
        timestamp=now or utcnow(),
    )


def render_digest(commands: Sequence[Command]) -> str:
    """Render a most-recent-first batch as a chronological text digest.

    One command per line, oldest first, followed by a blank line. An
    empty batch renders as a single newline.
    """
    return "".join(f"{c.command}\n" for c in reversed(commands)) + "\n"
