"""Decoder for the ``history`` field sent by terminal sessions.

The field is base64 over UTF-8 text of the form::

    [whitespace] <digits> <whitespace> <command text> [whitespace]

The digits are the session's sequence index. Everything after the
separating whitespace, minus trailing whitespace, is the command text.
An empty command text is valid: shells report empty prompt lines too,
and the caller decides to record nothing for them.
"""

from __future__ import annotations

import base64
import binascii

from termmon.domain.models import U32_DIGITS, U32_MAX, HistoryLine

_DIGITS = frozenset("0123456789")


class HistoryDecodeError(ValueError):
    """The history field could not be decoded."""


class InvalidBase64Error(HistoryDecodeError):
    """The field is not valid base64."""


class InvalidUtf8Error(HistoryDecodeError):
    """The decoded bytes are not valid UTF-8."""


class MalformedHistoryError(HistoryDecodeError):
    """The decoded text is not an index followed by a command."""


def decode_history(raw: str | bytes) -> HistoryLine:
    """Decode a transport-encoded history line.

    Args:
        raw: The base64 text exactly as received.

    Returns:
        The sequence index and the command text. The command text may
        be empty.

    Raises:
        InvalidBase64Error: ``raw`` is not strict, padded base64.
        InvalidUtf8Error: The decoded bytes are not UTF-8.
        MalformedHistoryError: The text has no leading index, the index
            runs straight into the command, or the index does not fit
            in 32 bits.
    """
    try:
        data = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidBase64Error(f"history is not valid base64: {e}") from e

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(f"history is not valid UTF-8: {e}") from e

    return scan_history_line(text)


def scan_history_line(text: str) -> HistoryLine:
    """Split decoded history text into its index and command tokens."""
    end = len(text)
    pos = 0
    while pos < end and text[pos].isspace():
        pos += 1

    start = pos
    while pos < end and text[pos] in _DIGITS:
        pos += 1

    if pos == start:
        raise MalformedHistoryError("history line does not start with an index")
    if pos < end and not text[pos].isspace():
        raise MalformedHistoryError("history index is not followed by whitespace")

    digits = text[start:pos]
    # Length first: int() refuses digit strings past its conversion limit.
    significant = digits.lstrip("0") or "0"
    if len(significant) > U32_DIGITS or int(significant) > U32_MAX:
        raise MalformedHistoryError("history index out of range")
    index = int(significant)

    return HistoryLine(index=index, command=text[pos:].strip())
