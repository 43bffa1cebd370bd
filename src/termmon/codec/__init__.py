"""Wire codecs for data reported by terminal sessions."""

from termmon.codec.history import (
    HistoryDecodeError,
    InvalidBase64Error,
    InvalidUtf8Error,
    MalformedHistoryError,
    decode_history,
    scan_history_line,
)

__all__ = [
    "HistoryDecodeError",
    "InvalidBase64Error",
    "InvalidUtf8Error",
    "MalformedHistoryError",
    "decode_history",
    "scan_history_line",
]
