"""Domain models for termmon.

All models use Pydantic v2 for validation and serialization.
"""

from termmon.domain.models import U32_DIGITS, U32_MAX, Command, HistoryLine, utcnow

__all__ = [
    "Command",
    "HistoryLine",
    "U32_DIGITS",
    "U32_MAX",
    "utcnow",
]
