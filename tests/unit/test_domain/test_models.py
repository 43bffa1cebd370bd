"""Tests for the domain models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest
from pydantic import ValidationError

from termmon.domain.models import U32_MAX, Command, HistoryLine


class TestCommand:
    def test_session_id_lowercased(self, make_command: Callable[..., Command]) -> None:
        assert make_command(session_id="AbC").session_id == "abc"

    def test_other_text_fields_untouched(self, make_command: Callable[..., Command]) -> None:
        command = make_command(" Echo FOO ", pwd="/Home/User ")
        assert command.command == " Echo FOO "
        assert command.pwd == "/Home/User "

    def test_unpersisted_by_default(self, make_command: Callable[..., Command]) -> None:
        command = make_command()
        assert command.id is None
        assert not command.is_persisted

    def test_persisted_copy(self, make_command: Callable[..., Command]) -> None:
        command = make_command()
        stored = command.persisted(7)
        assert stored.id == 7
        assert stored.is_persisted
        assert command.id is None
        assert stored.command == command.command

    def test_frozen(self, make_command: Callable[..., Command]) -> None:
        command = make_command()
        with pytest.raises(ValidationError):
            command.id = 3  # type: ignore[misc]

    def test_empty_command_rejected(self, make_command: Callable[..., Command]) -> None:
        with pytest.raises(ValidationError):
            make_command("")

    @pytest.mark.parametrize("field", ["index", "status"])
    @pytest.mark.parametrize("value", [-1, U32_MAX + 1])
    def test_u32_bounds(self, make_command: Callable[..., Command], field: str, value: int) -> None:
        with pytest.raises(ValidationError):
            make_command(**{field: value})

    def test_naive_timestamp_taken_as_utc(self, make_command: Callable[..., Command]) -> None:
        command = make_command(timestamp=datetime(2025, 1, 1, 12, 0))
        assert command.timestamp == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_timestamp_converted_to_utc(self, make_command: Callable[..., Command]) -> None:
        plus_two = timezone(timedelta(hours=2))
        command = make_command(timestamp=datetime(2025, 1, 1, 14, 0, tzinfo=plus_two))
        assert command.timestamp.tzinfo == timezone.utc
        assert command.timestamp.hour == 12

    def test_default_timestamp_is_now(self) -> None:
        command = Command(session_id="s", index=0, command="ls", pwd="/", status=0)
        assert command.timestamp.tzinfo == timezone.utc
        assert datetime.now(timezone.utc) - command.timestamp < timedelta(seconds=5)


class TestHistoryLine:
    def test_is_empty(self) -> None:
        assert HistoryLine(index=1, command="").is_empty
        assert not HistoryLine(index=1, command="ls").is_empty
