from __future__ import annotations

import dataclasses

import pytest

from lib_log_syslog.domain.events import LogRecord
from lib_log_syslog.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


class CountingMessage:
    def __init__(self) -> None:
        self.renders = 0

    def __str__(self) -> str:
        self.renders += 1
        return "lazy"


def test_record_defaults() -> None:
    record = LogRecord(LogLevel.INFO, "hello")

    assert record.structured_data is None
    assert record.msg_id is None
    assert record.logger_name is None
    assert record.extra == {}


def test_message_renders_lazily() -> None:
    message = CountingMessage()
    record = LogRecord(LogLevel.DEBUG, message)

    assert message.renders == 0
    assert record.render_message() == "lazy"
    assert message.renders == 1


def test_record_is_frozen() -> None:
    record = LogRecord(LogLevel.INFO, "hello")

    with pytest.raises(dataclasses.FrozenInstanceError):
        record.message = "changed"  # type: ignore[misc]


def test_replace_returns_updated_copy() -> None:
    record = LogRecord(LogLevel.INFO, "hello", msg_id="ID1")

    updated = record.replace(level=LogLevel.ERROR)

    assert updated.level is LogLevel.ERROR
    assert updated.msg_id == "ID1"
    assert record.level is LogLevel.INFO
