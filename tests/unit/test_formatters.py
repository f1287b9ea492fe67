from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from appender import ConfigurationError, LogEntry, LogLevel, default_formatter, get_formatter, json_formatter

_TIME = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)


def _entry(**kwargs) -> LogEntry:  # noqa: ANN003
    base = {"level": LogLevel.WARN, "name": "api", "message": "hello", "time": _TIME, "pid": 42, "thread_name": "main"}
    base.update(kwargs)
    return LogEntry(**base)


def test_default_formatter_layout() -> None:
    assert default_formatter(_entry()) == "2024-05-06 07:08:09.123456 W [42:main] api -- hello"


def test_default_formatter_appends_payload_and_error() -> None:
    line = default_formatter(_entry(payload={"b": 2, "a": 1}, error="ValueError: boom"))
    assert line.endswith(' -- hello -- {"a":1,"b":2} -- Exception: ValueError: boom')


def test_default_formatter_without_level() -> None:
    assert " ? [42:main] " in default_formatter(_entry(level=None))


def test_json_formatter_is_one_compact_line() -> None:
    line = json_formatter(_entry(payload={"k": "v"}))
    assert "\n" not in line
    data = json.loads(line)
    assert data["level"] == "warn"
    assert data["message"] == "hello"
    assert data["payload"] == {"k": "v"}
    assert data["pid"] == 42


def test_get_formatter() -> None:
    assert get_formatter("default") is default_formatter
    assert get_formatter(" JSON ") is json_formatter
    with pytest.raises(ConfigurationError):
        get_formatter("xml")
