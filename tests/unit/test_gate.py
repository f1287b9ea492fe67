from __future__ import annotations

import re

import pytest

from appender import ConfigurationError, Gate, LogEntry, LogLevel, compile_filter


def _entry(level: LogLevel | None, name: str = "app") -> LogEntry:
    return LogEntry(level=level, name=name, message="m")


@pytest.mark.parametrize("level", list(LogLevel))
def test_gate_threshold_compares_ranks(level: LogLevel) -> None:
    gate = Gate(min_rank=int(LogLevel.INFO))
    assert gate.admit(_entry(level)) is (level >= LogLevel.INFO)


def test_entry_without_level_ranks_lowest() -> None:
    entry = _entry(None)
    assert entry.level_rank == 0
    assert Gate(min_rank=0).admit(entry) is True
    assert Gate(min_rank=int(LogLevel.DEBUG)).admit(entry) is False


def test_filter_rejects_regardless_of_level() -> None:
    gate = Gate(min_rank=0, predicate=lambda e: e.name != "noisy")
    assert gate.admit(_entry(LogLevel.FATAL, name="noisy")) is False
    assert gate.admit(_entry(LogLevel.TRACE, name="quiet")) is True


def test_threshold_checked_before_filter() -> None:
    calls: list[LogEntry] = []

    def predicate(entry: LogEntry) -> bool:
        calls.append(entry)
        return True

    gate = Gate(min_rank=int(LogLevel.ERROR), predicate=predicate)
    assert gate.admit(_entry(LogLevel.INFO)) is False
    assert calls == []


@pytest.mark.parametrize("pattern", ["^api\\.", re.compile("^api\\.")])
def test_regex_filter_matches_logger_name(pattern: str | re.Pattern[str]) -> None:
    predicate = compile_filter(pattern)
    assert predicate is not None
    assert predicate(_entry(LogLevel.INFO, name="api.orders")) is True
    assert predicate(_entry(LogLevel.INFO, name="db.pool")) is False


def test_compile_filter_passes_callables_through() -> None:
    def predicate(entry: LogEntry) -> bool:
        return True

    assert compile_filter(predicate) is predicate
    assert compile_filter(None) is None


@pytest.mark.parametrize("bad", ["(", 42])
def test_compile_filter_rejects_invalid(bad: object) -> None:
    with pytest.raises(ConfigurationError):
        compile_filter(bad)  # type: ignore[arg-type]


def test_filter_errors_propagate() -> None:
    def predicate(entry: LogEntry) -> bool:
        raise RuntimeError("bad filter")

    gate = Gate(min_rank=0, predicate=predicate)
    with pytest.raises(RuntimeError, match="bad filter"):
        gate.admit(_entry(LogLevel.INFO))


@pytest.mark.parametrize(
    ("value", "expected"),
    [("info", LogLevel.INFO), ("WARNING", LogLevel.WARN), (4, LogLevel.ERROR), (LogLevel.TRACE, LogLevel.TRACE)],
)
def test_log_level_parse(value: LogLevel | int | str, expected: LogLevel) -> None:
    assert LogLevel.parse(value) is expected


@pytest.mark.parametrize("value", ["verbose", 9])
def test_log_level_parse_rejects_unknown(value: int | str) -> None:
    with pytest.raises(ConfigurationError):
        LogLevel.parse(value)


@pytest.mark.parametrize("value", [True, False])
def test_log_level_parse_rejects_bools(value: bool) -> None:
    with pytest.raises(ConfigurationError):
        LogLevel.parse(value)
