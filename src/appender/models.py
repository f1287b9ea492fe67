"""Log entry models.

The level enumeration and entry shape are owned by the surrounding logging
framework; these are the minimal versions the appender reads from:

- `LogLevel` orders severities by rank (trace lowest).
- `LogEntry` is an immutable record carrying a level and enough context for a
  formatter to render one line.
"""

from __future__ import annotations

import os
import threading
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(tz=timezone.utc)


class LogLevel(IntEnum):
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5

    @classmethod
    def parse(cls, value: LogLevel | int | str) -> LogLevel:
        """Resolve a level, numeric rank or case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ConfigurationError(f"Log level must be a level, rank or name. Got: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as exc:
                raise ConfigurationError(f"Unknown log level rank: {value!r}") from exc
        name = str(value).strip().upper()
        if name == "WARNING":
            name = "WARN"
        try:
            return cls[name]
        except KeyError as exc:
            raise ConfigurationError(f"Unknown log level: {value!r}") from exc


class LogEntry(BaseModel):
    """A single structured log entry handed to appenders."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Entries without a level rank lowest for threshold checks.
    level: LogLevel | None = None

    # Logger name, usually the class or module that produced the entry.
    name: str = ""
    message: str = ""

    # Structured context rendered after the message.
    payload: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None

    time: datetime = Field(default_factory=utc_now)
    pid: int = Field(default_factory=os.getpid)
    thread_name: str = Field(default_factory=lambda: threading.current_thread().name)

    @field_validator("level", mode="before")
    def parse_level(cls, v: Any) -> LogLevel | None:
        """Accept level names (e.g. "info") as well as ranks."""
        if v is None:
            return None
        return LogLevel.parse(v)

    @property
    def level_rank(self) -> int:
        """Numeric severity used by appender thresholds."""
        if self.level is None:
            return 0
        return int(self.level)
