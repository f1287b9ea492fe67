"""Formatting functions: `LogEntry -> str`, without the trailing newline."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Union

from .errors import ConfigurationError
from .models import LogEntry

Formatter = Callable[[LogEntry], Union[str, bytes]]


def _format_time(entry: LogEntry) -> str:
    return entry.time.strftime("%Y-%m-%d %H:%M:%S.%f")


def default_formatter(entry: LogEntry) -> str:
    """Render a human-readable line.

    Format: `<time> <L> [<pid>:<thread>] <name> -- <message>`, followed by
    ` -- <payload>` and ` -- Exception: <error>` when present.
    """
    level = entry.level.name[0] if entry.level is not None else "?"
    line = f"{_format_time(entry)} {level} [{entry.pid}:{entry.thread_name}] {entry.name} -- {entry.message}"
    if entry.payload:
        payload = json.dumps(entry.payload, separators=(",", ":"), sort_keys=True, default=str)
        line = f"{line} -- {payload}"
    if entry.error:
        line = f"{line} -- Exception: {entry.error}"
    return line


def json_formatter(entry: LogEntry) -> str:
    """Render the entry as one compact, key-sorted JSON object."""
    data = entry.model_dump()
    data["level"] = entry.level.name.lower() if entry.level is not None else None
    data["time"] = entry.time.isoformat()
    return json.dumps(data, separators=(",", ":"), sort_keys=True, default=str)


_FORMATTERS: dict[str, Formatter] = {
    "default": default_formatter,
    "json": json_formatter,
}


def get_formatter(name: str) -> Formatter:
    """Look up a built-in formatter by name."""
    try:
        return _FORMATTERS[name.strip().lower()]
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown formatter {name!r}. Expected one of: {', '.join(sorted(_FORMATTERS))}"
        ) from exc
