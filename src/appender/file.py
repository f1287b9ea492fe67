"""File appender: writes log entries to a file or an already-open stream.

Write path:

- `write(entry)` runs the entry through the gate (level threshold + filter),
  formats it, and appends `line + "\\n"` with one unbuffered write call.
- `flush()` pushes data towards stable storage when the sink supports it.
- `reopen()` gives a path-backed appender a fresh descriptor, e.g. after the
  host process forked. Handle-backed appenders ignore it.

Example:

    appender = FileAppender("application.log", LogLevel.INFO)
    appender.write(LogEntry(level=LogLevel.INFO, name="api", message="hello"))

    # Log everything (including trace) to stdout, only errors to a file.
    FileAppender(sys.stdout, LogLevel.TRACE)
    FileAppender("errors.log", "error")
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .formatters import Formatter, default_formatter, get_formatter
from .gate import EntryFilter, Gate, compile_filter
from .models import LogEntry, LogLevel
from .sinks import PathSink, Sink, resolve_sink

if TYPE_CHECKING:
    from config import AppenderConfig

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = LogLevel.INFO


def _encode_line(text: str | bytes) -> bytes:
    """Terminate a formatted line, passing bytes through untouched."""
    if isinstance(text, bytes):
        return text + b"\n"
    # surrogateescape keeps undecodable bytes carried in a str intact.
    return (text + "\n").encode("utf-8", errors="surrogateescape")


class FileAppender:
    """Appender bound to exactly one sink for its lifetime.

    Members:
    - Gate: `gate` (resolved minimum rank + optional filter)
    - Formatter: `formatter` (`LogEntry -> str | bytes`)
    - Path: `path` (only when constructed from a path; enables `reopen`)
    - Active sink: `sink` (swapped by `reopen`, under `_swap_lock`)
    """

    def __init__(
        self,
        destination: Any,
        level: LogLevel | int | str | None = None,
        filter: EntryFilter | None = None,  # noqa: A002 - mirrors appender settings
        formatter: Formatter | None = None,
        *,
        default_level: LogLevel | int | str = DEFAULT_LEVEL,
    ) -> None:
        """Create an appender for a path or a pre-opened handle.

        Args:
            destination: File path (`str` / `os.PathLike`), or a handle with
                `write` and `close`. Handles are never closed or reopened.
            level: Minimum severity to write; `default_level` when omitted.
            filter: Predicate over entries, or a regex searched in the entry name.
            formatter: `LogEntry -> str | bytes`; `default_formatter` when omitted.
            default_level: Threshold used when `level` is not supplied.

        Raises:
            ConfigurationError: destination missing/invalid, or bad level/filter.
            OSError: the path could not be opened.
        """
        resolved = LogLevel.parse(level if level is not None else default_level)
        self.gate = Gate(min_rank=int(resolved), predicate=compile_filter(filter))
        self.formatter: Formatter = formatter or default_formatter

        self._swap_lock = threading.Lock()
        self._sink: Sink = resolve_sink(destination)
        self._path: Path | None = self._sink.path if isinstance(self._sink, PathSink) else None

    @classmethod
    def from_config(cls, config: AppenderConfig) -> FileAppender:
        """Build a path-backed appender from validated configuration."""
        return cls(
            config.path,
            config.level,
            config.filter,
            get_formatter(config.formatter),
            default_level=config.default_level,
        )

    @property
    def level(self) -> LogLevel:
        return LogLevel(self.gate.min_rank)

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def sink(self) -> Sink:
        return self._sink

    def reopen(self) -> Sink | None:
        """Open a fresh descriptor to the recorded path and make it active.

        Call after forking so each process appends through its own
        `O_APPEND` descriptor. No-op (returns None) for handle-backed
        appenders. The previous sink is not closed here; it is released when
        garbage collected. Writes already holding the previous sink finish
        against it, which still targets the same file.
        """
        if self._path is None:
            return None

        sink = PathSink(self._path)
        with self._swap_lock:
            self._sink = sink
        logger.debug("Reopened %s in pid %d", self._path, os.getpid())
        return sink

    def admit(self, entry: LogEntry) -> bool:
        """Return True when the entry passes the level threshold and filter."""
        return self.gate.admit(entry)

    def write(self, entry: LogEntry) -> bool:
        """Format and append one entry.

        Returns False (without I/O) when the gate rejects the entry, True once
        the line has been handed to the sink. Filter, formatter and I/O errors
        propagate; nothing is retried.
        """
        if not self.gate.admit(entry):
            return False

        line = _encode_line(self.formatter(entry))
        # Single reference read: a concurrent reopen cannot hand us a half-swapped sink.
        sink = self._sink
        sink.write(line)
        return True

    def flush(self) -> None:
        """Flush the active sink when it supports flushing."""
        sink = self._sink
        if sink.supports_flush:
            sink.flush()

    def close(self) -> None:
        """Close the sink if this appender opened it; leaves caller handles open."""
        sink = self._sink
        if sink.owned:
            sink.close()

    def __enter__(self) -> FileAppender:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        target = str(self._path) if self._path is not None else type(self._sink).__name__
        return f"FileAppender({target!r}, level={self.level.name})"
