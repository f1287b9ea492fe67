"""File appender for structured log entries.

This package provides the write path of a single log sink:
- Gating entries by minimum level and an optional filter.
- Formatting them through a pluggable formatter.
- Appending one line per entry to a file (or a caller-supplied stream) with
  unbuffered, append-mode writes that stay safe across threads, processes and
  forks (via `FileAppender.reopen`).
"""

from .dispatcher import AppenderDispatcher
from .errors import ConfigurationError
from .file import DEFAULT_LEVEL, FileAppender
from .formatters import default_formatter, get_formatter, json_formatter
from .gate import Gate, compile_filter
from .models import LogEntry, LogLevel
from .sinks import ExternalSink, PathSink, Sink, resolve_sink

__all__ = [
    "DEFAULT_LEVEL",
    "AppenderDispatcher",
    "ConfigurationError",
    "ExternalSink",
    "FileAppender",
    "Gate",
    "LogEntry",
    "LogLevel",
    "PathSink",
    "Sink",
    "compile_filter",
    "default_formatter",
    "get_formatter",
    "json_formatter",
    "resolve_sink",
]
