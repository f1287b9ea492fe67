"""Admission control for log entries."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from .errors import ConfigurationError
from .models import LogEntry

EntryPredicate = Callable[[LogEntry], bool]
EntryFilter = Union[EntryPredicate, str, re.Pattern[str]]


def compile_filter(entry_filter: EntryFilter | None) -> EntryPredicate | None:
    """Turn a filter setting into a predicate.

    Strings and compiled patterns are searched against the entry's logger name;
    callables are used as-is.
    """
    if entry_filter is None:
        return None
    if isinstance(entry_filter, str):
        try:
            entry_filter = re.compile(entry_filter)
        except re.error as exc:
            raise ConfigurationError(f"Invalid filter pattern {entry_filter!r}: {exc}") from exc
    if isinstance(entry_filter, re.Pattern):
        pattern = entry_filter
        return lambda entry: pattern.search(entry.name) is not None
    if callable(entry_filter):
        return entry_filter
    raise ConfigurationError(f"Filter must be a callable or a regular expression. Got: {entry_filter!r}")


@dataclass(frozen=True)
class Gate:
    """Combines a minimum severity rank with an optional filter predicate."""

    min_rank: int
    predicate: EntryPredicate | None = None

    def admit(self, entry: LogEntry) -> bool:
        """Return True when the entry meets the threshold and passes the filter."""
        if entry.level_rank < self.min_rank:
            return False
        if self.predicate is not None and not self.predicate(entry):
            return False
        return True
