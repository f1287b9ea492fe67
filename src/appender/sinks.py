"""Appender sinks (write destinations).

A sink is the open, writable destination bytes are appended to. There are two
variants and an appender holds exactly one of them for its whole life:

- `PathSink`: opened by the appender from a path, owned by it, reopenable.
- `ExternalSink`: a handle supplied by the caller; written to, never closed.
"""

from __future__ import annotations

import io
import logging
import os
import stat
from pathlib import Path, PurePath
from typing import IO, Any, Protocol, runtime_checkable

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@runtime_checkable
class SupportsWriteClose(Protocol):
    """Minimal shape of a caller-supplied stream."""

    def write(self, data: Any, /) -> Any: ...

    def close(self) -> Any: ...


class Sink(Protocol):
    """A destination for fully formatted, line-terminated log records."""

    @property
    def owned(self) -> bool:
        """True when the appender opened this sink and may close/reopen it."""

    @property
    def supports_flush(self) -> bool:
        """True when `flush` pushes data further than a no-op."""

    def write(self, line: bytes) -> None:
        """Write one complete line (a single write call unless the OS writes short)."""

    def flush(self) -> None:
        """Force buffered data towards stable storage."""

    def close(self) -> None:
        """Release the sink, when the appender owns it."""


class PathSink:
    """Append-only, unbuffered binary file opened from a path.

    Each `write` maps to one `write(2)` on an `O_APPEND` descriptor, so
    concurrent writers (threads or processes) never interleave within a line.
    Only regular files are fsynced; devices, FIFOs and ttys (e.g.
    `/dev/stdout`) have nothing to persist and flush as a no-op.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Open (creating if needed) `path` for appending raw bytes."""
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Raw FileIO: no userspace buffer, no text transcoding, never truncates.
        self._file: IO[bytes] = open(self._path, "ab", buffering=0)  # noqa: SIM115 - closed in close()
        self._regular = stat.S_ISREG(os.fstat(self._file.fileno()).st_mode)
        logger.debug("Opened %s (fd=%d)", self._path, self._file.fileno())

    @property
    def path(self) -> Path:
        return self._path

    @property
    def owned(self) -> bool:
        return True

    @property
    def supports_flush(self) -> bool:
        return self._regular

    @property
    def closed(self) -> bool:
        return self._file.closed

    def fileno(self) -> int:
        return self._file.fileno()

    def write(self, line: bytes) -> None:
        """Append the line, normally in one unbuffered write.

        A short write (signal, partial disk-full) continues with the remaining
        bytes until the whole line is out or the OS reports an error.
        """
        view = memoryview(line)
        while view:
            written = self._file.write(view) or 0
            view = view[written:]

    def flush(self) -> None:
        """Ask the OS to persist the file contents (`fsync`); no-op for non-regular files."""
        if not self._regular:
            return
        os.fsync(self._file.fileno())

    def close(self) -> None:
        """Flush and close the underlying descriptor (idempotent)."""
        if self._file.closed:
            return
        try:
            self.flush()
        finally:
            self._file.close()
        logger.debug("Closed %s", self._path)


def _is_binary_handle(handle: SupportsWriteClose) -> bool:
    """Decide whether a caller handle takes bytes or text."""
    if isinstance(handle, io.TextIOBase):
        return False
    if isinstance(handle, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode = getattr(handle, "mode", "")
    return isinstance(mode, str) and "b" in mode


class ExternalSink:
    """Wraps a stream the caller opened and keeps ownership of.

    Capabilities are resolved once here: whether the handle wants bytes or
    text, and whether it has its own `flush`.
    """

    def __init__(self, handle: SupportsWriteClose) -> None:
        """Wrap a caller-owned handle without taking ownership of it."""
        self._handle = handle
        self._binary = _is_binary_handle(handle)
        flush = getattr(handle, "flush", None)
        self._flush = flush if callable(flush) else None

    @property
    def handle(self) -> SupportsWriteClose:
        return self._handle

    @property
    def owned(self) -> bool:
        return False

    @property
    def supports_flush(self) -> bool:
        return self._flush is not None

    def write(self, line: bytes) -> None:
        """Write the line as bytes or, for text handles, as decoded text."""
        if self._binary:
            self._handle.write(line)
        else:
            self._handle.write(line.decode("utf-8", errors="surrogateescape"))

    def flush(self) -> None:
        """Delegate to the handle's flush; no-op when it has none."""
        if self._flush is not None:
            self._flush()

    def close(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op: the caller owns the handle."""


def resolve_sink(destination: Any) -> Sink:
    """Build the sink for a path or a pre-opened handle.

    Paths may be `str`, `bytes` (decoded with the filesystem encoding) or any
    `os.PathLike`.

    Raises:
    - `ConfigurationError` when the destination is missing, empty or neither a
      path nor a writable handle.
    - `OSError` when the path cannot be opened.
    """
    if destination is None:
        raise ConfigurationError("destination cannot be empty when creating a file appender")
    if isinstance(destination, (str, bytes, os.PathLike)):
        path = os.fsdecode(destination)
        # Path("") collapses to "." and has no parts.
        if not path or (isinstance(destination, PurePath) and not destination.parts):
            raise ConfigurationError("destination cannot be empty when creating a file appender")
        return PathSink(path)
    if isinstance(destination, SupportsWriteClose):
        return ExternalSink(destination)
    raise ConfigurationError(
        f"destination must be a path or a handle with write() and close(). Got: {type(destination).__name__}"
    )
