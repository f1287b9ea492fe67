"""Demo entrypoint wiring a file appender into an asyncio host.

This module intentionally contains a small, end-to-end "smoke test" that:

- Loads configuration from environment.
- Writes a few entries through the async dispatcher.
- Forks (POSIX only); the child calls `reopen()` and both processes append to
  the same file through their own descriptors.

It is **not** intended to be production orchestration logic; it is a convenient
manual harness for checking the output file by eye.
"""

from __future__ import annotations

import asyncio
import logging
import os

from appender import AppenderDispatcher, FileAppender, LogEntry, LogLevel
from config import load_config

logger = logging.getLogger(__name__)


async def run_demo() -> None:
    """Write a handful of entries, including one below the threshold."""
    cfg = load_config()
    dispatcher = AppenderDispatcher(appender=FileAppender.from_config(cfg.appender))
    try:
        await dispatcher.submit(LogEntry(level=LogLevel.TRACE, name="demo", message="below threshold"))
        await dispatcher.submit(LogEntry(level=LogLevel.INFO, name="demo", message="hello"))
        await dispatcher.submit(
            LogEntry(level=LogLevel.WARN, name="demo", message="with payload", payload={"pid": os.getpid()})
        )
        await dispatcher.flush()
    finally:
        await dispatcher.aclose()


def fork_demo() -> None:
    """Append from a parent and a forked child sharing one log file."""
    cfg = load_config()
    appender = FileAppender.from_config(cfg.appender)
    appender.write(LogEntry(level=LogLevel.INFO, name="demo", message="before fork"))

    if not hasattr(os, "fork"):
        logger.info("os.fork is unavailable; skipping fork demo")
        appender.close()
        return

    pid = os.fork()
    if pid == 0:
        appender.reopen()
        appender.write(LogEntry(level=LogLevel.INFO, name="demo.child", message="after fork"))
        appender.flush()
        os._exit(0)

    appender.write(LogEntry(level=LogLevel.INFO, name="demo.parent", message="after fork"))
    os.waitpid(pid, 0)
    appender.close()


def main() -> None:
    """CLI entrypoint for running the demo with `python -m src.main` / `python src/main.py`."""
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run_demo())
    fork_demo()

if __name__ == "__main__":
    main()
