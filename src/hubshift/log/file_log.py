"""Append-only action log recording what a command did to remote content.

The log is plain text and line-oriented so it can be read by people and
parsed back by the revert commands:

    // Content Item Move Log
    // 2026-10-18T09:12:44.120551+00:00
    CREATE 5f1c3e0a-dst
    MOVED 5f1c3e0a-src
    // ARCHIVE FAILED: 71aa0c55-src

Comment lines start with ``//``. Every other non-blank line is an action:
the kind, a single space, then the payload (the rest of the line). Kinds are
an open set; ``ActionKind`` names the ones this package writes, and unknown
kinds from other tools are preserved verbatim.

Entries are buffered in memory and written once by ``close()``. A crash
before ``close()`` loses the buffered tail, so the log is best-effort
telemetry rather than a write-ahead log.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.markup import escape

from hubshift.core.errors import LogLoadError
from hubshift.utils.debug import debug

COMMENT_PREFIX = "//"


class ActionKind(str, Enum):
    """Action kinds written by hubshift commands."""

    MOVED = "MOVED"
    CREATE = "CREATE"


@dataclass(frozen=True)
class LogEntry:
    """A single immutable line of an action log.

    Attributes:
        kind: Action tag, or ``//`` for comments
        payload: Action payload or comment text
    """

    kind: str
    payload: str

    @property
    def is_comment(self) -> bool:
        return self.kind == COMMENT_PREFIX

    def to_line(self) -> str:
        if self.is_comment:
            return f"{COMMENT_PREFIX} {self.payload}".rstrip()
        return f"{self.kind} {self.payload}"

    @classmethod
    def from_line(cls, line: str) -> LogEntry | None:
        """Parse one line of a log file. Blank lines yield None.

        Only the line terminator is removed; the payload is everything after
        the first space, whitespace included.
        """
        text = line.rstrip("\r\n").lstrip()
        if not text.strip():
            return None
        if text.startswith(COMMENT_PREFIX):
            return cls(COMMENT_PREFIX, text[len(COMMENT_PREFIX) :].strip())
        kind, _, payload = text.partition(" ")
        return cls(kind, payload)


def _single_line(text: str) -> str:
    return " ".join(text.splitlines())


class FileLog:
    """Ordered, in-memory action log with a backing file.

    A FileLog is owned by exactly one command invocation. It is created fresh
    with a target path, or empty and populated with ``load_from_file`` when a
    previous run's log is being replayed.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        title: str = "hubshift log",
        console: Console | None = None,
        silent: bool = False,
        logger: Any = None,
    ) -> None:
        """Initialize the log.

        Args:
            path: File written on ``close()``; None keeps the log in memory only
            title: First header comment written to the file
            console: Rich console used by ``append_line`` and ``error``
            silent: Suppress console echo of ``append_line`` and ``error``
            logger: Optional structlog logger instance
        """
        self.path = Path(path) if path is not None else None
        self.title = title
        self.silent = silent
        self._console = console or Console()
        self._logger = logger or structlog.get_logger(__name__)
        self._entries: list[LogEntry] = []
        self._created_at = datetime.now(UTC)
        self._closed = False

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    @property
    def closed(self) -> bool:
        return self._closed

    def add_action(self, kind: str | ActionKind, payload: str) -> None:
        """Append an action entry. Never raises."""
        try:
            tag = kind.value if isinstance(kind, ActionKind) else str(kind)
            tag = "_".join(tag.split()) or "UNKNOWN"
            self._append(LogEntry(tag, _single_line(str(payload))))
        except Exception as exc:  # noqa: BLE001 - logging must not derail callers
            self._logger.warning("log.add_action_failed", kind=str(kind), error=str(exc))

    def add_comment(self, text: str) -> None:
        """Append a free-text comment, one entry per line of text. Never raises."""
        try:
            lines = str(text).splitlines() or [""]
            for line in lines:
                self._append(LogEntry(COMMENT_PREFIX, line.strip()))
        except Exception as exc:  # noqa: BLE001 - logging must not derail callers
            self._logger.warning("log.add_comment_failed", error=str(exc))

    def append_line(self, text: str) -> None:
        """Echo a message to the console and record it as a comment."""
        if not self.silent:
            self._console.print(escape(text))
        self.add_comment(text)

    def error(self, text: str, exc: BaseException | None = None) -> None:
        """Echo an error to the console and record it, with the cause if given."""
        if not self.silent:
            self._console.print(f"[red]{escape(text)}[/red]")
            if exc is not None:
                self._console.print(f"[red]{escape(str(exc))}[/red]")
        self.add_comment(text)
        if exc is not None:
            self.add_comment(str(exc))

    def _append(self, entry: LogEntry) -> None:
        if self._closed:
            debug(f"Ignoring log entry after close: {entry.to_line()}")
            return
        self._entries.append(entry)

    def load_from_file(self, path: str | Path) -> FileLog:
        """Replace the in-memory entries with those parsed from ``path``.

        A final line without a terminating newline is treated as a partial
        write and ignored.

        Args:
            path: Log file to parse

        Returns:
            This log, for chaining

        Raises:
            LogLoadError: If the file cannot be opened or decoded
        """
        log_path = Path(path)
        try:
            content = log_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LogLoadError(str(log_path), str(exc)) from exc

        lines = content.split("\n")
        trailing = lines.pop()
        if trailing.strip():
            debug(f"Ignoring incomplete trailing line in {log_path}: {trailing!r}")

        entries: list[LogEntry] = []
        for line in lines:
            entry = LogEntry.from_line(line)
            if entry is not None:
                entries.append(entry)

        self._entries = entries
        debug(f"Loaded {len(entries)} log entries from {log_path}")
        return self

    def get_data(self, kind: str | ActionKind) -> list[str]:
        """Return payloads of every entry of ``kind``, in append order."""
        tag = kind.value if isinstance(kind, ActionKind) else kind
        return [entry.payload for entry in self._entries if entry.kind == tag]

    def to_text(self) -> str:
        header = [
            LogEntry(COMMENT_PREFIX, self.title),
            LogEntry(COMMENT_PREFIX, self._created_at.isoformat()),
        ]
        return "".join(f"{entry.to_line()}\n" for entry in header + self._entries)

    def close(self) -> bool:
        """Write buffered entries to the backing file and close the log.

        Calling close more than once is a no-op. Write failures are reported
        through structlog and the console, never raised.

        Returns:
            True if the log was written (or has no backing file)
        """
        if self._closed:
            return True
        self._closed = True

        if self.path is None:
            return True

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as handle:
                handle.write(self.to_text())
                handle.flush()
                os.fsync(handle.fileno())
        except OSError as exc:
            self._logger.error("log.write_failed", path=str(self.path), error=str(exc))
            if not self.silent:
                self._console.print(
                    f"[red]Could not write log file {escape(str(self.path))}: "
                    f"{escape(str(exc))}[/red]"
                )
            return False

        debug(f"Wrote {len(self._entries)} log entries to {self.path}")
        return True

    def __enter__(self) -> FileLog:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
