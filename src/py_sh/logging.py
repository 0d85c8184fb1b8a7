"""Shell audit log.

Each shell keeps an in-memory log of what it did: commands registered,
processes spawned, jobs finished, and every failure with its status.
It is the shell's equivalent of ``dmesg``: cheap to append to, easy to
query, and readable by monitoring tools (see ``py_sh.web``).

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — one immutable record (level, message, source, status).
- **Logger** — an append-only buffer with filtering.
"""

from dataclasses import dataclass
from enum import IntEnum

from py_sh.status import ShellStatus


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "executor").
        status: The status code involved, for failures.

    """

    level: LogLevel
    message: str
    source: str
    status: ShellStatus | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message (status)``."""
        text = f"[{self.level.name}] {self.source}: {self.message}"
        if self.status is not None:
            text += f" ({self.status})"
        return text


class Logger:
    """Append-only log buffer with filtering."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        status: ShellStatus | None = None,
    ) -> None:
        """Append a new entry to the log."""
        self._entries.append(LogEntry(level=level, message=message, source=source, status=status))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        """
        return [
            e
            for e in self._entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
        ]

    def tail(self, count: int) -> list[LogEntry]:
        """Return the newest *count* entries."""
        return self._entries[-count:] if count > 0 else []

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
