"""Command history — a bounded record of the lines the user typed."""

from py_sh.status import ShellError, ShellStatus


class History:
    """Ordered, fixed-capacity list of command lines.

    Once full, further lines are refused with ``HISTORY_FULL`` rather
    than evicting the oldest entry.
    """

    def __init__(self, *, capacity: int) -> None:
        """Create an empty history holding at most *capacity* lines."""
        self._capacity = capacity
        self._entries: list[str] = []

    @property
    def capacity(self) -> int:
        """Return the maximum number of entries."""
        return self._capacity

    @property
    def entries(self) -> list[str]:
        """Return all entries, oldest first."""
        return list(self._entries)

    def add(self, line: str) -> bool:
        """Record *line*; return False if it was blank and skipped.

        Raises:
            ShellError: ``HISTORY_FULL`` when at capacity.

        """
        stripped = line.strip()
        if not stripped:
            return False
        if len(self._entries) >= self._capacity:
            msg = f"history full ({self._capacity} entries)"
            raise ShellError(ShellStatus.HISTORY_FULL, msg)
        self._entries.append(stripped)
        return True

    def __len__(self) -> int:
        """Return the number of entries."""
        return len(self._entries)
