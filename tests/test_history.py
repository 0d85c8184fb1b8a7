"""Tests for command history.

The front end records every non-blank line in a bounded history; the
``history`` built-in prints it with 1-based indices.
"""

import io

import pytest

from py_sh.config import ShellConfig
from py_sh.history import History
from py_sh.shell import Shell
from py_sh.status import ShellError, ShellStatus


def _shell(config: ShellConfig | None = None) -> tuple[Shell, io.StringIO]:
    """Create a shell writing to an in-memory stream."""
    out = io.StringIO()
    return Shell(config, stdout=out, stderr=io.StringIO()), out


class TestHistoryStore:
    """Verify the bounded history list."""

    def test_add_records_in_order(self) -> None:
        """Entries come back oldest first."""
        history = History(capacity=4)
        history.add("first")
        history.add("second")
        assert history.entries == ["first", "second"]

    def test_blank_lines_skipped(self) -> None:
        """Blank lines are not recorded."""
        history = History(capacity=4)
        assert history.add("   ") is False
        assert len(history) == 0

    def test_full_history_refuses(self) -> None:
        """Past capacity, add() fails and keeps the old entries."""
        history = History(capacity=1)
        history.add("one")
        with pytest.raises(ShellError) as excinfo:
            history.add("two")
        assert excinfo.value.status is ShellStatus.HISTORY_FULL
        assert history.entries == ["one"]


class TestHistoryBuiltin:
    """Verify the ``history`` built-in."""

    def test_prints_one_based_indices(self) -> None:
        """Each entry is printed as ``N: line``."""
        shell, out = _shell()
        shell.add_history("ls -l")
        shell.add_history("history")
        assert shell.execute("history") is ShellStatus.OK
        assert out.getvalue() == "1: ls -l\n2: history\n"

    def test_empty_history_prints_nothing(self) -> None:
        """With no history, the built-in prints nothing and succeeds."""
        shell, out = _shell()
        assert shell.execute("history") is ShellStatus.OK
        assert out.getvalue() == ""

    def test_execute_does_not_record(self) -> None:
        """Recording history is the front end's job, not execute()'s."""
        shell, _out = _shell()
        shell.execute("history")
        assert shell.history == []

    def test_add_history_full_status(self) -> None:
        """A full history is reported as a status, not an exception."""
        shell, _out = _shell(ShellConfig(history_capacity=1))
        assert shell.add_history("a") is ShellStatus.OK
        assert shell.add_history("b") is ShellStatus.HISTORY_FULL
        assert shell.last_error is ShellStatus.HISTORY_FULL
