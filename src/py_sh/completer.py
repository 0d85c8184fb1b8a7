"""Tab completion for the interactive shell.

The completer separates **what to complete** (pure logic, testable
without a terminal) from **how to wire it** (readline, in the REPL).

- The first word completes to command names: custom commands,
  built-ins, aliases and executables on the session's ``PATH``.
- Later words complete to file-system paths.

At most ``config.completion_limit`` candidates are offered; when there
are more, the list is truncated and ``TAB_COMPLETION_FAILED`` is
recorded as the shell's last error.
"""

from __future__ import annotations

import os
import readline
from typing import TYPE_CHECKING

from py_sh.status import ShellError, ShellStatus

if TYPE_CHECKING:
    from py_sh.shell import Shell


class Completer:
    """Context-aware tab completer for a shell session."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance."""
        self._shell = shell
        self._candidates: list[str] = []

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th candidate for *text*.

        Candidates are computed once, on ``state == 0``.
        """
        if state == 0:
            self._candidates = self.completions(text, readline.get_line_buffer())
        if state < len(self._candidates):
            return self._candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return sorted completion candidates for *text*.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        """
        words = line.lstrip().split()

        # No words yet, or still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            candidates = self._complete_commands(text)
        else:
            candidates = self._complete_paths(text)
        return self._limit(sorted(set(candidates)))

    def _limit(self, candidates: list[str]) -> list[str]:
        """Truncate to the configured limit, recording an overflow."""
        limit = self._shell.config.completion_limit
        if len(candidates) <= limit:
            return candidates
        msg = f"{len(candidates)} completions, showing the first {limit}"
        self._shell.record_failure(
            ShellError(ShellStatus.TAB_COMPLETION_FAILED, msg), source="completer", report=False
        )
        return candidates[:limit]

    def _complete_commands(self, text: str) -> list[str]:
        """Complete shell-known command names and programs on ``PATH``."""
        names = [name for name in self._shell.command_names if name.startswith(text)]
        return names + self._complete_programs(text)

    def _complete_programs(self, text: str) -> list[str]:
        """List executables on the session ``PATH`` starting with *text*."""
        path = self._shell.get_env("PATH")
        if path is None:
            path = os.defpath
        programs: list[str] = []
        for directory in path.split(os.pathsep):
            if not directory:
                continue
            try:
                entries = list(os.scandir(directory))
            except OSError:
                continue
            programs.extend(
                entry.name
                for entry in entries
                if entry.name.startswith(text) and _is_executable_file(entry)
            )
        return programs

    @staticmethod
    def _complete_paths(text: str) -> list[str]:
        """Complete file-system paths; directories get a trailing ``/``."""
        directory, prefix = os.path.split(text)
        try:
            entries = list(os.scandir(directory or "."))
        except OSError:
            return []

        candidates: list[str] = []
        for entry in entries:
            if not entry.name.startswith(prefix):
                continue
            if entry.name.startswith(".") and not prefix.startswith("."):
                continue
            full = os.path.join(directory, entry.name)
            if entry.is_dir():
                full += "/"
            candidates.append(full)
        return candidates


def _is_executable_file(entry: os.DirEntry[str]) -> bool:
    """Return True if *entry* is a regular file the user may execute."""
    try:
        return entry.is_file() and os.access(entry.path, os.X_OK)
    except OSError:
        return False
