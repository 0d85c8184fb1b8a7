"""Custom command registry — caller-supplied handlers.

An embedding application can teach the shell new commands by
registering a name and a callback.  Custom commands take priority
over the built-ins and over external programs, so a registered
``ls`` shadows ``/bin/ls``.

Design choices:
    - **Bounded** — the registry holds at most ``capacity`` entries;
      registering past that raises ``CUSTOM_COMMAND_FULL`` and leaves
      the existing entries untouched.
    - **No duplicates** — registering a name twice is rejected rather
      than silently shadowing or replacing the first entry.
    - **Insertion-ordered dict** — lookup is O(1) and ``names()``
      reports commands in the order they were registered.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from py_sh.parser import REDIRECTION_OPERATORS
from py_sh.status import ShellError, ShellStatus

if TYPE_CHECKING:
    from py_sh.shell import Shell

# A custom command receives the shell and the full argv (argv[0] is the
# command name).  Returning None is the same as returning OK.
CommandCallback: TypeAlias = Callable[["Shell", list[str]], ShellStatus | None]


@dataclass(frozen=True)
class CustomCommand:
    """A registered custom command.

    Attributes:
        name: The command word that triggers it.
        callback: The handler invoked with ``(shell, argv)``.

    """

    name: str
    callback: CommandCallback


class CommandRegistry:
    """Fixed-capacity mapping from command names to callbacks."""

    def __init__(self, *, capacity: int) -> None:
        """Create an empty registry holding at most *capacity* commands."""
        self._capacity = capacity
        self._commands: dict[str, CustomCommand] = {}

    @property
    def capacity(self) -> int:
        """Return the maximum number of commands."""
        return self._capacity

    def register(self, name: str, callback: CommandCallback) -> CustomCommand:
        """Register *callback* under *name*.

        Raises:
            ShellError: ``INVALID_INPUT`` for a bad name, a non-callable
                callback or a duplicate name; ``CUSTOM_COMMAND_FULL``
                when the registry is at capacity.

        """
        if not name or any(ch.isspace() for ch in name):
            msg = f"invalid command name: {name!r}"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if name in REDIRECTION_OPERATORS:
            msg = f"'{name}' is a redirection operator"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if not callable(callback):
            msg = f"callback for '{name}' is not callable"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if name in self._commands:
            msg = f"command '{name}' is already registered"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if len(self._commands) >= self._capacity:
            msg = f"custom command table full ({self._capacity} entries)"
            raise ShellError(ShellStatus.CUSTOM_COMMAND_FULL, msg)

        command = CustomCommand(name=name, callback=callback)
        self._commands[name] = command
        return command

    def get(self, name: str) -> CustomCommand | None:
        """Return the command registered as *name*, or None."""
        return self._commands.get(name)

    def names(self) -> list[str]:
        """Return registered names in registration order."""
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        """Return True if *name* is registered."""
        return name in self._commands

    def __len__(self) -> int:
        """Return the number of registered commands."""
        return len(self._commands)
