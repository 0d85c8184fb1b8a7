"""Command aliases — short names that expand to longer commands.

An alias replaces the *first word* of a command line with its tokens,
keeping the remaining arguments: with ``ll`` aliased to ``ls -l``,
``ll /tmp`` runs ``ls -l /tmp``.  Expansion happens once; an alias
whose replacement starts with another alias is not expanded again.
"""

from py_sh.parser import REDIRECTION_OPERATORS, tokenize
from py_sh.status import ShellError, ShellStatus


class AliasTable:
    """Bounded mapping from alias names to replacement text."""

    def __init__(self, *, capacity: int) -> None:
        """Create an empty alias table holding at most *capacity* aliases."""
        self._capacity = capacity
        self._aliases: dict[str, str] = {}

    def set(self, name: str, value: str) -> None:
        """Define or redefine alias *name*.

        Raises:
            ShellError: ``INVALID_INPUT`` for a bad name or empty value,
                ``ALIAS_FULL`` when a new name would exceed capacity.

        """
        if not name or any(ch.isspace() for ch in name) or name in REDIRECTION_OPERATORS:
            msg = f"invalid alias name: {name!r}"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if not tokenize(value):
            msg = f"alias '{name}' has an empty value"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if name not in self._aliases and len(self._aliases) >= self._capacity:
            msg = f"alias table full ({self._capacity} aliases)"
            raise ShellError(ShellStatus.ALIAS_FULL, msg)
        self._aliases[name] = value

    def get(self, name: str) -> str | None:
        """Return the replacement text for *name*, or None."""
        return self._aliases.get(name)

    def expand(self, tokens: list[str]) -> list[str]:
        """Return *tokens* with an aliased first word replaced."""
        if not tokens or tokens[0] not in self._aliases:
            return tokens
        return tokenize(self._aliases[tokens[0]]) + tokens[1:]

    def names(self) -> list[str]:
        """Return alias names, sorted."""
        return sorted(self._aliases)

    def __len__(self) -> int:
        """Return the number of aliases."""
        return len(self._aliases)
