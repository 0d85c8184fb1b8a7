"""Session environment — the variables handed to every child process.

Each shell owns its own ``Environment``, seeded from the process
environment at startup.  Changes made through the shell never touch
``os.environ``; instead the executor passes a snapshot of this store to
each child it spawns.  That keeps two shells in one process
independent of each other.

Key design properties:
    - **Strings only** — keys and values are strings.
    - **Bounded overrides** — at most ``capacity`` variables may be
      *defined through the shell*.  Inherited variables do not count
      against the limit, and overwriting an existing key never fails.
    - **Keys and values are validated** — empty keys, keys containing
      ``=`` and NUL bytes anywhere cannot be represented in a child's
      environment block.
"""

from collections.abc import Mapping

from py_sh.status import ShellError, ShellStatus


class Environment:
    """A bounded key-value store for environment variables."""

    def __init__(self, initial: Mapping[str, str] | None = None, *, capacity: int) -> None:
        """Create an environment, optionally pre-populated.

        Args:
            initial: Inherited variables (copied, not referenced).
            capacity: Maximum number of variables defined via ``set``.

        """
        self._vars: dict[str, str] = dict(initial) if initial else {}
        self._defined: set[str] = set()
        self._capacity = capacity

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value for *key*, or *default* if not set."""
        return self._vars.get(key, default)

    def set(self, key: str, value: str) -> None:
        """Set *key* to *value* (creates or overwrites).

        Raises:
            ShellError: ``INVALID_INPUT`` for a malformed key or a value
                containing NUL, ``ENV_VAR_FULL`` when a new key would exceed capacity.

        """
        if not key or "=" in key or "\0" in key:
            msg = f"invalid environment variable name: {key!r}"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if "\0" in value:
            msg = f"environment variable {key!r} has a NUL byte in its value"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if key not in self._vars and len(self._defined) >= self._capacity:
            msg = f"environment table full ({self._capacity} variables)"
            raise ShellError(ShellStatus.ENV_VAR_FULL, msg)
        self._vars[key] = value
        self._defined.add(key)

    def delete(self, key: str) -> None:
        """Remove *key* from the environment.

        Raises:
            ShellError: ``ENV_VAR_NOT_FOUND`` if *key* does not exist.

        """
        if key not in self._vars:
            msg = f"environment variable '{key}' not set"
            raise ShellError(ShellStatus.ENV_VAR_NOT_FOUND, msg)
        del self._vars[key]
        self._defined.discard(key)

    def snapshot(self) -> dict[str, str]:
        """Return an independent copy suitable for a child process."""
        return dict(self._vars)

    def __contains__(self, key: object) -> bool:
        """Return True if *key* is set."""
        return key in self._vars

    def __len__(self) -> int:
        """Return the number of variables."""
        return len(self._vars)
