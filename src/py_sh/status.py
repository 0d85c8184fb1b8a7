"""Status codes and the shell error type.

Every public shell operation reports its outcome as a ``ShellStatus``.
Internally, the leaf stores (registry, job table, history, environment)
raise ``ShellError`` carrying one of these codes; the ``Shell`` catches
them at its API boundary, records the code as ``last_error``, and
returns it.

Design choices:
    - **StrEnum** so statuses print and serialise (JSON, logs) as
      readable strings.
    - **One exception class** for all shell failures.  The status code
      distinguishes them, so callers match on ``error.status`` rather
      than on a zoo of subclasses.
"""

from enum import StrEnum


class ShellStatus(StrEnum):
    """Outcome of a shell operation."""

    OK = "ok"
    INVALID_INPUT = "invalid-input"
    INVALID_SYNTAX = "invalid-syntax"
    COMMAND_NOT_FOUND = "command-not-found"
    EXECUTION_FAILED = "execution-failed"
    SIGNAL_HANDLING_FAILED = "signal-handling-failed"
    HISTORY_FULL = "history-full"
    ENV_VAR_NOT_FOUND = "env-var-not-found"
    ENV_VAR_FULL = "env-var-full"
    CUSTOM_COMMAND_FULL = "custom-command-full"
    JOB_CONTROL_FULL = "job-control-full"
    ALIAS_FULL = "alias-full"
    TAB_COMPLETION_FAILED = "tab-completion-failed"

    @property
    def is_capacity_error(self) -> bool:
        """Return True for the "table is full" family of statuses."""
        return self in _CAPACITY_ERRORS


_CAPACITY_ERRORS: frozenset[ShellStatus] = frozenset(
    {
        ShellStatus.HISTORY_FULL,
        ShellStatus.ENV_VAR_FULL,
        ShellStatus.CUSTOM_COMMAND_FULL,
        ShellStatus.JOB_CONTROL_FULL,
        ShellStatus.ALIAS_FULL,
    }
)


class ShellError(Exception):
    """Raised by shell internals when an operation fails.

    Attributes:
        status: The status code describing the failure.

    """

    def __init__(self, status: ShellStatus, message: str) -> None:
        """Create an error with a status code and a human-readable message."""
        super().__init__(message)
        self.status = status
