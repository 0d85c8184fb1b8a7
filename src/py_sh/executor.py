"""External command execution — resolving and spawning programs.

Anything that is neither a custom command nor a built-in is looked up
as a program on the session's ``PATH`` and started as a child process
with ``os.posix_spawn``.  The shell does not wait for it; the caller
records the PID in the job table and moves on.

Redirection targets are opened in the shell *before* spawning, so a
missing input file or an unwritable output file is reported as an
ordinary failure and no child is created.  The opened descriptors are
duplicated onto the child's stdin/stdout with ``POSIX_SPAWN_DUP2`` file
actions and closed in the shell once the child exists.

Design choices:
    - **posix_spawn, not fork/exec** — the child image is replaced in
      one step, and file and signal setup are declared up front.
    - **Session environment, not os.environ** — the child receives the
      mapping it is given, so separate shells stay independent.
    - **Signals reset in the child** — the child starts with an empty
      signal mask and default handlers for the shell's blocked set.
"""

import contextlib
import os
import shutil
from collections.abc import Iterable, Mapping, Sequence

from py_sh.status import ShellError, ShellStatus

_OUTPUT_MODE = 0o644


def describe_failure(error: OSError | ValueError) -> str:
    """Return a short reason for a failed open or spawn.

    ``os`` raises ``ValueError`` rather than ``OSError`` for a path or
    argument with an embedded NUL byte.
    """
    if isinstance(error, OSError) and error.strerror:
        if error.filename is not None:
            return f"{error.strerror} ({error.filename})"
        return error.strerror
    return str(error)


def resolve_executable(name: str, env: Mapping[str, str]) -> str | None:
    """Find the program *name* on the ``PATH`` in *env*.

    A name containing ``/`` is checked as a path instead of searched.

    Returns:
        The path to execute, or None if nothing executable matches.

    """
    if not name:
        return None
    return shutil.which(name, path=env.get("PATH", os.defpath))


def open_input(path: str) -> int:
    """Open *path* read-only for input redirection."""
    return os.open(path, os.O_RDONLY)


def open_output(path: str, *, append: bool) -> int:
    """Open *path* for output redirection, creating it if needed.

    The file is truncated unless *append* is set, in which case every
    write goes to the end of the file.
    """
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    return os.open(path, flags, _OUTPUT_MODE)


def spawn(
    executable: str,
    argv: Sequence[str],
    *,
    env: Mapping[str, str],
    stdin: str | None = None,
    stdout: str | None = None,
    append: bool = False,
    reset_signals: Iterable[int] = (),
) -> int:
    """Start *executable* as a child process and return its PID.

    Args:
        executable: Path to the program (from ``resolve_executable``).
        argv: Full argument vector; ``argv[0]`` is the command name.
        env: The complete environment for the child.
        stdin: File to connect to the child's standard input.
        stdout: File to connect to the child's standard output.
        append: Open *stdout* in append mode instead of truncating.
        reset_signals: Signals restored to their default action in
            the child.

    Raises:
        ShellError: ``EXECUTION_FAILED`` if a redirection file cannot
            be opened or the program cannot be started.

    """
    with contextlib.ExitStack() as stack:
        file_actions: list[tuple[int, int, int]] = []
        try:
            if stdin is not None:
                fd = open_input(stdin)
                stack.callback(os.close, fd)
                file_actions.append((os.POSIX_SPAWN_DUP2, fd, 0))
            if stdout is not None:
                fd = open_output(stdout, append=append)
                stack.callback(os.close, fd)
                file_actions.append((os.POSIX_SPAWN_DUP2, fd, 1))
        except (OSError, ValueError) as e:
            msg = f"{argv[0]}: cannot open redirection file: {describe_failure(e)}"
            raise ShellError(ShellStatus.EXECUTION_FAILED, msg) from e

        try:
            return os.posix_spawn(
                executable,
                list(argv),
                dict(env),
                file_actions=file_actions,
                setsigmask=(),
                setsigdef=tuple(reset_signals),
            )
        except (OSError, ValueError) as e:
            msg = f"{argv[0]}: cannot execute: {describe_failure(e)}"
            raise ShellError(ShellStatus.EXECUTION_FAILED, msg) from e
