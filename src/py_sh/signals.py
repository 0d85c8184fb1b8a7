"""Signal masking around process creation.

Between creating a child and recording it in the job table, the shell
must not be interrupted by SIGINT/SIGTERM handlers that might inspect
half-updated bookkeeping.  ``blocked_signals`` holds a signal set off
with ``pthread_sigmask`` for the duration of a ``with`` block and then
restores the previous mask; signals that arrived meanwhile are
delivered on restore.

The child never inherits the blocked set: the executor spawns it with
an empty mask and default dispositions for these signals.
"""

import contextlib
import signal
from collections.abc import Iterable, Iterator

from py_sh.status import ShellError, ShellStatus


@contextlib.contextmanager
def blocked_signals(signals: Iterable[signal.Signals]) -> Iterator[set[signal.Signals]]:
    """Block *signals* in the calling thread for the body of the block.

    Yields:
        The mask that was in effect before blocking.

    Raises:
        ShellError: ``SIGNAL_HANDLING_FAILED`` if the mask cannot be
            changed or restored.

    """
    try:
        previous = signal.pthread_sigmask(signal.SIG_BLOCK, signals)
    except (OSError, ValueError) as e:
        msg = f"cannot block signals: {e}"
        raise ShellError(ShellStatus.SIGNAL_HANDLING_FAILED, msg) from e

    try:
        yield previous
    finally:
        try:
            signal.pthread_sigmask(signal.SIG_SETMASK, previous)
        except (OSError, ValueError) as e:
            msg = f"cannot restore signal mask: {e}"
            raise ShellError(ShellStatus.SIGNAL_HANDLING_FAILED, msg) from e
