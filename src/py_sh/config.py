"""Shell configuration — prompt, interactivity and table capacities.

Every bounded table in the shell takes its size from ``ShellConfig``.
The defaults match a classic small shell: 100 history lines, 100
shell-defined environment variables, 50 custom commands, 100 jobs,
50 aliases, and at most 100 tab-completion candidates.
"""

import signal
from dataclasses import dataclass, field

_DEFAULT_BLOCKED_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


@dataclass(frozen=True)
class ShellConfig:
    """Immutable settings for one shell session.

    Attributes:
        prompt: Printed before each read in interactive mode.
        interactive: Whether the front end shows a prompt.
        history_capacity: Maximum history entries.
        env_capacity: Maximum variables defined through the shell.
        command_capacity: Maximum custom commands.
        job_capacity: Maximum tracked jobs.
        alias_capacity: Maximum aliases.
        completion_limit: Maximum tab-completion candidates.
        blocked_signals: Signals held off while a child is spawned.

    """

    prompt: str = "> "
    interactive: bool = True
    history_capacity: int = 100
    env_capacity: int = 100
    command_capacity: int = 50
    job_capacity: int = 100
    alias_capacity: int = 50
    completion_limit: int = 100
    blocked_signals: tuple[signal.Signals, ...] = field(default=_DEFAULT_BLOCKED_SIGNALS)

    def __post_init__(self) -> None:
        """Reject non-positive capacities.

        Raises:
            ValueError: If any capacity is less than 1.

        """
        for name in (
            "history_capacity",
            "env_capacity",
            "command_capacity",
            "job_capacity",
            "alias_capacity",
            "completion_limit",
        ):
            value: int = getattr(self, name)
            if value < 1:
                msg = f"{name} must be positive, got {value}"
                raise ValueError(msg)
