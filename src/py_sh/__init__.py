"""py-sh — an embeddable command shell.

Re-exports public symbols so callers can write::

    from py_sh import Shell, ShellConfig, ShellStatus
"""

from py_sh.config import ShellConfig
from py_sh.jobs import Job, JobStatus, JobTable
from py_sh.parser import ParsedCommand, parse_command, tokenize
from py_sh.registry import CommandCallback, CustomCommand
from py_sh.shell import Shell
from py_sh.status import ShellError, ShellStatus

__all__ = [
    "CommandCallback",
    "CustomCommand",
    "Job",
    "JobStatus",
    "JobTable",
    "ParsedCommand",
    "Shell",
    "ShellConfig",
    "ShellError",
    "ShellStatus",
    "parse_command",
    "tokenize",
]
