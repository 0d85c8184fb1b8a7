"""The shell — command resolution and execution for one session.

A ``Shell`` takes a line of text, splits it into tokens, strips out
I/O redirections, and hands the result to the first of three
strategies that claims it:

    1. **Custom** — a callback registered by the embedding program.
    2. **Built-in** — ``exit``, ``history`` or ``jobs``.
    3. **External** — a program found on the session's ``PATH``,
       started in the background and recorded as a job.

If none of them claims the command, the result is
``COMMAND_NOT_FOUND``.

Design choices:
    - **Two outcomes per strategy.**  A strategy returns ``None`` when
      the command is not its own, or a status when it handled the
      command, even if that status is a failure.  A failing custom
      command therefore never falls through to ``/bin/<name>``.
    - **Statuses, not exceptions, at the boundary.**  Internals raise
      ``ShellError``; every public method catches it, records it as
      ``last_error``, logs it, and returns the status.  A failed
      command aborts only itself; the session carries on.
    - **Fire and forget.**  External commands are never waited for.
      ``poll_jobs()`` reaps them later, without blocking.
    - **Session-scoped state.**  History, environment, aliases, custom
      commands and jobs all belong to this instance; nothing is
      written to ``os.environ``.
"""

import contextlib
import os
import sys
from collections.abc import Callable, Iterator, Mapping
from typing import TextIO, TypeAlias

from py_sh.aliases import AliasTable
from py_sh.config import ShellConfig
from py_sh.env import Environment
from py_sh.executor import describe_failure, open_input, open_output, resolve_executable, spawn
from py_sh.history import History
from py_sh.jobs import Job, JobTable
from py_sh.logging import Logger, LogLevel
from py_sh.parser import ParsedCommand, extract_redirections, tokenize
from py_sh.registry import CommandCallback, CommandRegistry
from py_sh.signals import blocked_signals
from py_sh.status import ShellError, ShellStatus

# A built-in handler takes the arguments after the command name.
_Handler: TypeAlias = Callable[[list[str]], ShellStatus]

# None means "not mine"; any status means the strategy ran the command.
_Outcome: TypeAlias = ShellStatus | None


class Shell:
    """One shell session: its tables, its log and its dispatch logic."""

    BUILTINS: tuple[str, ...] = ("exit", "history", "jobs")

    def __init__(
        self,
        config: ShellConfig | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Create a session.

        Args:
            config: Prompt, interactivity and capacities.
            environ: Initial environment; defaults to ``os.environ``.
            stdout: Stream for command output and job notices.
            stderr: Stream for error messages.

        """
        self._config = config if config is not None else ShellConfig()
        self._out: TextIO = stdout if stdout is not None else sys.stdout
        self._err: TextIO = stderr if stderr is not None else sys.stderr
        self._in: TextIO | None = None
        self._last_error = ShellStatus.OK

        self._log = Logger()
        self._history = History(capacity=self._config.history_capacity)
        self._env = Environment(
            os.environ if environ is None else environ,
            capacity=self._config.env_capacity,
        )
        self._commands = CommandRegistry(capacity=self._config.command_capacity)
        self._aliases = AliasTable(capacity=self._config.alias_capacity)
        self._jobs = JobTable(capacity=self._config.job_capacity)

        self._builtins: dict[str, _Handler] = {
            "exit": self._cmd_exit,
            "history": self._cmd_history,
            "jobs": self._cmd_jobs,
        }

    # -- Session state ---------------------------------------------------

    @property
    def config(self) -> ShellConfig:
        """Return the session configuration."""
        return self._config

    @property
    def prompt(self) -> str:
        """Return the prompt string."""
        return self._config.prompt

    @property
    def interactive(self) -> bool:
        """Return True if the front end should show a prompt."""
        return self._config.interactive

    @property
    def last_error(self) -> ShellStatus:
        """Return the status of the most recent failure (``OK`` if none).

        Overwritten by every public call; check return values instead
        of relying on this.
        """
        return self._last_error

    @property
    def stdout(self) -> TextIO:
        """Return the current output stream (redirected while a command runs)."""
        return self._out

    @property
    def stdin(self) -> TextIO:
        """Return the current input stream (redirected while a command runs)."""
        return self._in if self._in is not None else sys.stdin

    @property
    def logger(self) -> Logger:
        """Return the session's audit log."""
        return self._log

    @property
    def history(self) -> list[str]:
        """Return recorded command lines, oldest first."""
        return self._history.entries

    @property
    def jobs(self) -> list[Job]:
        """Return tracked jobs in insertion order."""
        return self._jobs.list_jobs()

    @property
    def command_names(self) -> list[str]:
        """Return every name the shell resolves without a ``PATH`` search."""
        names = {*self._commands.names(), *self.BUILTINS, *self._aliases.names()}
        return sorted(names)

    @property
    def usage(self) -> dict[str, tuple[int, int]]:
        """Return ``(count, capacity)`` for each bounded table."""
        return {
            "jobs": (len(self._jobs), self._jobs.capacity),
            "history": (len(self._history), self._history.capacity),
            "custom_commands": (len(self._commands), self._commands.capacity),
        }

    def record_failure(self, error: ShellError, *, source: str, report: bool = True) -> ShellStatus:
        """Record *error* as the last error, log it and return its status.

        Args:
            error: The failure to record.
            source: Component name for the log entry.
            report: Also print the message on the error stream.

        """
        self._last_error = error.status
        level = LogLevel.WARNING if error.status.is_capacity_error else LogLevel.ERROR
        self._log.log(level, str(error), source=source, status=error.status)
        if report:
            print(f"py-sh: {error}", file=self._err)
        return error.status

    # -- Collaborator interfaces -------------------------------------------

    def register_command(self, name: str, callback: CommandCallback) -> ShellStatus:
        """Register a custom command.

        Returns:
            ``OK``, ``CUSTOM_COMMAND_FULL``, or ``INVALID_INPUT`` (bad
            name, non-callable callback, or a name already registered).

        """
        self._last_error = ShellStatus.OK
        try:
            self._commands.register(name, callback)
        except ShellError as e:
            return self.record_failure(e, source="registry", report=False)
        self._log.log(LogLevel.INFO, f"registered command '{name}'", source="registry")
        return ShellStatus.OK

    def register_alias(self, name: str, value: str) -> ShellStatus:
        """Define alias *name* as *value*; return ``OK``, ``ALIAS_FULL`` or ``INVALID_INPUT``."""
        self._last_error = ShellStatus.OK
        try:
            self._aliases.set(name, value)
        except ShellError as e:
            return self.record_failure(e, source="aliases", report=False)
        self._log.log(LogLevel.DEBUG, f"alias {name}={value}", source="aliases")
        return ShellStatus.OK

    def add_history(self, line: str) -> ShellStatus:
        """Append *line* to history; blank lines are ignored.

        Returns:
            ``OK`` or ``HISTORY_FULL``.

        """
        self._last_error = ShellStatus.OK
        try:
            self._history.add(line)
        except ShellError as e:
            return self.record_failure(e, source="history", report=False)
        return ShellStatus.OK

    def get_env(self, key: str) -> str | None:
        """Return the value of environment variable *key*, or None."""
        return self._env.get(key)

    def set_env(self, key: str, value: str) -> ShellStatus:
        """Set *key* to *value*; return ``OK``, ``ENV_VAR_FULL`` or ``INVALID_INPUT``."""
        self._last_error = ShellStatus.OK
        try:
            self._env.set(key, value)
        except ShellError as e:
            return self.record_failure(e, source="env", report=False)
        return ShellStatus.OK

    def unset_env(self, key: str) -> ShellStatus:
        """Remove *key*; return ``OK`` or ``ENV_VAR_NOT_FOUND``."""
        self._last_error = ShellStatus.OK
        try:
            self._env.delete(key)
        except ShellError as e:
            return self.record_failure(e, source="env", report=False)
        return ShellStatus.OK

    def add_job(self, pid: int, command: str, line: str = "") -> ShellStatus:
        """Track process *pid* as a job labelled *command*.

        Returns:
            ``OK``, ``JOB_CONTROL_FULL`` or ``INVALID_INPUT``.  A full
            table never affects the process itself.

        """
        self._last_error = ShellStatus.OK
        try:
            job = self._jobs.add(pid=pid, command=command, line=line or command)
        except ShellError as e:
            return self.record_failure(e, source="jobs")
        self._log.log(
            LogLevel.DEBUG, f"job [{job.job_id}] tracks pid {pid} ({command})", source="jobs"
        )
        return ShellStatus.OK

    def poll_jobs(self) -> list[Job]:
        """Reap finished jobs without blocking and announce each one.

        Returns:
            The jobs that finished since the previous poll.

        """
        finished = self._jobs.poll()
        for job in finished:
            print(f"[{job.job_id}] Done: {job.command}", file=self._out)
            self._log.log(
                LogLevel.INFO,
                f"job [{job.job_id}] {job.command} (pid {job.pid}) exited "
                f"with status {job.exit_code}",
                source="jobs",
            )
        return finished

    # -- Command execution -------------------------------------------------

    def execute(self, line: str) -> ShellStatus:
        """Parse and run one command line.

        Args:
            line: The raw command line, e.g. ``"cat < in.txt > out.txt"``.

        Returns:
            The status of the strategy that handled the command, or
            ``COMMAND_NOT_FOUND`` / ``INVALID_SYNTAX`` if none could.

        """
        self._last_error = ShellStatus.OK
        try:
            tokens = self._aliases.expand(tokenize(line))
            command = extract_redirections(tokens, line=line.strip())
        except ShellError as e:
            return self.record_failure(e, source="parser")

        if command.name is None:
            self._last_error = ShellStatus.COMMAND_NOT_FOUND
            return ShellStatus.COMMAND_NOT_FOUND

        strategies: tuple[tuple[str, Callable[[ParsedCommand], _Outcome]], ...] = (
            ("custom", self._run_custom),
            ("builtin", self._run_builtin),
            ("executor", self._run_external),
        )
        for source, strategy in strategies:
            try:
                outcome = strategy(command)
            except ShellError as e:
                return self.record_failure(e, source=source)
            if outcome is not None:
                if outcome is not ShellStatus.OK:
                    self._last_error = outcome
                    self._log.log(
                        LogLevel.WARNING,
                        f"{command.name} finished unsuccessfully",
                        source=source,
                        status=outcome,
                    )
                return outcome

        msg = f"{command.name}: command not found"
        return self.record_failure(ShellError(ShellStatus.COMMAND_NOT_FOUND, msg), source="shell")

    def _run_custom(self, command: ParsedCommand) -> _Outcome:
        """Run a registered custom command, if *command* names one."""
        entry = self._commands.get(command.argv[0])
        if entry is None:
            return None
        with self._redirected(command):
            try:
                status = entry.callback(self, list(command.argv))
            except Exception as e:
                msg = f"{command.argv[0]}: {type(e).__name__}: {e}"
                raise ShellError(ShellStatus.EXECUTION_FAILED, msg) from e
        if status is None:
            return ShellStatus.OK
        if not isinstance(status, ShellStatus):
            msg = f"{command.argv[0]}: callback returned {status!r}, not a ShellStatus"
            raise ShellError(ShellStatus.EXECUTION_FAILED, msg)
        return status

    def _run_builtin(self, command: ParsedCommand) -> _Outcome:
        """Run a built-in, if *command* names one."""
        handler = self._builtins.get(command.argv[0])
        if handler is None:
            return None
        with self._redirected(command):
            return handler(list(command.argv[1:]))

    def _run_external(self, command: ParsedCommand) -> _Outcome:
        """Spawn a program from ``PATH`` and record it as a job."""
        env = self._env.snapshot()
        executable = resolve_executable(command.argv[0], env)
        if executable is None:
            return None

        blocked = self._config.blocked_signals
        with blocked_signals(blocked):
            pid = spawn(
                executable,
                command.argv,
                env=env,
                stdin=command.stdin,
                stdout=command.stdout,
                append=command.append,
                reset_signals=blocked,
            )
            self._log.log(
                LogLevel.INFO, f"spawned {command.argv[0]} (pid {pid})", source="executor"
            )
            self._jobs.add(pid=pid, command=command.argv[0], line=command.line)
        return ShellStatus.OK

    @contextlib.contextmanager
    def _redirected(self, command: ParsedCommand) -> Iterator[None]:
        """Point ``stdin``/``stdout`` at the command's redirection files."""
        with contextlib.ExitStack() as stack:
            saved = self._in, self._out
            try:
                if command.stdin is not None:
                    self._in = stack.enter_context(os.fdopen(open_input(command.stdin)))
                if command.stdout is not None:
                    fd = open_output(command.stdout, append=command.append)
                    self._out = stack.enter_context(os.fdopen(fd, "w"))
            except (OSError, ValueError) as e:
                self._in, self._out = saved
                msg = f"{command.argv[0]}: cannot open redirection file: {describe_failure(e)}"
                raise ShellError(ShellStatus.EXECUTION_FAILED, msg) from e
            try:
                yield
            finally:
                self._in, self._out = saved

    # -- Built-in commands -------------------------------------------------

    def _cmd_exit(self, _args: list[str]) -> ShellStatus:
        """Terminate the shell process."""
        self._log.log(LogLevel.INFO, "exit", source="builtin")
        raise SystemExit(0)

    def _cmd_history(self, _args: list[str]) -> ShellStatus:
        """Print history with 1-based indices."""
        for index, entry in enumerate(self._history.entries, start=1):
            print(f"{index}: {entry}", file=self._out)
        return ShellStatus.OK

    def _cmd_jobs(self, _args: list[str]) -> ShellStatus:
        """Poll for finished jobs, then list every job."""
        self.poll_jobs()
        for job in self._jobs.list_jobs():
            print(job, file=self._out)
        return ShellStatus.OK
