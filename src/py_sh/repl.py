"""Interactive REPL (Read-Eval-Print Loop) for the shell.

The REPL is the thin I/O wrapper around ``Shell``:

    1. **Poll** — reap finished background jobs and announce them.
    2. **Read** — show the prompt (interactive mode only) and read a line.
    3. **Record** — add the line to history.
    4. **Eval** — pass it to ``shell.execute()``.

The loop ends on end-of-input (Ctrl+D, or the end of a piped script),
which is a clean exit, or when the ``exit`` built-in raises
``SystemExit``.

The helpers (``build_parser``, ``build_config``, ``create_shell``,
``cmd_hello``) are pure and testable; ``run()`` is the I/O entrypoint.
"""

import argparse
import readline
import sys
import threading

from py_sh.completer import Completer
from py_sh.config import ShellConfig
from py_sh.shell import Shell
from py_sh.status import ShellStatus

_DEFAULT_MONITOR_HOST = "127.0.0.1"


def cmd_hello(shell: Shell, argv: list[str]) -> ShellStatus:
    """Greet the first argument, or the world."""
    name = argv[1] if len(argv) > 1 else "world"
    print(f"Hello, {name}!", file=shell.stdout)
    return ShellStatus.OK


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser for ``py-sh``."""
    parser = argparse.ArgumentParser(
        prog="py-sh", description="A small embeddable command shell."
    )
    parser.add_argument("--prompt", default=ShellConfig.prompt, help="prompt string")
    parser.add_argument(
        "--interactive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="show a prompt before each line (default: when stdin is a terminal)",
    )
    parser.add_argument(
        "--monitor-port",
        type=int,
        default=None,
        metavar="PORT",
        help="serve the monitoring API on PORT (needs the 'web' extra)",
    )
    return parser


def build_config(args: argparse.Namespace, *, isatty: bool) -> ShellConfig:
    """Turn parsed arguments into a ``ShellConfig``."""
    interactive = isatty if args.interactive is None else args.interactive
    return ShellConfig(prompt=args.prompt, interactive=interactive)


def create_shell(config: ShellConfig) -> Shell:
    """Create a shell with the stock custom commands registered."""
    shell = Shell(config)
    shell.register_command("hello", cmd_hello)
    return shell


def _start_monitor(shell: Shell, port: int) -> None:
    """Serve the monitoring API for *shell* from a daemon thread."""
    from py_sh.web.app import create_app  # noqa: PLC0415

    app = create_app(shell)
    thread = threading.Thread(
        target=app.run,
        kwargs={"host": _DEFAULT_MONITOR_HOST, "port": port, "use_reloader": False},
        daemon=True,
        name="py-sh-monitor",
    )
    thread.start()


def run(argv: list[str] | None = None) -> None:
    """Parse options and run the read loop until end of input.

    This is the ``py-sh`` console entry point.
    """
    args = build_parser().parse_args(argv)
    config = build_config(args, isatty=sys.stdin.isatty())
    shell = create_shell(config)

    if config.interactive:
        # Wire up tab completion via readline.
        completer = Completer(shell)
        readline.set_completer(completer.complete)
        readline.set_completer_delims(" \t")
        readline.parse_and_bind("tab: complete")

    if args.monitor_port is not None:
        _start_monitor(shell, args.monitor_port)

    try:
        while True:
            shell.poll_jobs()
            try:
                line = input(shell.prompt if shell.interactive else "")
            except EOFError:
                # Ctrl+D or end of script — clean exit
                if shell.interactive:
                    print()  # noqa: T201
                break
            shell.add_history(line)
            shell.execute(line)

    except KeyboardInterrupt:
        # Ctrl+C — graceful exit
        print("\nInterrupted.")  # noqa: T201
