"""Flask application factory for the py-sh monitoring API.

The ``create_app`` function wraps a shell and returns a Flask app with
these endpoints:

- ``GET /`` — plain-text summary of the session.
- ``GET /api/status`` — last error, table sizes and capacities.
- ``GET /api/jobs`` — every tracked job with its status.
- ``GET /api/history`` — recorded command lines.
- ``GET /api/log`` — audit log, filterable by ``level`` and ``source``.
"""

from __future__ import annotations

from typing import Any

from flask import Flask, Response, jsonify, request

from py_sh.config import ShellConfig
from py_sh.logging import LogLevel
from py_sh.shell import Shell

_HTTP_BAD_REQUEST = 400


def create_app(shell: Shell | None = None) -> Flask:
    """Create the monitoring application for *shell*.

    Args:
        shell: The session to observe; a fresh non-interactive one
            is created when omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    if shell is None:
        shell = Shell(ShellConfig(interactive=False))

    app = Flask(__name__)

    @app.route("/")
    def index() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return a one-screen text summary."""
        running = sum(1 for job in shell.jobs if job.running)
        lines = [
            "py-sh monitor",
            f"jobs: {len(shell.jobs)} ({running} running)",
            f"history: {len(shell.history)} entries",
            f"last error: {shell.last_error}",
        ]
        return Response("\n".join(lines) + "\n", mimetype="text/plain")

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return session status as JSON."""
        data: dict[str, Any] = {
            "last_error": str(shell.last_error),
            "interactive": shell.interactive,
            "commands": shell.command_names,
        }
        for table, (count, capacity) in shell.usage.items():
            data[table] = {"count": count, "capacity": capacity}
        return jsonify(data)

    @app.route("/api/jobs")
    def jobs() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the job table as JSON."""
        return jsonify(
            [
                {
                    "id": job.job_id,
                    "pid": job.pid,
                    "command": job.command,
                    "line": job.line,
                    "status": str(job.status),
                    "exit_code": job.exit_code,
                }
                for job in shell.jobs
            ]
        )

    @app.route("/api/history")
    def history() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return command history as JSON."""
        return jsonify(shell.history)

    @app.route("/api/log")
    def log() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return audit log entries as JSON.

        Query parameters ``level`` (DEBUG/INFO/WARNING/ERROR) and
        ``source`` narrow the result.
        """
        level_name = request.args.get("level")
        min_level: LogLevel | None = None
        if level_name is not None:
            try:
                min_level = LogLevel[level_name.upper()]
            except KeyError:
                return jsonify({"error": f"Unknown level '{level_name}'"}), _HTTP_BAD_REQUEST

        entries = shell.logger.filter(min_level=min_level, source=request.args.get("source"))
        return jsonify(
            [
                {
                    "level": entry.level.name,
                    "source": entry.source,
                    "message": entry.message,
                    "status": None if entry.status is None else str(entry.status),
                }
                for entry in entries
            ]
        )

    return app
