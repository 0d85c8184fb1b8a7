"""Browser-facing monitoring API for a py-sh session.

This package provides a Flask application that exposes a running
shell's jobs, history and audit log to external monitoring tools.  It
is an **optional** extra — install with::

    pip install py-sh[web]

and start it alongside the REPL with ``py-sh --monitor-port 8080``.
The endpoints are read-only: they never run commands and never reap
jobs, so they do not race the shell's own ``poll_jobs()``.
"""
