"""Job table — tracking spawned external processes.

Every external command the shell starts becomes a *job*: the child's
PID plus the command that started it.  The shell never waits for a
child; instead it *polls* the table (before each prompt and when the
``jobs`` built-in runs) and reports the ones that have finished.

Key ideas:
    - **Jobs are not processes** — a job is the shell's bookkeeping
      record for a process it spawned, with a small 1-based number.
    - **Non-blocking reaping** — ``poll()`` calls ``waitpid`` with
      ``WNOHANG`` on each running job.  A finished child is reaped
      (no zombies) and its job flips to DONE.
    - **Bounded** — the table holds at most ``capacity`` jobs.  Slots
      are never reused; once full, ``add()`` fails and the caller
      decides what to do.  The table never kills a child.

Design choices:
    - ``JobTable`` is owned by the shell, one per session.
    - Job numbers come from ``itertools.count`` so they match the
      insertion order that ``poll()`` reports in.
"""

import os
from dataclasses import dataclass
from enum import StrEnum
from itertools import count

from py_sh.status import ShellError, ShellStatus


class JobStatus(StrEnum):
    """Status of a shell job."""

    RUNNING = "running"
    DONE = "done"


@dataclass
class Job:
    """A tracked external process.

    Attributes:
        job_id: Small human-friendly job number ([1], [2], ...).
        pid: The child's process id.
        command: The command name the job was started with.
        line: The full command line, when known.
        status: Last-known status.
        exit_code: Exit code once DONE (negative for a signal, None if
            the child was reaped by someone else).

    """

    job_id: int
    pid: int
    command: str
    line: str = ""
    status: JobStatus = JobStatus.RUNNING
    exit_code: int | None = None

    @property
    def running(self) -> bool:
        """Return True while the job has not been observed to exit."""
        return self.status is JobStatus.RUNNING

    def __str__(self) -> str:
        """Format as ``[id] Status: command``."""
        return f"[{self.job_id}] {self.status.capitalize()}: {self.command}"


class JobTable:
    """Fixed-capacity, insertion-ordered list of spawned processes."""

    def __init__(self, *, capacity: int) -> None:
        """Create an empty job table holding at most *capacity* jobs."""
        self._capacity = capacity
        self._jobs: list[Job] = []
        self._counter = count(start=1)

    @property
    def capacity(self) -> int:
        """Return the maximum number of jobs."""
        return self._capacity

    def add(self, *, pid: int, command: str, line: str = "") -> Job:
        """Start tracking a spawned process.

        Args:
            pid: The child's process id.
            command: The command name (used as the job label).
            line: The full command line.

        Returns:
            The newly created job.

        Raises:
            ShellError: ``INVALID_INPUT`` for an empty command,
                ``JOB_CONTROL_FULL`` when the table is at capacity.

        """
        if not command:
            msg = "job command must not be empty"
            raise ShellError(ShellStatus.INVALID_INPUT, msg)
        if len(self._jobs) >= self._capacity:
            msg = f"job table full ({self._capacity} jobs); pid {pid} is not tracked"
            raise ShellError(ShellStatus.JOB_CONTROL_FULL, msg)

        job = Job(job_id=next(self._counter), pid=pid, command=command, line=line)
        self._jobs.append(job)
        return job

    def poll(self) -> list[Job]:
        """Reap finished children without blocking.

        Settled jobs are skipped, so polling is idempotent.

        Returns:
            The jobs that were observed to finish during this call,
            in insertion order.

        """
        finished: list[Job] = []
        for job in self._jobs:
            if not job.running:
                continue
            try:
                pid, wait_status = os.waitpid(job.pid, os.WNOHANG)
            except ChildProcessError:
                # Already reaped elsewhere; the exit code is lost.
                job.status = JobStatus.DONE
                finished.append(job)
                continue
            if pid == 0:
                continue
            job.status = JobStatus.DONE
            job.exit_code = os.waitstatus_to_exitcode(wait_status)
            finished.append(job)
        return finished

    def get(self, job_id: int) -> Job | None:
        """Return a job by its number, or None."""
        return next((j for j in self._jobs if j.job_id == job_id), None)

    def get_by_pid(self, pid: int) -> Job | None:
        """Return a job by its process id, or None."""
        return next((j for j in self._jobs if j.pid == pid), None)

    def list_jobs(self) -> list[Job]:
        """Return all tracked jobs in insertion order."""
        return list(self._jobs)

    def running_jobs(self) -> list[Job]:
        """Return the jobs still marked running."""
        return [j for j in self._jobs if j.running]

    def __len__(self) -> int:
        """Return the number of tracked jobs."""
        return len(self._jobs)
