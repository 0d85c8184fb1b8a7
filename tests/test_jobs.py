"""Tests for the job table.

A job is the shell's record of an external process it spawned.  The
table is bounded, reports jobs in insertion order, and reaps finished
children with a non-blocking ``waitpid``.
"""

import os
import shutil
import signal
import time

import pytest

from py_sh.jobs import Job, JobStatus, JobTable
from py_sh.status import ShellError, ShellStatus

_TIMEOUT = 5.0


def _spawn(*argv: str) -> int:
    """Start a real child process and return its pid."""
    executable = shutil.which(argv[0])
    assert executable is not None
    return os.posix_spawn(executable, list(argv), dict(os.environ))


def _poll_until_settled(table: JobTable) -> list[Job]:
    """Poll until no job is running; return everything reported."""
    reported: list[Job] = []
    deadline = time.monotonic() + _TIMEOUT
    while table.running_jobs():
        assert time.monotonic() < deadline, "children did not exit in time"
        reported.extend(table.poll())
        time.sleep(0.01)
    return reported


class TestJobStatus:
    """Verify job status values."""

    def test_status_values(self) -> None:
        """JobStatus should have running and done."""
        assert JobStatus.RUNNING == "running"
        assert JobStatus.DONE == "done"


class TestJob:
    """Verify the Job data structure."""

    def test_job_has_fields(self) -> None:
        """A job should store job_id, pid, command, and status."""
        job = Job(job_id=1, pid=42, command="sleep")
        assert job.job_id == 1
        expected_pid = 42
        assert job.pid == expected_pid
        assert job.command == "sleep"
        assert job.status is JobStatus.RUNNING
        assert job.running is True
        assert job.exit_code is None

    def test_job_str(self) -> None:
        """String form is ``[id] Status: command``."""
        job = Job(job_id=3, pid=42, command="sleep")
        assert str(job) == "[3] Running: sleep"
        job.status = JobStatus.DONE
        assert str(job) == "[3] Done: sleep"


class TestJobTable:
    """Verify bookkeeping without real processes."""

    def test_add_assigns_incrementing_ids(self) -> None:
        """Job numbers start at 1 and follow insertion order."""
        table = JobTable(capacity=4)
        first = table.add(pid=10, command="first")
        second = table.add(pid=20, command="second")
        assert first.job_id == 1
        expected_id = 2
        assert second.job_id == expected_id
        assert [j.command for j in table.list_jobs()] == ["first", "second"]

    def test_get_by_id_and_pid(self) -> None:
        """Jobs can be found by number or by pid."""
        table = JobTable(capacity=4)
        job = table.add(pid=10, command="test")
        assert table.get(1) is job
        assert table.get_by_pid(10) is job
        assert table.get(99) is None
        assert table.get_by_pid(99) is None

    def test_full_table_raises(self) -> None:
        """Adding past capacity fails explicitly; nothing is evicted."""
        table = JobTable(capacity=2)
        table.add(pid=10, command="a")
        table.add(pid=20, command="b")
        with pytest.raises(ShellError) as excinfo:
            table.add(pid=30, command="c")
        assert excinfo.value.status is ShellStatus.JOB_CONTROL_FULL
        assert [j.pid for j in table.list_jobs()] == [10, 20]

    def test_empty_command_rejected(self) -> None:
        """A job needs a label."""
        table = JobTable(capacity=2)
        with pytest.raises(ShellError) as excinfo:
            table.add(pid=10, command="")
        assert excinfo.value.status is ShellStatus.INVALID_INPUT


class TestJobPolling:
    """Verify non-blocking reaping of real children."""

    def test_three_children_settle_and_stay_settled(self) -> None:
        """Every child is reported done exactly once, then never again."""
        table = JobTable(capacity=8)
        for _ in range(3):
            table.add(pid=_spawn("true"), command="true")

        reported = _poll_until_settled(table)
        expected_jobs = 3
        assert len(reported) == expected_jobs
        assert [j.job_id for j in reported] == sorted(j.job_id for j in reported)
        assert all(j.status is JobStatus.DONE for j in table.list_jobs())
        assert all(j.exit_code == 0 for j in table.list_jobs())

        # Idempotent after settling
        assert table.poll() == []
        assert table.poll() == []
        assert table.running_jobs() == []

    def test_poll_does_not_block_on_running_child(self) -> None:
        """A child that is still running stays RUNNING after a poll."""
        table = JobTable(capacity=2)
        pid = _spawn("sleep", "30")
        job = table.add(pid=pid, command="sleep")
        try:
            started = time.monotonic()
            assert table.poll() == []
            assert time.monotonic() - started < 1.0
            assert job.running
        finally:
            os.kill(pid, signal.SIGKILL)
        _poll_until_settled(table)
        assert job.exit_code == -signal.SIGKILL

    def test_exit_code_recorded(self) -> None:
        """A failing child's exit code is kept on the job."""
        table = JobTable(capacity=2)
        job = table.add(pid=_spawn("false"), command="false")
        _poll_until_settled(table)
        assert job.exit_code == 1

    def test_child_reaped_elsewhere_is_settled(self) -> None:
        """If someone else reaped the child, the job is still marked done."""
        table = JobTable(capacity=2)
        pid = _spawn("true")
        os.waitpid(pid, 0)
        job = table.add(pid=pid, command="true")
        assert table.poll() == [job]
        assert job.status is JobStatus.DONE
        assert job.exit_code is None
