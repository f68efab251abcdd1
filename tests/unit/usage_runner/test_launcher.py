"""Unit tests for the launch/wait/query stages."""

from __future__ import annotations

import errno
from types import SimpleNamespace

import pytest

from usage_common.errors import ClockError, ExecError, SpawnError, UsageQueryError
from usage_runner.engine import launcher
from usage_runner.engine.launcher import LaunchResult, run_command


pytestmark = pytest.mark.unit_runner


class FakeProcess:
    def __init__(self, calls: list[str], status: int = 0) -> None:
        self.pid = 4242
        self._calls = calls
        self._status = status

    def wait(self) -> int:
        self._calls.append("wait")
        return self._status


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def fake_stages(monkeypatch: pytest.MonkeyPatch, calls: list[str], fake_rusage):
    """Replace every OS primitive with a recorder."""
    spawned: list[list[str]] = []
    clock = iter([100.7, 103.2])

    def fake_popen(argv, **kwargs):
        calls.append("spawn")
        spawned.append(argv)
        assert kwargs == {"close_fds": False}
        return FakeProcess(calls, status=3)

    def fake_time() -> float:
        calls.append("clock")
        return next(clock)

    def fake_getrusage(who):
        calls.append("getrusage")
        assert who == launcher.resource.RUSAGE_CHILDREN
        return fake_rusage(ru_utime=2.5, ru_stime=0.5, ru_maxrss=4096, ru_idrss=30_000)

    monkeypatch.setattr(launcher.subprocess, "Popen", fake_popen)
    monkeypatch.setattr(launcher.time, "time", fake_time)
    monkeypatch.setattr(launcher.resource, "getrusage", fake_getrusage)
    return SimpleNamespace(spawned=spawned)


def test_run_command_orders_stages(fake_stages, calls: list[str]) -> None:
    result = run_command(["make", "-j4"], ticks_per_second=100)

    assert calls == ["spawn", "clock", "wait", "clock", "getrusage"]
    assert fake_stages.spawned == [["make", "-j4"]]
    assert isinstance(result, LaunchResult)
    assert result.argv == ("make", "-j4")
    assert result.pid == 4242
    assert result.exit_status == 3


def test_run_command_builds_report(fake_stages) -> None:
    report = run_command(["make"], ticks_per_second=100).report

    assert report.wall_seconds == 3.0
    assert report.user_cpu_seconds == 2
    assert report.system_cpu_seconds == 0
    assert report.peak_memory_kb == 4096
    # 30_000 / 100 ticks / (2 - 0) seconds
    assert report.data_size_kb == 150


def test_run_command_requires_a_command() -> None:
    with pytest.raises(ValueError):
        run_command([])


def test_spawn_failure_is_spawn_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(argv, **kwargs):
        raise BlockingIOError(errno.EAGAIN, "Resource temporarily unavailable")

    monkeypatch.setattr(launcher.subprocess, "Popen", refuse)

    with pytest.raises(SpawnError) as excinfo:
        launcher.spawn(["true"])

    assert str(excinfo.value) == "Fork failed"
    assert excinfo.value.reason == "Resource temporarily unavailable"


def test_missing_program_is_exec_error() -> None:
    with pytest.raises(ExecError) as excinfo:
        run_command(["/no/such/binary"])

    err = excinfo.value
    assert str(err) == "Exec failed"
    assert err.reason == "No such file or directory"
    assert err.context == {"argv": ["/no/such/binary"]}
    assert isinstance(err.__cause__, FileNotFoundError)


def test_missing_program_on_path_is_exec_error() -> None:
    with pytest.raises(ExecError):
        launcher.spawn(["usage-report-definitely-missing-cmd"])


def test_start_clock_failure(monkeypatch: pytest.MonkeyPatch, fake_stages) -> None:
    def broken_clock() -> float:
        raise OSError(errno.EOVERFLOW, "Value too large for defined data type")

    monkeypatch.setattr(launcher.time, "time", broken_clock)

    with pytest.raises(ClockError) as excinfo:
        run_command(["true"])
    assert str(excinfo.value) == "Failed to get start time"


def test_end_clock_failure(monkeypatch: pytest.MonkeyPatch, fake_stages, calls: list[str]) -> None:
    readings = iter([100.0])

    def flaky_clock() -> float:
        try:
            return next(readings)
        except StopIteration:
            raise OSError(errno.EFAULT, "Bad address") from None

    monkeypatch.setattr(launcher.time, "time", flaky_clock)

    with pytest.raises(ClockError) as excinfo:
        run_command(["true"])
    assert str(excinfo.value) == "Failed to get end time"
    assert "getrusage" not in calls


def test_usage_query_failure(monkeypatch: pytest.MonkeyPatch, fake_stages) -> None:
    def broken_getrusage(who):
        raise OSError(errno.EINVAL, "Invalid argument")

    monkeypatch.setattr(launcher.resource, "getrusage", broken_getrusage)

    with pytest.raises(UsageQueryError) as excinfo:
        run_command(["true"])
    assert str(excinfo.value) == "Getrusage failed"
    assert excinfo.value.reason == "Invalid argument"


def test_real_child_reports_consistent_totals() -> None:
    result = run_command(["true"])
    report = result.report

    assert result.exit_status == 0
    assert report.total_cpu_seconds == report.user_cpu_seconds + report.system_cpu_seconds
    assert report.wall_seconds >= 0
    assert report.peak_memory_kb >= 0
    assert report.fs_reads >= 0 and report.fs_writes >= 0


def test_nonzero_child_status_is_not_an_error() -> None:
    result = run_command(["sh", "-c", "exit 7"])
    assert result.exit_status == 7


def test_file_without_header_runs_as_shell_script(tmp_path) -> None:
    marker = tmp_path / "marker"
    script = tmp_path / "no_header"
    script.write_text('touch "$1"\nexit 0\n', encoding="utf-8")
    script.chmod(0o755)

    result = run_command([str(script), str(marker)])

    assert result.exit_status == 0
    assert marker.exists()
    assert result.argv == (str(script), str(marker))


def test_shell_script_argv_resolves_bare_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(launcher.shutil, "which", lambda name: f"/opt/bin/{name}")

    assert launcher.shell_script_argv(["build", "-v"]) == ["/bin/sh", "/opt/bin/build", "-v"]
    assert launcher.shell_script_argv(["./build"]) == ["/bin/sh", "./build"]


def test_shell_fallback_failure_is_exec_error(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts: list[list[str]] = []

    def refuse(argv, **kwargs):
        attempts.append(argv)
        if len(attempts) == 1:
            raise OSError(errno.ENOEXEC, "Exec format error", argv[0])
        raise FileNotFoundError(errno.ENOENT, "No such file or directory", argv[0])

    monkeypatch.setattr(launcher.subprocess, "Popen", refuse)

    with pytest.raises(ExecError) as excinfo:
        launcher.spawn(["./no_header", "arg"])

    assert attempts == [["./no_header", "arg"], ["/bin/sh", "./no_header", "arg"]]
    assert excinfo.value.reason == "No such file or directory"


def test_interrupted_wait_reaps_child() -> None:
    class InterruptedProcess:
        pid = 99
        calls = 0

        def wait(self) -> int:
            self.calls += 1
            if self.calls == 1:
                raise KeyboardInterrupt
            return -2

    process = InterruptedProcess()

    with pytest.raises(KeyboardInterrupt):
        launcher.wait(process)

    assert process.calls == 2
