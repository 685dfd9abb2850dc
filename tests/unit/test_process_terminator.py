"""Tests for kill_on_startup/process_terminator.py."""

import sys
from typing import Any

import pytest

from kill_on_startup.config import KillOnStartupSettings
from kill_on_startup.process_terminator import PsutilProcessTerminator, generation_token_for
from kill_on_startup.termination_state import TerminationOutcome


@pytest.fixture(autouse=True)
def _restore_psutil():
    """Restore original psutil module after each test."""
    original_psutil = sys.modules.get("psutil")
    yield
    if original_psutil is not None:
        sys.modules["psutil"] = original_psutil
    elif "psutil" in sys.modules:
        del sys.modules["psutil"]


class _StubPsutilModule:
    class TimeoutExpired(Exception):
        pass

    class NoSuchProcess(Exception):
        pass

    class AccessDenied(Exception):
        pass

    def __init__(self):
        self.processes: dict[int, "_DummyPsutilProcess"] = {}

    def Process(self, pid: int) -> "_DummyPsutilProcess":  # noqa: N802
        if pid not in self.processes:
            raise self.NoSuchProcess()
        return self.processes[pid]


class _DummyPsutilProcess:
    def __init__(self, stub: _StubPsutilModule, pid: int, create_time: float, *, graceful: bool = True):
        self._stub = stub
        self.pid = pid
        self._create_time = create_time
        self._graceful = graceful
        self.terminated = False
        self.killed = False
        self.wait_calls = 0

    def create_time(self) -> float:
        return self._create_time

    def terminate(self) -> None:
        self.terminated = True

    def kill(self) -> None:
        self.killed = True

    def wait(self, timeout: float | None = None) -> None:
        self.wait_calls += 1
        if self.wait_calls == 1 and not self._graceful:
            raise self._stub.TimeoutExpired()


def _install_stub_psutil(stub: Any) -> None:
    sys.modules["psutil"] = stub


def _terminator() -> PsutilProcessTerminator:
    return PsutilProcessTerminator(graceful_timeout=0.01, force_timeout=0.01)


def test_generation_token_is_create_time_in_milliseconds():
    stub = _StubPsutilModule()
    proc = _DummyPsutilProcess(stub, 1, 1700000000.1234)

    assert generation_token_for(proc) == 1700000000123


def test_graceful_termination():
    stub = _StubPsutilModule()
    proc = _DummyPsutilProcess(stub, 5, 100.0)
    stub.processes[5] = proc
    _install_stub_psutil(stub)

    outcome = _terminator().terminate_sync(5, 100000)

    assert outcome is TerminationOutcome.TERMINATED
    assert proc.terminated is True
    assert proc.killed is False


def test_force_kill_after_timeout():
    stub = _StubPsutilModule()
    proc = _DummyPsutilProcess(stub, 10, 2.0, graceful=False)
    stub.processes[10] = proc
    _install_stub_psutil(stub)

    outcome = _terminator().terminate_sync(10, 2000)

    assert outcome is TerminationOutcome.TERMINATED
    assert proc.killed is True


def test_persisting_process_raises():
    stub = _StubPsutilModule()

    class Immortal(_DummyPsutilProcess):
        def wait(self, timeout=None):
            raise stub.TimeoutExpired()

    proc = Immortal(stub, 11, 2.0)
    stub.processes[11] = proc
    _install_stub_psutil(stub)

    with pytest.raises(RuntimeError, match="persisted after SIGKILL"):
        _terminator().terminate_sync(11, 2000)


def test_generation_mismatch_is_not_found():
    stub = _StubPsutilModule()
    proc = _DummyPsutilProcess(stub, 7, 3.0)
    stub.processes[7] = proc
    _install_stub_psutil(stub)

    outcome = _terminator().terminate_sync(7, 999)

    assert outcome is TerminationOutcome.NOT_FOUND
    assert proc.terminated is False


def test_missing_process_is_not_found():
    _install_stub_psutil(_StubPsutilModule())

    assert _terminator().terminate_sync(404, 1) is TerminationOutcome.NOT_FOUND


def test_access_denied_is_permission_denied():
    stub = _StubPsutilModule()

    class Protected(_DummyPsutilProcess):
        def terminate(self):
            raise stub.AccessDenied()

    stub.processes[1] = Protected(stub, 1, 1.0)
    _install_stub_psutil(stub)

    assert _terminator().terminate_sync(1, 1000) is TerminationOutcome.PERMISSION_DENIED


def test_missing_psutil_raises_runtime_error():
    sys.modules["psutil"] = None  # type: ignore[assignment]

    with pytest.raises(RuntimeError, match="psutil is required"):
        _terminator().terminate_sync(1, 1)


@pytest.mark.asyncio
async def test_async_terminate_runs_in_thread():
    stub = _StubPsutilModule()
    stub.processes[5] = _DummyPsutilProcess(stub, 5, 1.0)
    _install_stub_psutil(stub)

    outcome = await _terminator().terminate(5, 1000)

    assert outcome is TerminationOutcome.TERMINATED


def test_from_settings_copies_timeouts():
    settings = KillOnStartupSettings(graceful_timeout_seconds=7.5, force_kill_timeout_seconds=1.5)

    terminator = PsutilProcessTerminator.from_settings(settings)

    assert terminator.graceful_timeout == 7.5
    assert terminator.force_timeout == 1.5
