"""Terminate one exact process instance with graceful shutdown then force kill."""

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

from .config import KillOnStartupSettings
from .termination_state import TerminationOutcome

logger = logging.getLogger(__name__)


class ProcessTerminator(Protocol):
    """Capability for killing a process identified by (pid, generation token)."""

    async def terminate(self, pid: int, generation_token: int) -> TerminationOutcome: ...


def generation_token_for(process: Any) -> int:
    """Return the generation token of a psutil process: its create time in milliseconds."""
    return int(round(process.create_time() * 1000))


def import_psutil() -> Any:
    """Import psutil or raise a helpful error."""
    try:
        import psutil

    except ImportError as import_exc:
        raise RuntimeError("psutil is required for process termination but is not available") from import_exc
    else:
        return psutil


class PsutilProcessTerminator:
    """
    ProcessTerminator backed by psutil.

    The target is resolved by pid and rejected as NOT_FOUND when its generation
    token differs from the requested one, so a reused pid is never signalled.
    Blocking psutil calls run in a worker thread.
    """

    def __init__(
        self,
        *,
        graceful_timeout: float,
        force_timeout: float,
        token_func: Callable[[Any], int] = generation_token_for,
    ) -> None:
        self.graceful_timeout = graceful_timeout
        self.force_timeout = force_timeout
        self._token_func = token_func

    @classmethod
    def from_settings(cls, settings: KillOnStartupSettings) -> "PsutilProcessTerminator":
        return cls(
            graceful_timeout=settings.graceful_timeout_seconds,
            force_timeout=settings.force_kill_timeout_seconds,
        )

    async def terminate(self, pid: int, generation_token: int) -> TerminationOutcome:
        return await asyncio.to_thread(self.terminate_sync, pid, generation_token)

    def terminate_sync(self, pid: int, generation_token: int) -> TerminationOutcome:
        """
        Terminate the process instance synchronously.

        Returns:
            TERMINATED, NOT_FOUND or PERMISSION_DENIED

        Raises:
            RuntimeError: If psutil is missing or the process persists after SIGKILL
        """
        psutil = import_psutil()

        try:
            proc = psutil.Process(pid)
            if not self._matches_generation(proc, generation_token):
                logger.info("Process %s generation changed (wanted %s); not terminating", pid, generation_token)
                return TerminationOutcome.NOT_FOUND
            self._terminate_single_process(proc, psutil_module=psutil)
        except psutil.NoSuchProcess:
            logger.info("Process %s (generation %s) no longer exists", pid, generation_token)
            return TerminationOutcome.NOT_FOUND
        except psutil.AccessDenied:
            logger.warning("Access denied while terminating process %s", pid)
            return TerminationOutcome.PERMISSION_DENIED

        return TerminationOutcome.TERMINATED

    def _matches_generation(self, proc: Any, generation_token: int) -> bool:
        current: Optional[int] = self._token_func(proc)
        return current == generation_token

    def _terminate_single_process(self, proc: Any, *, psutil_module: Any) -> None:
        pid = proc.pid
        logger.info("Sending SIGTERM to process %s", pid)
        proc.terminate()

        try:
            proc.wait(timeout=self.graceful_timeout)
        except psutil_module.TimeoutExpired:
            logger.info("Process %s did not terminate within %ss; sending SIGKILL", pid, self.graceful_timeout)
        else:
            logger.info("Process %s terminated gracefully", pid)
            return

        try:
            proc.kill()
        except psutil_module.NoSuchProcess:
            logger.info("Process %s exited before SIGKILL", pid)
            return

        try:
            proc.wait(timeout=self.force_timeout)
        except psutil_module.TimeoutExpired as kill_exc:
            raise RuntimeError(f"Process {pid} persisted after SIGKILL for {self.force_timeout}s; manual intervention required.") from kill_exc
        logger.info("Process %s force killed", pid)


__all__ = ["ProcessTerminator", "PsutilProcessTerminator", "generation_token_for", "import_psutil"]
