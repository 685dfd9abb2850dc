"""
Kill-on-startup termination coordinator.

Tracks the processes flagged in a session, gates termination on each event's
grace period, sends at most one termination request per process instance to
the injected ProcessTerminator, and exposes the resulting state for display.

Usage:
    coordinator = TerminationCoordinator(PsutilProcessTerminator.from_settings(settings), settings=settings)
    session = coordinator.start_session(events)
    result = await coordinator.request_termination(session, pid, generation_token)
    coordinator.dismiss(session)
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from .async_helpers import DoneCallback, submit_coroutine_threadsafe
from .config import KillOnStartupSettings
from .coordinator_helpers import ConfirmationDisplayTimer, EventSlot, Session
from .exceptions import GracePeriodExpiredOrDisabledError, SessionClosedError
from .kill_event import EventKey, KillEvent
from .process_terminator import ProcessTerminator
from .termination_state import (
    TerminationOutcome,
    TerminationResult,
    TerminationStatus,
)

logger = logging.getLogger(__name__)

# Failures of the external call that are recorded as a failed attempt
TERMINATOR_CALL_ERRORS = (
    OSError,
    RuntimeError,
    TimeoutError,
    ValueError,
)


class TerminationCoordinator:
    """Owns kill-on-startup sessions and the per-event termination state machine."""

    def __init__(
        self,
        terminator: ProcessTerminator,
        *,
        settings: Optional[KillOnStartupSettings] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._terminator = terminator
        self.settings = settings or KillOnStartupSettings()
        self._loop = loop
        self._sessions: Dict[str, Session] = {}

    @property
    def sessions(self) -> tuple[Session, ...]:
        """Sessions that have been started and not yet dismissed."""
        return tuple(self._sessions.values())

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Set the event loop that ``submit_termination`` schedules work on."""
        self._loop = loop

    def start_session(
        self,
        events: Iterable[KillEvent],
        *,
        custom_message: Optional[str] = None,
        custom_url: Optional[str] = None,
    ) -> Session:
        """
        Start a session with every event pending, in the given order.

        Args:
            events: Kill events to display; may be empty
            custom_message: Policy-supplied message; defaults to settings
            custom_url: Policy-supplied URL; defaults to settings

        Raises:
            DuplicateEventError: If two events share (pid, generation_token)
        """
        session = Session(
            events,
            custom_message=custom_message if custom_message is not None else self.settings.custom_message,
            custom_url=custom_url if custom_url is not None else self.settings.custom_url,
        )
        self._sessions[session.session_id] = session
        logger.info("Started kill-on-startup session %s with %d event(s)", session.session_id, len(session))
        return session

    def start_session_from_payloads(
        self,
        payloads: Iterable[Mapping[str, Any]],
        *,
        custom_message: Optional[str] = None,
        custom_url: Optional[str] = None,
    ) -> Session:
        """Start a session from raw host records, filling in the default grace period."""
        default_grace = self.settings.default_grace_period_seconds
        events = [KillEvent.from_payload(payload, default_grace_period_seconds=default_grace) for payload in payloads]
        return self.start_session(events, custom_message=custom_message, custom_url=custom_url)

    async def request_termination(self, session: Session, pid: int, generation_token: int) -> TerminationResult:
        """
        Terminate one flagged process, at most once.

        A repeated request for a confirmed event returns the recorded result.
        Concurrent requests for the same event share the single external call.
        Cancelling the caller does not cancel that call.

        Raises:
            SessionClosedError: If the session has been dismissed
            UnknownEventError: If the event is not part of the session
            GracePeriodExpiredOrDisabledError: If the event's grace period is zero
        """
        if session.closed:
            raise SessionClosedError(f"Session {session.session_id} has been dismissed", session_id=session.session_id)
        if self._loop is None:
            self._loop = asyncio.get_running_loop()

        slot = session.slot(EventKey(pid, generation_token))
        with slot.lock:
            if slot.result is not None:
                logger.debug("Termination of pid %s already confirmed (success=%s)", pid, slot.result.success)
                return slot.result
            dispatch = slot.in_flight
            if dispatch is None:
                if not slot.event.actionable:
                    raise GracePeriodExpiredOrDisabledError(pid, generation_token, session_id=session.session_id)
                slot.status = TerminationStatus.IN_FLIGHT
                dispatch = asyncio.get_running_loop().create_task(
                    self._dispatch(session, slot),
                    name=f"terminate:{pid}:{generation_token}",
                )
                slot.in_flight = dispatch

        return await asyncio.shield(dispatch)

    def submit_termination(
        self,
        session: Session,
        pid: int,
        generation_token: int,
        *,
        on_done: Optional[DoneCallback] = None,
    ) -> concurrent.futures.Future:
        """
        Non-blocking variant of ``request_termination`` for interactive threads.

        The returned future resolves to the TerminationResult or carries the
        validation error. ``on_done`` runs on the coordinator's loop thread.

        Raises:
            RuntimeError: If no event loop has been bound to the coordinator
        """
        if self._loop is None:
            raise RuntimeError("TerminationCoordinator has no event loop; call bind_loop() first")
        return submit_coroutine_threadsafe(
            lambda: self.request_termination(session, pid, generation_token),
            self._loop,
            on_done=on_done,
        )

    def dismiss(self, session: Session) -> None:
        """
        Close the session.

        Display timers are cancelled and ``just_completed`` flags cleared.
        Termination calls already in flight keep running; their results are
        recorded but not announced. Dismissing twice is a no-op.
        """
        if not session.mark_closed():
            return
        self._sessions.pop(session.session_id, None)

        for slot in session.slots():
            with slot.lock:
                timer, slot.timer = slot.timer, None
                slot.just_completed = False
            if timer is not None:
                timer.cancel()

        in_flight = len(session.in_flight_tasks())
        logger.info("Dismissed kill-on-startup session %s (%d termination call(s) still in flight)", session.session_id, in_flight)

    async def wait_for_in_flight(self, session: Session) -> None:
        """Wait until every dispatched termination call of the session has finished."""
        tasks = session.in_flight_tasks()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _dispatch(self, session: Session, slot: EventSlot) -> TerminationResult:
        event = slot.event
        logger.info("Terminating %s (pid %s, generation %s)", event.process_path, event.pid, event.generation_token)
        outcome: Optional[TerminationOutcome] = None
        call_finished = False
        try:
            outcome = await self._terminator.terminate(event.pid, event.generation_token)
            call_finished = True
        except TERMINATOR_CALL_ERRORS:
            logger.exception("Termination call failed for pid %s; recording as failure", event.pid)
            call_finished = True
        finally:
            # Any other exception still confirms the event before propagating
            if not call_finished:
                logger.error("Termination call for pid %s raised unexpectedly; recording as failure", event.pid)
                self._record(session, slot, None)

        if outcome is not None and not isinstance(outcome, TerminationOutcome):
            logger.error("Terminator returned unexpected value %r for pid %s; recording as failure", outcome, event.pid)
            outcome = None
        return self._record(session, slot, outcome)

    def _record(self, session: Session, slot: EventSlot, outcome: Optional[TerminationOutcome]) -> TerminationResult:
        result = TerminationResult.from_outcome(slot.event.key, outcome)
        projection = None
        with slot.lock:
            slot.result = result
            slot.status = result.status
            if not session.closed:
                slot.just_completed = True
                slot.timer = ConfirmationDisplayTimer(
                    self.settings.confirmation_display_seconds,
                    lambda: self._clear_just_completed(session, result.key),
                    name=f"{session.session_id}:{slot.event.pid}",
                )
                slot.timer.start()
                projection = slot.projection_locked()

        if projection is None:
            logger.info(
                "Session %s was dismissed; dropping termination result for pid %s (success=%s)",
                session.session_id,
                slot.event.pid,
                result.success,
            )
            return result

        logger.info("Termination of %s (pid %s) confirmed: %s", slot.event.process_path, slot.event.pid, _describe(outcome))
        session.notify(projection)
        return result

    def _clear_just_completed(self, session: Session, key: EventKey) -> None:
        if session.closed:
            return
        slot = session.find_slot(key)
        if slot is None:
            return
        with slot.lock:
            if not slot.just_completed:
                return
            slot.just_completed = False
            slot.timer = None
            projection = slot.projection_locked()
        session.notify(projection)


def _describe(outcome: Optional[TerminationOutcome]) -> str:
    if outcome is None:
        return "terminator error"
    return outcome.value


__all__ = ["TERMINATOR_CALL_ERRORS", "TerminationCoordinator"]
