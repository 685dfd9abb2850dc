"""Session state: ordered kill events and their per-event termination state."""

from __future__ import annotations

import asyncio
import threading
import uuid
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..exceptions import DuplicateEventError, UnknownEventError
from ..kill_event import EventKey, KillEvent
from ..termination_state import (
    DisplayState,
    EventProjection,
    TerminationResult,
    TerminationStatus,
)
from .display_timer import ConfirmationDisplayTimer
from .listeners import ListenerRegistry, ProjectionListener


class EventSlot:
    """Mutable state for one event. Every field below ``event`` is guarded by ``lock``."""

    __slots__ = ("event", "lock", "status", "result", "in_flight", "just_completed", "timer")

    def __init__(self, event: KillEvent) -> None:
        self.event = event
        self.lock = threading.Lock()
        self.status = TerminationStatus.PENDING
        self.result: Optional[TerminationResult] = None
        self.in_flight: Optional[asyncio.Task] = None
        self.just_completed = False
        self.timer: Optional[ConfirmationDisplayTimer] = None

    def projection_locked(self) -> EventProjection:
        """Build the projection; caller must hold ``lock``."""
        return EventProjection(
            process_path=self.event.process_path,
            pid=self.event.pid,
            generation_token=self.event.generation_token,
            grace_period_seconds=self.event.grace_period_seconds,
            state=DisplayState.from_status(self.status),
            just_completed=self.just_completed,
        )

    def projection(self) -> EventProjection:
        with self.lock:
            return self.projection_locked()


class Session:
    """
    One displayed window's worth of kill events.

    Created by ``TerminationCoordinator.start_session``; events keep the order
    they were given in. State changes go through the coordinator, the session
    itself only exposes read-only projections and subscriptions.
    """

    def __init__(
        self,
        events: Iterable[KillEvent],
        *,
        custom_message: Optional[str] = None,
        custom_url: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.custom_message = custom_message
        self.custom_url = custom_url
        self._slots: Dict[EventKey, EventSlot] = {}
        for event in events:
            key = event.key
            if key in self._slots:
                raise DuplicateEventError(key.pid, key.generation_token, session_id=self.session_id)
            self._slots[key] = EventSlot(event)
        self._closed = False
        self._close_lock = threading.Lock()
        self._listeners = ListenerRegistry()

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"Session(id={self.session_id!r}, events={len(self._slots)}, closed={self._closed})"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def events(self) -> Tuple[KillEvent, ...]:
        return tuple(slot.event for slot in self._slots.values())

    def slot(self, key: EventKey) -> EventSlot:
        try:
            return self._slots[key]
        except KeyError:
            raise UnknownEventError(key.pid, key.generation_token, session_id=self.session_id) from None

    def find_slot(self, key: EventKey) -> Optional[EventSlot]:
        return self._slots.get(key)

    def slots(self) -> List[EventSlot]:
        return list(self._slots.values())

    def projection(self, pid: int, generation_token: int) -> EventProjection:
        """Return the current projection of one event.

        Raises:
            UnknownEventError: If the event is not part of this session
        """
        return self.slot(EventKey(pid, generation_token)).projection()

    def snapshot(self) -> List[EventProjection]:
        """Return projections for every event in display order."""
        return [slot.projection() for slot in self._slots.values()]

    def subscribe(self, listener: ProjectionListener) -> Callable[[], None]:
        """Register for projection updates. Returns an unsubscribe callable."""
        return self._listeners.add(listener)

    def notify(self, projection: EventProjection) -> None:
        if self._closed:
            return
        self._listeners.notify(projection)

    def in_flight_tasks(self) -> List[asyncio.Task]:
        tasks = []
        for slot in self._slots.values():
            with slot.lock:
                task = slot.in_flight
            if task is not None and not task.done():
                tasks.append(task)
        return tasks

    def mark_closed(self) -> bool:
        """Close the session. Returns False if it was already closed."""
        with self._close_lock:
            if self._closed:
                return False
            self._closed = True
        self._listeners.clear()
        return True


__all__ = ["EventSlot", "Session"]
