"""Observer registry for projection changes."""

import logging
import threading
from typing import Callable, List

from ..termination_state import EventProjection

logger = logging.getLogger(__name__)

ProjectionListener = Callable[[EventProjection], None]

LISTENER_ERRORS = (
    AttributeError,
    LookupError,
    RuntimeError,
    TypeError,
    ValueError,
)


class ListenerRegistry:
    """Holds presentation callbacks and fans out projection updates.

    Callbacks run on the coordinator's event loop thread; a GUI must marshal
    to its own thread.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: List[ProjectionListener] = []

    def add(self, listener: ProjectionListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.remove(listener)

        return _unsubscribe

    def remove(self, listener: ProjectionListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def notify(self, projection: EventProjection) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(projection)
            except LISTENER_ERRORS:
                logger.exception("Projection listener %r failed for pid %s", listener, projection.pid)
