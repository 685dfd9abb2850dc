"""Building blocks for TerminationCoordinator."""

from .display_timer import ConfirmationDisplayTimer
from .listeners import ListenerRegistry, ProjectionListener
from .session import EventSlot, Session

__all__ = [
    "ConfirmationDisplayTimer",
    "EventSlot",
    "ListenerRegistry",
    "ProjectionListener",
    "Session",
]
