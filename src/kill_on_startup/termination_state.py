from __future__ import annotations

"""Per-event termination state and the read-only projection shown to the user."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .kill_event import EventKey


class TerminationOutcome(Enum):
    """Answer from the OS process-termination primitive."""

    TERMINATED = "terminated"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"


class TerminationStatus(Enum):
    """Coordinator-side lifecycle of one event."""

    PENDING = "pending"  # Initial; terminate may be requested
    IN_FLIGHT = "in_flight"  # External call dispatched, result not yet recorded
    CONFIRMED_SUCCESS = "confirmed_success"
    CONFIRMED_FAILURE = "confirmed_failure"


class DisplayState(Enum):
    """State exposed to the presentation layer. IN_FLIGHT renders as PENDING."""

    PENDING = "pending"
    CONFIRMED_SUCCESS = "confirmed_success"
    CONFIRMED_FAILURE = "confirmed_failure"

    @classmethod
    def from_status(cls, status: TerminationStatus) -> "DisplayState":
        if status is TerminationStatus.CONFIRMED_SUCCESS:
            return cls.CONFIRMED_SUCCESS
        if status is TerminationStatus.CONFIRMED_FAILURE:
            return cls.CONFIRMED_FAILURE
        return cls.PENDING


@dataclass(frozen=True)
class TerminationResult:
    """Final, recorded result of the single termination attempt for an event.

    ``outcome`` is None when the terminator itself raised; that attempt is
    still recorded as a failure.
    """

    key: EventKey
    success: bool
    outcome: Optional[TerminationOutcome]

    @classmethod
    def from_outcome(cls, key: EventKey, outcome: Optional[TerminationOutcome]) -> "TerminationResult":
        return cls(key=key, success=outcome is TerminationOutcome.TERMINATED, outcome=outcome)

    @property
    def status(self) -> TerminationStatus:
        return TerminationStatus.CONFIRMED_SUCCESS if self.success else TerminationStatus.CONFIRMED_FAILURE


@dataclass(frozen=True)
class EventProjection:
    """Read-only view of one event for rendering."""

    process_path: str
    pid: int
    generation_token: int
    grace_period_seconds: int
    state: DisplayState
    just_completed: bool

    @property
    def key(self) -> EventKey:
        return EventKey(self.pid, self.generation_token)

    @property
    def actionable(self) -> bool:
        """Whether the presentation layer should enable the terminate button."""
        return self.grace_period_seconds > 0 and self.state is DisplayState.PENDING


__all__ = [
    "DisplayState",
    "EventProjection",
    "TerminationOutcome",
    "TerminationResult",
    "TerminationStatus",
]
