"""Kill-on-startup termination coordinator."""

from .config import ConfigurationError, KillOnStartupSettings
from .coordinator_helpers import Session
from .exceptions import (
    ApplicationError,
    DuplicateEventError,
    GracePeriodExpiredOrDisabledError,
    InvalidKillEventError,
    KillOnStartupError,
    SessionClosedError,
    UnknownEventError,
)
from .kill_event import EventKey, KillEvent
from .process_terminator import ProcessTerminator, PsutilProcessTerminator
from .projection_codec import decode_snapshot, encode_snapshot
from .termination_coordinator import TerminationCoordinator
from .termination_state import (
    DisplayState,
    EventProjection,
    TerminationOutcome,
    TerminationResult,
    TerminationStatus,
)

__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "DisplayState",
    "DuplicateEventError",
    "EventKey",
    "EventProjection",
    "GracePeriodExpiredOrDisabledError",
    "InvalidKillEventError",
    "KillEvent",
    "KillOnStartupError",
    "KillOnStartupSettings",
    "ProcessTerminator",
    "PsutilProcessTerminator",
    "Session",
    "SessionClosedError",
    "TerminationCoordinator",
    "TerminationOutcome",
    "TerminationResult",
    "TerminationStatus",
    "UnknownEventError",
    "decode_snapshot",
    "encode_snapshot",
]
