"""Validation failures raised by the termination coordinator.

These never reach the end user as dialogs; the presentation layer maps them
to a disabled button or a no-op.
"""

from typing import Any

from . import ApplicationError, ValidationError


class KillOnStartupError(ApplicationError):
    """Base coordinator error."""

    pass


class InvalidKillEventError(KillOnStartupError, ValidationError, ValueError):
    """Kill event payload failed validation."""

    pass


class DuplicateEventError(KillOnStartupError):
    """Session input contains the same process instance more than once."""

    def __init__(self, pid: int, generation_token: int, **kwargs: Any) -> None:
        super().__init__(
            f"Duplicate kill event for pid {pid} (generation {generation_token})",
            pid=pid,
            generation_token=generation_token,
            **kwargs,
        )


class UnknownEventError(KillOnStartupError):
    """Requested process instance is not part of the session."""

    def __init__(self, pid: int, generation_token: int, **kwargs: Any) -> None:
        super().__init__(
            f"No kill event for pid {pid} (generation {generation_token}) in this session",
            pid=pid,
            generation_token=generation_token,
            **kwargs,
        )


class GracePeriodExpiredOrDisabledError(KillOnStartupError):
    """Termination is not offered for this event."""

    def __init__(self, pid: int, generation_token: int, **kwargs: Any) -> None:
        super().__init__(
            f"Termination disabled for pid {pid} (generation {generation_token}): grace period is zero",
            pid=pid,
            generation_token=generation_token,
            **kwargs,
        )


class SessionClosedError(KillOnStartupError):
    """Session has been dismissed and accepts no new termination requests."""

    pass


__all__ = [
    "DuplicateEventError",
    "GracePeriodExpiredOrDisabledError",
    "InvalidKillEventError",
    "KillOnStartupError",
    "SessionClosedError",
    "UnknownEventError",
]
