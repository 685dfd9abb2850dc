"""Exception classes for the kill-on-startup coordinator.

All custom exceptions inherit from ApplicationError so callers can catch the
whole family at the presentation boundary.

Exception classes support two patterns:
1. No-argument raise: raise SessionClosedError()
2. Contextual attributes: err = UnknownEventError(pid=12, generation_token=3); raise err
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Application error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class ValidationError(ApplicationError):
    """Data validation failed."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Data validation failed"
        super().__init__(message, **kwargs)


from .coordinator import (  # noqa: E402
    DuplicateEventError,
    GracePeriodExpiredOrDisabledError,
    InvalidKillEventError,
    KillOnStartupError,
    SessionClosedError,
    UnknownEventError,
)

__all__ = [
    "ApplicationError",
    "DuplicateEventError",
    "GracePeriodExpiredOrDisabledError",
    "InvalidKillEventError",
    "KillOnStartupError",
    "SessionClosedError",
    "UnknownEventError",
    "ValidationError",
]
