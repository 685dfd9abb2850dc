"""Coordinator settings supplied by the policy/configuration store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .runtime import env_float, env_int, env_seconds, env_str

CONFIRMATION_DISPLAY_ENV = "KILL_ON_STARTUP_CONFIRMATION_DISPLAY_SECONDS"
DEFAULT_GRACE_PERIOD_ENV = "KILL_ON_STARTUP_DEFAULT_GRACE_PERIOD_SECONDS"
CUSTOM_MESSAGE_ENV = "KILL_ON_STARTUP_CUSTOM_MESSAGE"
CUSTOM_URL_ENV = "KILL_ON_STARTUP_CUSTOM_URL"
GRACEFUL_TIMEOUT_ENV = "KILL_ON_STARTUP_GRACEFUL_TIMEOUT_SECONDS"
FORCE_KILL_TIMEOUT_ENV = "KILL_ON_STARTUP_FORCE_KILL_TIMEOUT_SECONDS"

DEFAULT_CONFIRMATION_DISPLAY_SECONDS = 1.0
DEFAULT_GRACE_PERIOD_SECONDS = 0
DEFAULT_GRACEFUL_TIMEOUT_SECONDS = 3.0
DEFAULT_FORCE_KILL_TIMEOUT_SECONDS = 2.0


@dataclass(frozen=True)
class KillOnStartupSettings:
    """Runtime configuration for the termination coordinator."""

    confirmation_display_seconds: float = DEFAULT_CONFIRMATION_DISPLAY_SECONDS
    default_grace_period_seconds: int = DEFAULT_GRACE_PERIOD_SECONDS
    custom_message: Optional[str] = None
    custom_url: Optional[str] = None
    graceful_timeout_seconds: float = DEFAULT_GRACEFUL_TIMEOUT_SECONDS
    force_kill_timeout_seconds: float = DEFAULT_FORCE_KILL_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.confirmation_display_seconds <= 0:
            raise ConfigurationError.invalid_value(
                "confirmation_display_seconds",
                self.confirmation_display_seconds,
                "Must be greater than zero",
            )
        if isinstance(self.default_grace_period_seconds, bool) or not isinstance(self.default_grace_period_seconds, int):
            raise ConfigurationError.invalid_value(
                "default_grace_period_seconds",
                self.default_grace_period_seconds,
                "Must be an integer",
            )
        if self.default_grace_period_seconds < 0:
            raise ConfigurationError.invalid_value(
                "default_grace_period_seconds",
                self.default_grace_period_seconds,
                "Must be non-negative",
            )
        if self.graceful_timeout_seconds < 0 or self.force_kill_timeout_seconds < 0:
            raise ConfigurationError("Process termination timeouts must be non-negative")

    @classmethod
    def from_env(cls) -> "KillOnStartupSettings":
        """Build settings from environment variables and .env defaults."""
        return cls(
            confirmation_display_seconds=_require_value(
                env_float(CONFIRMATION_DISPLAY_ENV, or_value=DEFAULT_CONFIRMATION_DISPLAY_SECONDS),
                CONFIRMATION_DISPLAY_ENV,
            ),
            default_grace_period_seconds=_require_value(
                env_int(DEFAULT_GRACE_PERIOD_ENV, or_value=DEFAULT_GRACE_PERIOD_SECONDS),
                DEFAULT_GRACE_PERIOD_ENV,
            ),
            custom_message=env_str(CUSTOM_MESSAGE_ENV),
            custom_url=env_str(CUSTOM_URL_ENV),
            graceful_timeout_seconds=_require_value(
                env_seconds(GRACEFUL_TIMEOUT_ENV, or_value=DEFAULT_GRACEFUL_TIMEOUT_SECONDS),
                GRACEFUL_TIMEOUT_ENV,
            ),
            force_kill_timeout_seconds=_require_value(
                env_seconds(FORCE_KILL_TIMEOUT_ENV, or_value=DEFAULT_FORCE_KILL_TIMEOUT_SECONDS),
                FORCE_KILL_TIMEOUT_ENV,
            ),
        )


def _require_value(value, name: str):
    if value is None:
        raise ConfigurationError.missing_value(name)
    return value


__all__ = [
    "CONFIRMATION_DISPLAY_ENV",
    "CUSTOM_MESSAGE_ENV",
    "CUSTOM_URL_ENV",
    "DEFAULT_GRACE_PERIOD_ENV",
    "FORCE_KILL_TIMEOUT_ENV",
    "GRACEFUL_TIMEOUT_ENV",
    "KillOnStartupSettings",
]
