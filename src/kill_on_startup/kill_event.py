"""Kill-on-startup event value objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple

from .exceptions import InvalidKillEventError


class EventKey(NamedTuple):
    """Identity of one OS process instance."""

    pid: int
    generation_token: int


@dataclass(frozen=True)
class KillEvent:
    """A process that started before policy finished loading, plus its grace period.

    ``grace_period_seconds`` is a fixed gate, not a countdown. Zero means the
    event is display-only and can never be terminated.
    """

    process_path: str
    pid: int
    generation_token: int
    grace_period_seconds: int

    def __post_init__(self) -> None:
        if not isinstance(self.process_path, str):
            raise InvalidKillEventError(f"process_path must be a string (got {self.process_path!r})")
        _require_int("pid", self.pid)
        _require_int("generation_token", self.generation_token)
        _require_int("grace_period_seconds", self.grace_period_seconds)
        if self.grace_period_seconds < 0:
            raise InvalidKillEventError(f"grace_period_seconds must be non-negative (got {self.grace_period_seconds})")

    @property
    def key(self) -> EventKey:
        return EventKey(self.pid, self.generation_token)

    @property
    def actionable(self) -> bool:
        return self.grace_period_seconds > 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, default_grace_period_seconds: int = 0) -> "KillEvent":
        """
        Build an event from a raw host record.

        Accepts either ``process_path`` or ``file_path`` for the executable and
        either ``generation_token`` or ``pidversion`` for the instance token.
        A missing grace period falls back to ``default_grace_period_seconds``.

        Raises:
            InvalidKillEventError: If a required field is missing or malformed
        """
        process_path = _first_present(payload, "process_path", "file_path")
        pid = _first_present(payload, "pid")
        generation_token = _first_present(payload, "generation_token", "pidversion")
        grace_period = payload.get("grace_period_seconds")
        if grace_period is None:
            grace_period = default_grace_period_seconds

        return cls(
            process_path=process_path,
            pid=_coerce_int("pid", pid),
            generation_token=_coerce_int("generation_token", generation_token),
            grace_period_seconds=_coerce_int("grace_period_seconds", grace_period),
        )


def _require_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidKillEventError(f"{name} must be an integer (got {value!r})")


def _first_present(payload: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        value = payload.get(name)
        if value is not None:
            return value
    raise InvalidKillEventError(f"Kill event payload is missing {' / '.join(names)}: {dict(payload)!r}")


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidKillEventError(f"{name} must be an integer (got {value!r})")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise InvalidKillEventError(f"{name} must be an integer (got {value!r})") from exc
    raise InvalidKillEventError(f"{name} must be an integer (got {value!r})")


__all__ = ["EventKey", "KillEvent"]
