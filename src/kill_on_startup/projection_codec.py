"""Serialize session projections for a presentation process across an IPC boundary."""

from __future__ import annotations

from typing import Any, Dict, List

import orjson

from .coordinator_helpers import Session
from .exceptions import ValidationError
from .termination_state import DisplayState, EventProjection

SNAPSHOT_VERSION = 1


def projection_to_dict(projection: EventProjection) -> Dict[str, Any]:
    return {
        "process_path": projection.process_path,
        "pid": projection.pid,
        "generation_token": projection.generation_token,
        "grace_period_seconds": projection.grace_period_seconds,
        "state": projection.state.value,
        "just_completed": projection.just_completed,
        "actionable": projection.actionable,
    }


def projection_from_dict(payload: Dict[str, Any]) -> EventProjection:
    try:
        return EventProjection(
            process_path=str(payload["process_path"]),
            pid=int(payload["pid"]),
            generation_token=int(payload["generation_token"]),
            grace_period_seconds=int(payload["grace_period_seconds"]),
            state=DisplayState(payload["state"]),
            just_completed=bool(payload["just_completed"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed event projection: {payload!r}") from exc


def encode_snapshot(session: Session) -> bytes:
    """Encode the window payload: custom message, custom URL and event projections."""
    document = {
        "version": SNAPSHOT_VERSION,
        "session_id": session.session_id,
        "closed": session.closed,
        "custom_message": session.custom_message,
        "custom_url": session.custom_url,
        "events": [projection_to_dict(projection) for projection in session.snapshot()],
    }
    return orjson.dumps(document)


def decode_snapshot(data: bytes | str) -> Dict[str, Any]:
    """
    Decode a snapshot produced by ``encode_snapshot``.

    Returns:
        The document with ``events`` converted back to EventProjection objects

    Raises:
        ValidationError: If the payload is not a supported snapshot
    """
    try:
        document = orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise ValidationError("Snapshot is not valid JSON") from exc

    if not isinstance(document, dict):
        raise ValidationError("Snapshot must contain an object at the top level")
    if document.get("version") != SNAPSHOT_VERSION:
        raise ValidationError(f"Unsupported snapshot version: {document.get('version')!r}")

    raw_events = document.get("events")
    if not isinstance(raw_events, list):
        raise ValidationError("Snapshot events must be a list")
    events: List[EventProjection] = [projection_from_dict(item) for item in raw_events]
    document["events"] = events
    return document


__all__ = ["decode_snapshot", "encode_snapshot", "projection_from_dict", "projection_to_dict"]
