from __future__ import annotations

"""Utility helpers for handing coroutines to an event loop from other threads."""

import asyncio
import concurrent.futures
from typing import Any, Callable, Coroutine, Optional, Union

CoroutineFactory = Callable[[], Coroutine[Any, Any, Any]]
DoneCallback = Callable[[concurrent.futures.Future], None]


def submit_coroutine_threadsafe(
    coro_or_factory: Union[Coroutine[Any, Any, Any], CoroutineFactory],
    loop: asyncio.AbstractEventLoop,
    *,
    on_done: Optional[DoneCallback] = None,
) -> concurrent.futures.Future:
    """
    Schedule a coroutine on ``loop`` and return a thread-safe future.

    Intended for interactive threads that must not block: the caller gets the
    future back immediately and ``on_done`` fires (on the loop thread) once the
    coroutine finishes, with its result or exception stored on the future.

    Raises:
        RuntimeError: If the loop is closed
    """
    if loop.is_closed():
        raise RuntimeError("Cannot submit work to a closed event loop")

    coro = _resolve_coroutine(coro_or_factory)
    future = asyncio.run_coroutine_threadsafe(coro, loop)
    if on_done is not None:
        future.add_done_callback(on_done)
    return future


def _resolve_coroutine(
    coro_or_factory: Union[Coroutine[Any, Any, Any], CoroutineFactory],
) -> Coroutine[Any, Any, Any]:
    """Turn the input into a coroutine object for scheduling."""
    if asyncio.iscoroutine(coro_or_factory):
        return coro_or_factory

    if callable(coro_or_factory):
        result = coro_or_factory()
        if not asyncio.iscoroutine(result):
            raise TypeError("Callable passed to submit_coroutine_threadsafe must return a coroutine")
        return result

    raise TypeError("submit_coroutine_threadsafe expects a coroutine or a callable returning one")
