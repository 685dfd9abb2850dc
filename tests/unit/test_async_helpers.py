"""Tests for kill_on_startup/async_helpers.py and the threaded submission path."""

import asyncio
import threading

import pytest

from kill_on_startup import TerminationCoordinator, UnknownEventError
from kill_on_startup.async_helpers import _resolve_coroutine, submit_coroutine_threadsafe
from tests.helpers.fake_terminator import FakeTerminator, make_event


async def sample_coro():
    return "success"


@pytest.fixture
def background_loop():
    """Event loop running on a worker thread, like a GUI host's coordinator loop."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    yield loop
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.close()


class TestResolveCoroutine:
    def test_returns_coroutine_directly(self):
        coro = sample_coro()
        result = _resolve_coroutine(coro)
        assert result is coro
        result.close()

    def test_raises_for_factory_returning_non_coroutine(self):
        with pytest.raises(TypeError, match="must return a coroutine"):
            _resolve_coroutine(lambda: "not_a_coroutine")

    def test_raises_for_invalid_input(self):
        with pytest.raises(TypeError, match="expects a coroutine or a callable"):
            _resolve_coroutine("not_valid")


def test_submit_runs_on_loop(background_loop):
    done = threading.Event()

    future = submit_coroutine_threadsafe(sample_coro, background_loop, on_done=lambda _f: done.set())

    assert future.result(timeout=5) == "success"
    assert done.wait(timeout=5)


def test_submit_to_closed_loop_raises():
    loop = asyncio.new_event_loop()
    loop.close()

    with pytest.raises(RuntimeError, match="closed event loop"):
        submit_coroutine_threadsafe(sample_coro, loop)


def test_submit_termination_from_interactive_thread(background_loop):
    coordinator = TerminationCoordinator(FakeTerminator(), loop=background_loop)
    session = coordinator.start_session([make_event(pid=21, generation_token=2)])
    delivered = []
    done = threading.Event()

    def _on_done(finished):
        delivered.append(finished.result())
        done.set()

    future = coordinator.submit_termination(session, 21, 2, on_done=_on_done)
    result = future.result(timeout=5)

    assert result.success is True
    assert done.wait(timeout=5)
    assert delivered == [result]
    background_loop.call_soon_threadsafe(coordinator.dismiss, session)


def test_submit_termination_carries_validation_errors(background_loop):
    coordinator = TerminationCoordinator(FakeTerminator(), loop=background_loop)
    session = coordinator.start_session([make_event(pid=21, generation_token=2)])

    future = coordinator.submit_termination(session, 21, 3)

    with pytest.raises(UnknownEventError):
        future.result(timeout=5)


def test_submit_termination_requires_loop():
    coordinator = TerminationCoordinator(FakeTerminator())
    session = coordinator.start_session([])

    with pytest.raises(RuntimeError, match="bind_loop"):
        coordinator.submit_termination(session, 1, 1)
