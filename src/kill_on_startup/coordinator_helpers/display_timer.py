"""One-shot timer that clears an event's "just completed" flag."""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ConfirmationDisplayTimer:
    """Runs ``on_expire`` once after ``delay_seconds`` unless cancelled first."""

    def __init__(self, delay_seconds: float, on_expire: Callable[[], None], name: str):
        """
        Initialize display timer.

        Args:
            delay_seconds: How long the confirmation stays visible
            on_expire: Callback when the timer expires; must not block
            name: Name for logging
        """
        self.delay_seconds = delay_seconds
        self.on_expire = on_expire
        self.name = name
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start timer on the running event loop."""
        if not self._task or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._run(), name=f"display-timer:{self.name}")

    async def _run(self) -> None:
        try:
            await asyncio.sleep(self.delay_seconds)
        except asyncio.CancelledError:
            logger.debug("%s: display timer cancelled", self.name)
            return
        self.on_expire()

    def cancel(self) -> None:
        """Cancel timer if running. Safe to call from any thread."""
        task = self._task
        if task is None or task.done():
            return
        loop = task.get_loop()
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            task.cancel()
        else:
            loop.call_soon_threadsafe(task.cancel)

    async def wait(self) -> None:
        """Wait for the timer to expire or finish cancelling."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()
