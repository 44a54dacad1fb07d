"""Trailing-edge debounce for coroutine functions."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.4


class Debouncer:
    """
    Collapse rapid calls into one run with the arguments of the last call.

    A run that has already started is never cancelled by later calls.
    """

    def __init__(
        self,
        func: Callable[..., Awaitable[Any]],
        delay: float = DEFAULT_DELAY_SECONDS
    ):
        self.func = func
        self.delay = delay
        self._timer: Optional[asyncio.Task] = None
        self._running: Set[asyncio.Task] = set()

    def __call__(self, *args, **kwargs) -> None:
        if self._timer is not None and not self._timer.done():
            logger.debug("Superseding pending debounced call")
            self._timer.cancel()
        self._timer = asyncio.ensure_future(self._wait_then_run(args, kwargs))

    async def _wait_then_run(self, args, kwargs) -> None:
        await asyncio.sleep(self.delay)
        task = asyncio.ensure_future(self.func(*args, **kwargs))
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    async def drain(self) -> None:
        """Wait for the pending call, if any, and every started run."""
        if self._timer is not None:
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
        if self._running:
            await asyncio.gather(*self._running, return_exceptions=True)

    def cancel(self) -> None:
        """Drop the pending call without waiting; started runs continue."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
