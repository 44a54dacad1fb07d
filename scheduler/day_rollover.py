"""Background loop keeping "today" current as days roll over."""
import asyncio
import contextlib
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from processor.timeparse import end_of_day, reference_date, utcnow

logger = logging.getLogger(__name__)

# Never sleep less than this, even if the clock misbehaves
MIN_SLEEP_SECONDS = 30


def seconds_until_rollover(now: datetime) -> float:
    """
    Seconds to wait before checking for a new day again.

    Args:
        now: Current instant (aware datetime)

    Returns:
        Seconds until 23:59:59 of today in the reference timezone, plus
        MIN_SLEEP_SECONDS; never less than MIN_SLEEP_SECONDS
    """
    remaining = (end_of_day(reference_date(now)) - now).total_seconds()
    return max(remaining, 0) + MIN_SLEEP_SECONDS


class DayRolloverLoop:
    """Publishes today's date and wakes up again after midnight."""

    def __init__(
        self,
        publish: Callable[[str], None],
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        retry_delay: float = MIN_SLEEP_SECONDS
    ):
        """
        Initialize the loop.

        Args:
            publish: Called with the new date string whenever the day changes
            clock: Callable returning the current instant
            sleep: Coroutine function used to wait
            retry_delay: Seconds to back off after ``sleep`` itself fails
        """
        self.publish = publish
        self.clock = clock
        self.sleep = sleep
        self.retry_delay = retry_delay
        self.last_today: Optional[str] = None

    def step(self) -> float:
        """
        Publish today's date if it changed.

        Returns:
            Seconds to sleep before the next step
        """
        now = self.clock()
        today = reference_date(now)
        if today != self.last_today:
            logger.info(f"Today is now {today}")
            self.publish(today)
            self.last_today = today
        return seconds_until_rollover(now)

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Run until ``stop_event`` is set or the task is cancelled."""
        if stop_event is None:
            stop_event = asyncio.Event()

        while not stop_event.is_set():
            wait_seconds = self.step()
            logger.debug(f"Waiting {wait_seconds:.0f} seconds for new day")
            try:
                await self.sleep(wait_seconds)
            except asyncio.CancelledError:
                logger.info("Day rollover loop cancelled")
                raise
            except Exception as e:
                logger.error(f"Sleep failed in day rollover loop: {e}", exc_info=True)
                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(stop_event.wait(), timeout=self.retry_delay)
            logger.debug("Woke up, checking for new day")
