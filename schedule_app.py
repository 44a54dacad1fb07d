"""Long-running host for FOSDEM schedule sync."""
import asyncio
import contextlib
import json
import logging
import os
import signal
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

import requests

from processor.models import Event, Schedule
from processor.schedule_builder import ScheduleBuilder, ScheduleParseError
from processor.timeparse import utcnow
from scheduler.day_rollover import DayRolloverLoop
from scheduler.debounce import DEFAULT_DELAY_SECONDS, Debouncer
from scraper.fosdem_schedule import FosdemScheduleFetcher
from storage.schedule_state import ScheduleState, select_schedule

logger = logging.getLogger(__name__)


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


@dataclass
class AppConfig:
    """Runtime settings read from the environment."""
    schedule_url: str = FosdemScheduleFetcher.DEFAULT_URL
    room_name: str = ''
    log_level: str = 'INFO'
    timeout_seconds: int = 30
    debounce_seconds: float = DEFAULT_DELAY_SECONDS

    @classmethod
    def from_env(cls) -> 'AppConfig':
        return cls(
            schedule_url=os.environ.get('SCHEDULE_URL', FosdemScheduleFetcher.DEFAULT_URL),
            room_name=os.environ.get('ROOM_NAME', ''),
            log_level=os.environ.get('LOG_LEVEL', 'INFO'),
            timeout_seconds=int(os.environ.get('TIMEOUT_SECONDS', '30')),
            debounce_seconds=float(os.environ.get('DEBOUNCE_SECONDS', str(DEFAULT_DELAY_SECONDS)))
        )


class ScheduleApp:
    """Keeps the schedule state fresh and answers what to show today."""

    def __init__(
        self,
        config: AppConfig,
        state: Optional[ScheduleState] = None,
        fetcher: Optional[FosdemScheduleFetcher] = None,
        builder: Optional[ScheduleBuilder] = None,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.config = config
        self.state = state or ScheduleState()
        self.fetcher = fetcher or FosdemScheduleFetcher(
            url=config.schedule_url,
            timeout=config.timeout_seconds
        )
        self.builder = builder or ScheduleBuilder(clock=clock)
        self.day_loop = DayRolloverLoop(self.state.set_today, clock=clock, sleep=sleep)
        self.refresh = Debouncer(self.refresh_now, delay=config.debounce_seconds)
        self._latest_token = 0
        self._stop_event = asyncio.Event()

    def _fetch_and_build(self, room_name: str) -> Schedule:
        xml_text = self.fetcher.fetch_document()
        return self.builder.build(xml_text, room_name=room_name)

    async def refresh_now(self, room_name: str = '') -> None:
        """
        Fetch and rebuild the schedule once.

        A non-success HTTP status keeps the previous schedule; network
        errors, parse failures and anything unexpected are recorded as the
        state's error. Once a newer refresh has finished, whatever its
        outcome, the result of an older one is dropped.

        Args:
            room_name: Only show events from this room (empty: all rooms)
        """
        self._latest_token += 1
        token = self._latest_token
        self.state.set_is_loading(True)

        try:
            schedule = await asyncio.to_thread(self._fetch_and_build, room_name)
            self.state.set_schedule(schedule, request_token=token)
        except requests.HTTPError as e:
            logger.warning(
                f"Schedule server returned an error, keeping previous schedule: {e}",
                extra={'error_type': type(e).__name__}
            )
            self.state.mark_settled(token)
        except requests.RequestException as e:
            logger.error(
                f"Failed to fetch schedule: {e}",
                extra={'error_type': type(e).__name__}
            )
            self.state.set_error(str(e), request_token=token)
        except ScheduleParseError as e:
            logger.error(
                f"Failed to parse schedule: {e}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            self.state.set_error(str(e), request_token=token)
        except Exception as e:
            logger.error(
                f"Schedule refresh failed: {e}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            self.state.set_error(str(e), request_token=token)

        if token == self._latest_token:
            self.state.set_is_loading(False)

    def current_events(self) -> List[Event]:
        return select_schedule(self.state.snapshot())

    def _log_selection(self, snapshot) -> None:
        logger.debug(
            f"{len(select_schedule(snapshot))} events selected for {snapshot.today}"
        )

    def stop(self) -> None:
        self._stop_event.set()

    async def run(self) -> None:
        """Start the day loop, load the schedule and wait for stop()."""
        logger.info(
            "Schedule app started",
            extra={
                'schedule_url': self.config.schedule_url,
                'room_name': self.config.room_name
            }
        )
        unsubscribe = self.state.subscribe(self._log_selection)
        day_task = asyncio.ensure_future(self.day_loop.run(self._stop_event))
        try:
            await self.refresh_now(self.config.room_name)
            await self._stop_event.wait()
        finally:
            # Refreshes that already started run to completion
            self.refresh.cancel()
            await self.refresh.drain()
            day_task.cancel()
            try:
                await day_task
            except asyncio.CancelledError:
                pass
            unsubscribe()
            logger.info("Schedule app stopped")


async def _serve(app: ScheduleApp) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, app.stop)
    await app.run()


def main() -> None:
    config = AppConfig.from_env()
    setup_logging(config.log_level)
    app = ScheduleApp(config)
    try:
        asyncio.run(_serve(app))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")


if __name__ == '__main__':
    main()
