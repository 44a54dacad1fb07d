"""Process-wide schedule state shared by the refresh path and the day loop."""
import logging
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Tuple

from processor.models import Event, Schedule
from processor.selector import select_events
from processor.timeparse import to_iso, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleSnapshot:
    """Immutable view of the schedule state."""
    events: Mapping[str, Tuple[Event, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    start: str = ''
    end: str = ''
    is_loading: bool = True
    error: Optional[str] = None
    today: Optional[str] = None
    # Newest refresh that has finished, whatever its outcome; 0 before the first
    request_token: int = 0


Listener = Callable[[ScheduleSnapshot], None]


class ScheduleState:
    """
    Owned state cell for the current schedule and today's date.

    The refresh path writes the schedule and the day loop writes ``today``.
    Readers take snapshots or subscribe to be called after every change.
    Refresh results carry a request token; a result older than the newest
    finished refresh is dropped.
    """

    def __init__(self):
        now = to_iso(utcnow())
        self._snapshot = ScheduleSnapshot(start=now, end=now)
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    def snapshot(self) -> ScheduleSnapshot:
        with self._lock:
            return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new snapshot after each change.

        Returns:
            Function that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set_schedule(self, schedule: Schedule, request_token: int = 0) -> bool:
        """
        Replace the schedule wholesale and clear any previous error.

        Args:
            schedule: Newly built schedule
            request_token: Token of the refresh that built it

        Returns:
            False if a newer refresh has already finished
        """
        data = schedule.to_dict()
        events = MappingProxyType({
            date: tuple(day_events) for date, day_events in schedule.events.items()
        })
        return self._settle(
            request_token,
            events=events,
            start=data['start'] or self._snapshot.start,
            end=data['end'] or self._snapshot.end,
            error=None
        )

    def set_error(self, message: str, request_token: int = 0) -> bool:
        """
        Record a user-visible refresh error and clear the loading flag.

        Returns:
            False if a newer refresh has already finished
        """
        return self._settle(request_token, is_loading=False, error=message)

    def mark_settled(self, request_token: int) -> bool:
        """
        Record that a refresh finished without changing what is shown.

        Returns:
            False if a newer refresh has already finished
        """
        return self._settle(request_token)

    def set_is_loading(self, is_loading: bool) -> None:
        self._update(is_loading=is_loading)

    def set_today(self, today: str) -> None:
        self._update(today=today)

    def _settle(self, request_token: int, **changes) -> bool:
        with self._lock:
            if request_token < self._snapshot.request_token:
                logger.debug(
                    f"Dropping stale result of refresh {request_token}, "
                    f"refresh {self._snapshot.request_token} already finished"
                )
                return False
            self._snapshot = replace(self._snapshot, request_token=request_token, **changes)
        self._notify()
        return True

    def _update(self, **changes) -> None:
        with self._lock:
            self._snapshot = replace(self._snapshot, **changes)
        self._notify()

    def _notify(self) -> None:
        with self._lock:
            snapshot = self._snapshot
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Schedule state listener failed: {e}", exc_info=True)


def select_schedule(state: ScheduleSnapshot) -> List[Event]:
    """Return today's events, clamped to the first or last conference day."""
    return select_events(state.events, state.today)


def select_is_loading(state: ScheduleSnapshot) -> bool:
    return state.is_loading


def select_error(state: ScheduleSnapshot) -> Optional[str]:
    return state.error
