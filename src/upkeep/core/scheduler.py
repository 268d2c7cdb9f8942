"""Daily wall-clock scheduling of upgrade runs."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable
import logging
import re
import threading

from upkeep.core.errors import InvalidTimeFormat

logger = logging.getLogger(__name__)

DAY = timedelta(hours=24)

# How late a wakeup may be and still count as the scheduled tick.
LATE_GRACE = timedelta(minutes=1)

TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([ap]m)?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class ScheduleEntry:
    """A time of day at which to run, every 24 hours."""

    hour: int
    minute: int

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def parse_time_of_day(text: str) -> ScheduleEntry:
    """Parse ``HH:MM`` (24-hour) or ``HH:MMam``/``HH:MMpm``."""
    match = TIME_PATTERN.match(text or "")
    if not match:
        raise InvalidTimeFormat(f"Invalid time {text!r}; use HH:MM or HH:MMam/pm")

    hour, minute = int(match.group(1)), int(match.group(2))
    meridiem = (match.group(3) or "").lower()

    if minute > 59:
        raise InvalidTimeFormat(f"Invalid minute in {text!r}")

    if meridiem:
        if not 1 <= hour <= 12:
            raise InvalidTimeFormat(f"Invalid hour in {text!r}")
        hour = hour % 12
        if meridiem == "pm":
            hour += 12
    elif hour > 23:
        raise InvalidTimeFormat(f"Invalid hour in {text!r}")

    return ScheduleEntry(hour=hour, minute=minute)


def next_occurrence(entry: ScheduleEntry, now: datetime) -> datetime:
    """The next time ``entry`` comes round: today if still ahead, else tomorrow."""
    candidate = now.replace(hour=entry.hour, minute=entry.minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += DAY
    return candidate


def next_aligned(first: datetime, now: datetime) -> datetime:
    """The first tick after ``now`` on the 24-hour grid starting at ``first``.

    Ticks missed while the process was suspended are skipped.
    """
    if now < first:
        return first
    return first + ((now - first) // DAY + 1) * DAY


def _event_wait(seconds: float, cancelled: threading.Event) -> bool:
    return cancelled.wait(seconds)


class ScheduleHandle:
    """Returned by Scheduler.arm; cancels future ticks."""

    def __init__(self, entry: ScheduleEntry, first: datetime):
        self.entry = entry
        self.next_fire = first
        self.ticks = 0
        self._cancelled = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Stop before the next tick. A tick already running completes."""
        self._cancelled.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)


class Scheduler:
    """Fires a callback once a day at a fixed local time.

    ``clock`` and ``wait`` may be replaced for testing; ``wait(seconds,
    event)`` must return True when the event was set.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        wait: Callable[[float, threading.Event], bool] = _event_wait,
    ):
        self.clock = clock
        self.wait = wait

    def arm(self, entry: ScheduleEntry | str, on_tick: Callable[[], object]) -> ScheduleHandle:
        """Start ticking at the next occurrence of ``entry``."""
        if isinstance(entry, str):
            entry = parse_time_of_day(entry)

        first = next_occurrence(entry, self.clock())
        handle = ScheduleHandle(entry, first)
        thread = threading.Thread(
            target=self._run,
            args=(handle, first, on_tick),
            name="upkeep-scheduler",
            daemon=True,
        )
        handle._thread = thread
        logger.info("Scheduled daily run at %s, first at %s", entry, first)
        thread.start()
        return handle

    def _run(self, handle: ScheduleHandle, first: datetime, on_tick: Callable[[], object]) -> None:
        target = first
        while not handle.cancelled:
            now = self.clock()
            delay = (target - now).total_seconds()
            if delay > 0:
                if self.wait(delay, handle._cancelled):
                    break
                continue

            if now - target > LATE_GRACE:
                # Woke up long after the tick (suspended host); wait for the next one.
                logger.warning("Missed scheduled run at %s", target)
                target = next_aligned(first, now)
                handle.next_fire = target
                continue

            logger.info("Scheduled run for %s starting", target)
            try:
                on_tick()
            except Exception:
                # Keep the schedule armed for the next day.
                logger.exception("Scheduled run failed")
            handle.ticks += 1

            target = next_aligned(first, self.clock())
            handle.next_fire = target
            logger.debug("Next scheduled run at %s", target)
