"""Range filtering, ordering, grouping and conflict checks over events.

All functions are pure: they never modify the events they are given and
always return new containers.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from .errors import ValidationError
from .models import WEEKDAYS, Assignment, CalendarEvent
from .recurrence import parse_weekday, weekday_token

DEADLINE_TYPES = ("assignment", "exam")
DEFAULT_WEEK_START = "Sun"


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def filter_by_range(
    events: Iterable[CalendarEvent],
    start: datetime,
    end: datetime,
) -> list[CalendarEvent]:
    """Events starting within ``[start, end)``."""
    return [event for event in events if start <= event.start_time < end]


def today(events: Iterable[CalendarEvent], now: Optional[datetime] = None) -> list[CalendarEvent]:
    """Events starting between local midnight today and the next midnight."""
    start = _midnight(now or datetime.now())
    return filter_by_range(events, start, start + timedelta(days=1))


def week_bounds(
    now: Optional[datetime] = None,
    week_start: str = DEFAULT_WEEK_START,
) -> tuple[datetime, datetime]:
    """Start and end of the week containing ``now``.

    Args:
        now: Reference moment, defaults to the current local time.
        week_start: Weekday token the week begins on ("Sun" .. "Sat").

    Returns:
        Midnight of the most recent ``week_start`` day and the moment seven
        days later.
    """
    now = now or datetime.now()
    first_day = WEEKDAYS.index(parse_weekday(week_start, "<week>", "week_start"))
    today_index = WEEKDAYS.index(weekday_token(now.date()))
    start = _midnight(now) - timedelta(days=(today_index - first_day) % 7)
    return start, start + timedelta(days=7)


def this_week(
    events: Iterable[CalendarEvent],
    now: Optional[datetime] = None,
    week_start: str = DEFAULT_WEEK_START,
) -> list[CalendarEvent]:
    """Events starting in the current week (Sunday-based unless told otherwise)."""
    start, end = week_bounds(now, week_start)
    return filter_by_range(events, start, end)


def sort_by_time(events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
    """Stable ascending sort by start time."""
    return sorted(events, key=lambda event: event.start_time)


def upcoming_deadlines(
    events: Iterable[CalendarEvent],
    horizon_days: int = 7,
    now: Optional[datetime] = None,
) -> list[CalendarEvent]:
    """Assignments and exams starting within the next ``horizon_days`` days."""
    if horizon_days < 0:
        raise ValidationError("<query>", "horizon_days", "must not be negative")

    now = now or datetime.now()
    horizon = now + timedelta(days=horizon_days)
    deadlines = [event for event in events if event.type in DEADLINE_TYPES]
    return sort_by_time(filter_by_range(deadlines, now, horizon))


def group_by_date(events: Iterable[CalendarEvent]) -> dict[str, list[CalendarEvent]]:
    """Partition events by the ISO date they start on, keeping input order."""
    groups: dict[str, list[CalendarEvent]] = {}
    for event in events:
        groups.setdefault(event.day.isoformat(), []).append(event)
    return groups


def find_conflicts(events: Iterable[CalendarEvent]) -> list[tuple[CalendarEvent, CalendarEvent]]:
    """Overlapping neighbours among timed events.

    Timed events are sorted by start and each adjacent pair on the same date
    is reported when the earlier one ends after the later one starts. Only
    neighbours are compared, so an overlap between two events separated by a
    third in sort order goes unreported.
    """
    timed = sort_by_time(event for event in events if not event.is_all_day)
    conflicts: list[tuple[CalendarEvent, CalendarEvent]] = []

    for current, following in zip(timed, timed[1:]):
        if (
            current.end_time is not None
            and current.day == following.day
            and current.end_time > following.start_time
        ):
            conflicts.append((current, following))

    return conflicts


def count_this_week(
    events: Iterable[CalendarEvent],
    assignments: Iterable[Assignment],
    now: Optional[datetime] = None,
    week_start: str = DEFAULT_WEEK_START,
) -> int:
    """Number of events plus open assignments falling in the current week."""
    start, end = week_bounds(now, week_start)
    count = len(filter_by_range(events, start, end))
    count += sum(
        1 for assignment in assignments
        if not assignment.is_done and start <= assignment.due_at < end
    )
    return count
