"""Expansion of weekly course meetings into dated calendar events."""

import re
from datetime import date, datetime, time, timedelta

from loguru import logger

from .colors import ColorAssigner
from .errors import ValidationError
from .models import WEEKDAYS, CalendarEvent, CourseSchedule, TermRange

_TIME_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")
_WEEKDAY_LOOKUP = {token.lower(): token for token in WEEKDAYS}


def parse_meeting_time(value: str, course_id: str, field: str) -> time:
    """Parse an ``HH:MM`` 24-hour clock string.

    Args:
        value: Clock string like "09:30" or "9:30".
        course_id: Owning course, used in the error message.
        field: Name of the field being parsed, used in the error message.

    Returns:
        Time of day.

    Raises:
        ValidationError: If the string is not a valid 24-hour clock time.
    """
    if not isinstance(value, str):
        raise ValidationError(course_id, field, f"expected an HH:MM string, got {value!r}")
    match = _TIME_PATTERN.fullmatch(value.strip())
    if not match:
        raise ValidationError(course_id, field, f"expected HH:MM, got {value!r}")

    hour, minute = map(int, match.groups())
    if hour > 23 or minute > 59:
        raise ValidationError(course_id, field, f"{value!r} is not a valid time of day")
    return time(hour, minute)


def parse_weekday(token: str, course_id: str, field: str = "meeting_days") -> str:
    """Normalize a weekday token like "mon" to its canonical form "Mon".

    Raises:
        ValidationError: If the token is not one of Sun..Sat.
    """
    if not isinstance(token, str):
        raise ValidationError(course_id, field, f"unknown weekday {token!r}")
    canonical = _WEEKDAY_LOOKUP.get(token.strip().lower())
    if canonical is None:
        raise ValidationError(course_id, field, f"unknown weekday {token!r}")
    return canonical


def weekday_token(day: date) -> str:
    """Weekday token for a date ("Sun" .. "Sat")."""
    # date.weekday() is Monday-based, WEEKDAYS is Sunday-based.
    return WEEKDAYS[(day.weekday() + 1) % 7]


class RecurrenceExpander:
    """Expands course meeting patterns over a term into class events."""

    def __init__(self, colors: ColorAssigner) -> None:
        """Initialize the expander.

        Args:
            colors: Assigner used to color events by course code.
        """
        self._colors = colors

    def _meeting_window(self, course: CourseSchedule) -> tuple[time, time]:
        start = parse_meeting_time(course.meeting_start, course.id, "meeting_start")
        end = parse_meeting_time(course.meeting_end, course.id, "meeting_end")
        if end <= start:
            raise ValidationError(
                course.id,
                "meeting_end",
                f"meeting ends at {course.meeting_end} which is not after {course.meeting_start}",
            )
        return start, end

    def expand(self, course: CourseSchedule, term: TermRange) -> list[CalendarEvent]:
        """Generate one class event per meeting day within the term.

        Args:
            course: Course with its weekly meeting pattern.
            term: Term whose inclusive date bounds limit the expansion.

        Returns:
            Class events in ascending date order. Empty when the course has
            no meeting pattern or the term range is inverted.

        Raises:
            ValidationError: On a malformed time, an unknown weekday token or
                a meeting that does not end after it starts.
        """
        if not course.has_meetings:
            return []

        meeting_days = {parse_weekday(token, course.id) for token in course.meeting_days}
        start, end = self._meeting_window(course)
        description = f"Instructor: {course.instructor}" if course.instructor else None

        color = None
        events: list[CalendarEvent] = []
        current = term.start_date
        while current <= term.end_date:
            if weekday_token(current) in meeting_days:
                # Courses that never meet in the range take no palette slot
                if color is None:
                    color = self._colors.color_for(course.code)
                events.append(
                    CalendarEvent(
                        id=f"{course.id}-{current.isoformat()}",
                        title=course.title,
                        type="class",
                        start_time=datetime.combine(current, start),
                        end_time=datetime.combine(current, end),
                        color=color,
                        course_code=course.code,
                        description=description,
                    )
                )
            current += timedelta(days=1)

        logger.debug(
            "Expanded course {} over {}..{} into {} events",
            course.code, term.start_date, term.end_date, len(events),
        )
        return events
