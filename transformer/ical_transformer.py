"""iCalendar transformer for calendar events."""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from icalendar import Calendar, Event
from loguru import logger

from coursecal.models import CalendarEvent
from .base import BaseTransformer


class ICalTransformer(BaseTransformer):
    """Transformer that converts calendar events to iCalendar format.

    Times are written as floating local times, since events carry naive
    wall-clock datetimes. All-day events become DATE values.
    """

    PRODID = "-//coursecal//Course Calendar//EN"
    UID_DOMAIN = "coursecal"
    # RFC 7986 COLOR takes CSS3 names only, so hex colors go in an extension property
    COLOR_PROPERTY = "X-COURSECAL-COLOR"
    extension = ".ics"

    def __init__(self, calendar_name: str = "Schedule") -> None:
        """Initialize the iCalendar transformer.

        Args:
            calendar_name: Display name written to X-WR-CALNAME.
        """
        self._calendar: Optional[Calendar] = None
        self._calendar_name = calendar_name

    def _generate_uid(self, event: CalendarEvent) -> str:
        """Generate a stable unique identifier from the event id."""
        return hashlib.md5(event.id.encode()).hexdigest() + "@" + self.UID_DOMAIN

    def _summary(self, event: CalendarEvent) -> str:
        # Summary format: [CS101] Course Title
        if event.course_code:
            return f"[{event.course_code}] {event.title}"
        return event.title

    def _build_event(self, event: CalendarEvent, stamp: datetime) -> Event:
        ical_event = Event()
        ical_event.add("uid", self._generate_uid(event))
        ical_event.add("dtstamp", stamp)

        if event.is_all_day:
            ical_event.add("dtstart", event.day)
            ical_event.add("dtend", event.day + timedelta(days=1))
        else:
            ical_event.add("dtstart", event.start_time)
            if event.end_time is not None:
                ical_event.add("dtend", event.end_time)

        ical_event.add("summary", self._summary(event))
        ical_event.add("categories", [event.type])
        ical_event.add(self.COLOR_PROPERTY, event.color)

        if event.location:
            ical_event.add("location", event.location)
        if event.description:
            ical_event.add("description", event.description)
        if event.meeting_url:
            ical_event.add("url", event.meeting_url)

        return ical_event

    def transform(self, events: Sequence[CalendarEvent]) -> Calendar:
        """Transform calendar events into an iCalendar object.

        Args:
            events: Events to write, one VEVENT each.

        Returns:
            iCalendar Calendar object.
        """
        self._calendar = Calendar()
        self._calendar.add("prodid", self.PRODID)
        self._calendar.add("version", "2.0")
        self._calendar.add("calscale", "GREGORIAN")
        self._calendar.add("method", "PUBLISH")
        self._calendar.add("x-wr-calname", self._calendar_name)

        stamp = datetime.now(timezone.utc)
        for event in events:
            self._calendar.add_component(self._build_event(event, stamp))

        logger.debug("Wrote {} events to iCalendar", len(events))
        return self._calendar

    def to_bytes(self) -> bytes:
        """Serialize the calendar.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")
        return self._calendar.to_ical()
