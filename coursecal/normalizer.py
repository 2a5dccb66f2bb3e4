"""Conversion of assignments and one-off event records into calendar events."""

from datetime import datetime
from typing import Any, Mapping, Optional

from .colors import ColorAssigner, priority_color
from .errors import ValidationError
from .models import EVENT_TYPES, MEETING_TYPES, Assignment, CalendarEvent, CourseSchedule
from .records import parse_instant, record_id


class EventNormalizer:
    """Brings assignments and stored events into the unified event shape."""

    def __init__(self, colors: ColorAssigner) -> None:
        self._colors = colors

    def from_assignment(
        self,
        assignment: Assignment,
        course: Optional[CourseSchedule] = None,
        now: Optional[datetime] = None,
    ) -> CalendarEvent:
        """Convert an assignment into an all-day event on its due date.

        The color comes from the course when one is given, otherwise from
        how close the due date is. The event keeps the assignment's own id;
        callers that merge it with other event types are expected to prefix
        it with ``"assignment-"``.
        """
        if course is not None:
            color = self._colors.color_for(course.code)
        else:
            color = priority_color(assignment.due_at, now)

        return CalendarEvent(
            id=assignment.id,
            title=assignment.title,
            type="assignment",
            start_time=assignment.due_at,
            color=color,
            course_code=course.code if course else None,
            description=assignment.notes,
            is_all_day=True,
        )

    def from_record(self, record: Mapping[str, Any]) -> CalendarEvent:
        """Map a stored one-off event record onto a calendar event.

        Fields are renamed, never recomputed: type, color and the all-day
        flag are taken from the record as they are.

        Raises:
            ValidationError: If a required field is missing or malformed.
        """
        event_id = record_id(record, "event")
        event_type = record.get("type")
        if event_type not in EVENT_TYPES:
            raise ValidationError(event_id, "type", f"unknown event type {event_type!r}")

        for required in ("title", "startTime", "color"):
            if record.get(required) is None:
                raise ValidationError(event_id, required, "field is required")

        is_all_day = record.get("isAllDay")
        if is_all_day is None:
            is_all_day = False
        if not isinstance(is_all_day, bool):
            raise ValidationError(event_id, "isAllDay", f"expected true or false, got {is_all_day!r}")

        meeting_type = record.get("meetingType")
        if meeting_type is not None and meeting_type not in MEETING_TYPES:
            raise ValidationError(event_id, "meetingType", f"unknown meeting type {meeting_type!r}")

        start_time = parse_instant(record["startTime"], event_id, "startTime")
        end_time = None
        if record.get("endTime") is not None:
            end_time = parse_instant(record["endTime"], event_id, "endTime")
            if end_time < start_time:
                raise ValidationError(event_id, "endTime", "event ends before it starts")

        return CalendarEvent(
            id=event_id,
            title=record["title"],
            type=event_type,
            start_time=start_time,
            end_time=end_time,
            color=record["color"],
            course_code=record.get("courseCode"),
            location=record.get("location"),
            description=record.get("description"),
            is_all_day=is_all_day,
            meeting_url=record.get("meetingUrl"),
            meeting_type=meeting_type,
        )
