"""Data models for courses, terms, assignments and calendar events."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Optional

EventType = Literal["class", "assignment", "exam", "office-hours", "meeting"]
MeetingType = Literal["google-meet", "zoom", "teams"]
AssignmentStatus = Literal["todo", "done"]

EVENT_TYPES: tuple[str, ...] = ("class", "assignment", "exam", "office-hours", "meeting")
MEETING_TYPES: tuple[str, ...] = ("google-meet", "zoom", "teams")

# Ordered Sunday-first, so the index of a token is its day-of-week number.
WEEKDAYS: tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass
class CourseSchedule:
    """Weekly meeting pattern of a single course."""

    id: str
    title: str
    code: str
    meeting_days: list[str] = field(default_factory=list)  # e.g. ["Mon", "Wed"]
    meeting_start: Optional[str] = None  # "HH:MM", 24-hour
    meeting_end: Optional[str] = None
    instructor: Optional[str] = None
    term_id: Optional[str] = None

    @property
    def has_meetings(self) -> bool:
        return bool(self.meeting_days and self.meeting_start and self.meeting_end)


@dataclass
class TermRange:
    """Academic term bounded by two calendar dates, both inclusive."""

    start_date: date
    end_date: date
    id: Optional[str] = None
    name: Optional[str] = None

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass
class Assignment:
    """Assignment with a due instant."""

    id: str
    title: str
    due_at: datetime
    status: AssignmentStatus = "todo"
    notes: Optional[str] = None
    course_id: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status == "done"


@dataclass(frozen=True)
class CalendarEvent:
    """Unified event shape produced for display layers."""

    id: str
    title: str
    type: EventType
    start_time: datetime
    color: str
    end_time: Optional[datetime] = None
    course_code: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    is_all_day: bool = False
    meeting_url: Optional[str] = None
    meeting_type: Optional[MeetingType] = None

    def __post_init__(self) -> None:
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError(f"Event {self.id} ends before it starts")

    @property
    def day(self) -> date:
        """Calendar date the event starts on."""
        return self.start_time.date()
