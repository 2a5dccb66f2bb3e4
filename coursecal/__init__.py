"""Course calendar engine: recurring class expansion and event aggregation."""

from .colors import ColorAssigner, assignment_priority
from .errors import CourseCalError, ValidationError
from .feed import build_feed
from .models import Assignment, CalendarEvent, CourseSchedule, TermRange
from .normalizer import EventNormalizer
from .query import (
    count_this_week,
    filter_by_range,
    find_conflicts,
    group_by_date,
    sort_by_time,
    this_week,
    today,
    upcoming_deadlines,
)
from .records import RecordSet, load_records, records_from_document
from .recurrence import RecurrenceExpander

__all__ = [
    "Assignment",
    "CalendarEvent",
    "ColorAssigner",
    "CourseCalError",
    "CourseSchedule",
    "EventNormalizer",
    "RecordSet",
    "RecurrenceExpander",
    "TermRange",
    "ValidationError",
    "assignment_priority",
    "build_feed",
    "count_this_week",
    "filter_by_range",
    "find_conflicts",
    "group_by_date",
    "load_records",
    "records_from_document",
    "sort_by_time",
    "this_week",
    "today",
    "upcoming_deadlines",
]
