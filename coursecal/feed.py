"""Merging of stored events, assignments and class meetings into one feed."""

from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from loguru import logger

from .colors import ColorAssigner
from .models import Assignment, CalendarEvent, CourseSchedule, TermRange
from .normalizer import EventNormalizer
from .recurrence import RecurrenceExpander

ASSIGNMENT_ID_PREFIX = "assignment-"
DUE_SUFFIX = " (Due)"


def assignment_event(
    normalizer: EventNormalizer,
    assignment: Assignment,
    course: Optional[CourseSchedule] = None,
    now: Optional[datetime] = None,
) -> CalendarEvent:
    """Assignment event as it appears in a merged feed.

    The id gets the ``assignment-`` prefix so it cannot clash with the ids
    of other events and the title is marked as a due date.
    """
    event = normalizer.from_assignment(assignment, course, now)
    return replace(
        event,
        id=f"{ASSIGNMENT_ID_PREFIX}{event.id}",
        title=f"{event.title}{DUE_SUFFIX}",
    )


def build_feed(
    terms: Iterable[TermRange],
    courses: Iterable[CourseSchedule],
    assignments: Iterable[Assignment] = (),
    events: Iterable[Mapping[str, Any]] = (),
    colors: Optional[ColorAssigner] = None,
    now: Optional[datetime] = None,
    include_done: bool = True,
) -> list[CalendarEvent]:
    """Combine every event source into one unsorted list.

    Args:
        terms: Terms the courses belong to.
        courses: Courses whose meetings are expanded over their term.
        assignments: Assignments, shown as all-day events on the due date.
        events: Stored one-off event records.
        colors: Course color assigner. A fresh one is used when omitted.
        now: Reference moment for assignment priority colors.
        include_done: Whether completed assignments are included.

    Returns:
        Stored events, then assignments, then class meetings, each in the
        order given.

    Raises:
        ValidationError: If any record or meeting pattern is invalid.
    """
    colors = colors if colors is not None else ColorAssigner()
    normalizer = EventNormalizer(colors)
    expander = RecurrenceExpander(colors)

    courses = list(courses)
    courses_by_id = {course.id: course for course in courses}
    terms_by_id = {term.id: term for term in terms if term.id is not None}

    feed = [normalizer.from_record(record) for record in events]
    stored_count = len(feed)

    for assignment in assignments:
        if assignment.is_done and not include_done:
            continue
        course = courses_by_id.get(assignment.course_id) if assignment.course_id else None
        feed.append(assignment_event(normalizer, assignment, course, now))
    assignment_count = len(feed) - stored_count

    for course in courses:
        term = terms_by_id.get(course.term_id) if course.term_id else None
        if term is None:
            logger.warning("Skipping course {} ({}): term {} not found", course.code, course.id, course.term_id)
            continue
        feed.extend(expander.expand(course, term))

    logger.debug(
        "Built feed: {} stored, {} assignments, {} class events",
        stored_count, assignment_count, len(feed) - stored_count - assignment_count,
    )
    return feed
