"""Shared fixtures for calendar engine tests."""

from datetime import date, datetime

import pytest
from loguru import logger

from coursecal import ColorAssigner, CourseSchedule, TermRange


@pytest.fixture
def colors() -> ColorAssigner:
    return ColorAssigner()


@pytest.fixture
def now() -> datetime:
    # Wednesday afternoon
    return datetime(2025, 3, 5, 15, 30)


@pytest.fixture
def term() -> TermRange:
    return TermRange(id="term-1", name="Winter 2025", start_date=date(2025, 1, 1), end_date=date(2025, 1, 14))


@pytest.fixture
def course() -> CourseSchedule:
    return CourseSchedule(
        id="course-1",
        title="Intro to Programming",
        code="CS101",
        meeting_days=["Mon", "Wed"],
        meeting_start="09:00",
        meeting_end="10:15",
        instructor="Dr. Ada Lovelace",
        term_id="term-1",
    )


@pytest.fixture
def caplog(caplog):
    """Route loguru records into pytest's caplog."""
    handler_id = logger.add(caplog.handler, format="{message}", level="DEBUG")
    yield caplog
    logger.remove(handler_id)
