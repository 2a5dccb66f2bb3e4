"""Loading of raw application records into engine models.

Records arrive the way the application stores them: camelCase keys, ids
under ``_id``, term bounds as ISO date strings and instants as epoch
milliseconds. Everything is converted to naive local wall-clock values.
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping, Union

from loguru import logger

from .errors import ValidationError
from .models import Assignment, CourseSchedule, TermRange


@dataclass
class RecordSet:
    """Everything needed to build a calendar feed."""

    terms: list[TermRange] = field(default_factory=list)
    courses: list[CourseSchedule] = field(default_factory=list)
    assignments: list[Assignment] = field(default_factory=list)
    events: list[dict[str, Any]] = field(default_factory=list)


def record_id(record: Mapping[str, Any], kind: str) -> str:
    """Return the identifier of a record, stored as ``_id`` or ``id``."""
    value = record.get("_id", record.get("id"))
    if value is None or value == "":
        raise ValidationError(f"<{kind}>", "id", "record has no identifier")
    return str(value)


def _require(record: Mapping[str, Any], key: str, entity_id: str) -> Any:
    value = record.get(key)
    if value is None:
        raise ValidationError(entity_id, key, "field is required")
    return value


def parse_date(value: Any, entity_id: str, field_name: str) -> date:
    """Parse a calendar date given as ``YYYY-MM-DD`` or a full ISO datetime."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(
            entity_id, field_name, f"invalid date {value!r}, expected YYYY-MM-DD"
        )


def parse_instant(value: Any, entity_id: str, field_name: str) -> datetime:
    """Parse an instant given as epoch milliseconds, ISO string or datetime.

    Aware values are converted to naive local time.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        raise ValidationError(entity_id, field_name, f"invalid instant {value!r}")
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value / 1000)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(entity_id, field_name, f"invalid instant {value!r}")
    else:
        raise ValidationError(entity_id, field_name, f"invalid instant {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def term_from_record(record: Mapping[str, Any]) -> TermRange:
    term_id = record_id(record, "term")
    return TermRange(
        id=term_id,
        name=record.get("name"),
        start_date=parse_date(_require(record, "startDate", term_id), term_id, "startDate"),
        end_date=parse_date(_require(record, "endDate", term_id), term_id, "endDate"),
    )


def course_from_record(record: Mapping[str, Any]) -> CourseSchedule:
    course_id = record_id(record, "course")
    meeting_days = record.get("meetingDays") or []
    if isinstance(meeting_days, str):
        raise ValidationError(course_id, "meetingDays", "expected a list of weekday tokens")

    term_id = record.get("termId")
    return CourseSchedule(
        id=course_id,
        title=_require(record, "title", course_id),
        code=_require(record, "code", course_id),
        meeting_days=list(meeting_days),
        meeting_start=record.get("meetingStart") or None,
        meeting_end=record.get("meetingEnd") or None,
        instructor=record.get("instructor") or None,
        term_id=str(term_id) if term_id is not None else None,
    )


def assignment_from_record(record: Mapping[str, Any]) -> Assignment:
    assignment_id = record_id(record, "assignment")
    status = record.get("status", "todo")
    if status not in ("todo", "done"):
        raise ValidationError(assignment_id, "status", f"unknown status {status!r}")

    course_id = record.get("courseId")
    return Assignment(
        id=assignment_id,
        title=_require(record, "title", assignment_id),
        due_at=parse_instant(_require(record, "dueAt", assignment_id), assignment_id, "dueAt"),
        status=status,
        notes=record.get("notes") or None,
        course_id=str(course_id) if course_id is not None else None,
    )


def records_from_document(document: Mapping[str, Any]) -> RecordSet:
    """Build a record set from a mapping with optional
    ``terms``/``courses``/``assignments``/``events`` arrays."""
    records = RecordSet(
        terms=[term_from_record(r) for r in document.get("terms", [])],
        courses=[course_from_record(r) for r in document.get("courses", [])],
        assignments=[assignment_from_record(r) for r in document.get("assignments", [])],
        events=[dict(r) for r in document.get("events", [])],
    )
    logger.debug(
        "Loaded {} terms, {} courses, {} assignments, {} events",
        len(records.terms), len(records.courses),
        len(records.assignments), len(records.events),
    )
    return records


def load_records(path: Union[str, Path]) -> RecordSet:
    """Read a JSON records document from disk.

    Raises:
        ValidationError: If the file is not a JSON object or a record is invalid.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(str(path), "document", f"not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ValidationError(str(path), "document", "expected a JSON object at top level")
    return records_from_document(document)
