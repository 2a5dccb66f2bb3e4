"""JSON transformer producing the event shape used by the web front end."""

import json
from datetime import datetime
from typing import Any, Optional, Sequence, Union

from coursecal.models import CalendarEvent
from coursecal.query import group_by_date
from .base import BaseTransformer

JSONPayload = Union[list[dict[str, Any]], dict[str, list[dict[str, Any]]]]


def _epoch_ms(moment: datetime) -> int:
    return int(round(moment.timestamp() * 1000))


def event_to_dict(event: CalendarEvent) -> dict[str, Any]:
    """camelCase record with epoch-millisecond instants; unset fields are left out."""
    data: dict[str, Any] = {
        "id": event.id,
        "title": event.title,
        "type": event.type,
        "startTime": _epoch_ms(event.start_time),
        "color": event.color,
        "isAllDay": event.is_all_day,
    }
    optional = {
        "endTime": _epoch_ms(event.end_time) if event.end_time else None,
        "courseCode": event.course_code,
        "location": event.location,
        "description": event.description,
        "meetingUrl": event.meeting_url,
        "meetingType": event.meeting_type,
    }
    data.update({key: value for key, value in optional.items() if value is not None})
    return data


class JSONTransformer(BaseTransformer):
    """Transformer that converts calendar events to JSON."""

    extension = ".json"

    def __init__(self, group_by_day: bool = False, indent: Optional[int] = 2) -> None:
        """Initialize the JSON transformer.

        Args:
            group_by_day: Emit an object keyed by ISO date instead of a list.
            indent: Indentation passed to json.dumps.
        """
        self._group_by_day = group_by_day
        self._indent = indent
        self._payload: Optional[JSONPayload] = None

    def transform(self, events: Sequence[CalendarEvent]) -> JSONPayload:
        if self._group_by_day:
            self._payload = {
                day: [event_to_dict(event) for event in day_events]
                for day, day_events in group_by_date(events).items()
            }
        else:
            self._payload = [event_to_dict(event) for event in events]
        return self._payload

    def to_bytes(self) -> bytes:
        if self._payload is None:
            raise RuntimeError("No event data. Call transform() first.")
        return json.dumps(self._payload, indent=self._indent, ensure_ascii=False).encode("utf-8")
