"""Course color assignment and assignment priority colors."""

import math
import threading
from datetime import datetime, timedelta
from typing import Literal, Optional, Sequence

Priority = Literal["high", "medium", "low"]

EVENT_COLORS: tuple[str, ...] = (
    "#3b82f6",  # blue
    "#10b981",  # green
    "#f59e0b",  # orange
    "#ef4444",  # red
    "#8b5cf6",  # purple
    "#06b6d4",  # cyan
    "#f97316",  # orange-red
    "#84cc16",  # lime
    "#ec4899",  # pink
    "#6366f1",  # indigo
)

PRIORITY_COLORS: dict[str, str] = {
    "high": "#ef4444",
    "medium": "#f59e0b",
    "low": "#10b981",
}

HIGH_PRIORITY_DAYS = 1
MEDIUM_PRIORITY_DAYS = 7


class ColorAssigner:
    """First-seen-wins mapping from course code to palette color.

    Each new code takes the palette entry at ``len(assigned) % len(palette)``,
    so colors repeat in palette order once it is exhausted. An assigner is
    meant to be created once per session or process and passed to whatever
    needs course colors.
    """

    def __init__(self, palette: Sequence[str] = EVENT_COLORS) -> None:
        if not palette:
            raise ValueError("Palette must contain at least one color")
        self._palette = tuple(palette)
        self._colors: dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    def color_for(self, course_code: str) -> str:
        """Return the color for a course code, assigning one on first use."""
        with self._lock:
            color = self._colors.get(course_code)
            if color is None:
                color = self._palette[len(self._colors) % len(self._palette)]
                self._colors[course_code] = color
            return color

    def assigned(self) -> dict[str, str]:
        """Snapshot of the current code to color mapping."""
        with self._lock:
            return dict(self._colors)

    def reset(self) -> None:
        with self._lock:
            self._colors.clear()

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, course_code: object) -> bool:
        return course_code in self._colors


def assignment_priority(due_at: datetime, now: Optional[datetime] = None) -> Priority:
    """Classify urgency by whole days left until ``due_at`` (rounded up)."""
    now = now or datetime.now()
    days_left = math.ceil((due_at - now) / timedelta(days=1))

    if days_left <= HIGH_PRIORITY_DAYS:
        return "high"
    if days_left <= MEDIUM_PRIORITY_DAYS:
        return "medium"
    return "low"


def priority_color(due_at: datetime, now: Optional[datetime] = None) -> str:
    return PRIORITY_COLORS[assignment_priority(due_at, now)]
