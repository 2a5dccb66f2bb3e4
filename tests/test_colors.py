"""Tests for course color assignment and assignment priorities."""

import threading
from datetime import datetime, timedelta

import pytest

from coursecal.colors import (
    EVENT_COLORS,
    PRIORITY_COLORS,
    ColorAssigner,
    assignment_priority,
    priority_color,
)


class TestColorAssigner:
    """Tests for first-seen-wins color assignment."""

    def test_same_code_keeps_its_color(self, colors):
        first = colors.color_for("CS101")
        assert colors.color_for("CS101") == first
        assert colors.color_for("CS101") == first

    def test_colors_follow_palette_order(self, colors):
        assert colors.color_for("CS101") == EVENT_COLORS[0]
        assert colors.color_for("MATH200") == EVENT_COLORS[1]
        assert colors.color_for("CS101") == EVENT_COLORS[0]
        assert colors.color_for("PHYS150") == EVENT_COLORS[2]

    def test_palette_wraps_around(self, colors):
        codes = [f"COURSE{i}" for i in range(11)]
        assigned = [colors.color_for(code) for code in codes]

        assert len(EVENT_COLORS) == 10
        assert assigned[10] == assigned[0]
        assert len(set(assigned[:10])) == 10

    def test_separate_assigners_are_independent(self):
        first = ColorAssigner()
        second = ColorAssigner()
        first.color_for("CS101")

        assert second.color_for("MATH200") == EVENT_COLORS[0]
        assert "CS101" not in second

    def test_reset_clears_assignments(self, colors):
        colors.color_for("CS101")
        colors.color_for("MATH200")
        colors.reset()

        assert len(colors) == 0
        assert colors.color_for("MATH200") == EVENT_COLORS[0]

    def test_custom_palette(self):
        colors = ColorAssigner(palette=["#000000", "#ffffff"])
        assert [colors.color_for(c) for c in ("A", "B", "C")] == ["#000000", "#ffffff", "#000000"]

    def test_empty_palette_rejected(self):
        with pytest.raises(ValueError):
            ColorAssigner(palette=[])

    def test_concurrent_first_use_converges(self, colors):
        results: list[str] = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            results.append(colors.color_for("CS101"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(set(results)) == 1
        assert colors.assigned() == {"CS101": results[0]}


class TestAssignmentPriority:
    """Tests for urgency classification by days until due."""

    NOW = datetime(2025, 3, 10, 12, 0)

    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(hours=12), "high"),
            (timedelta(days=1), "high"),
            (timedelta(days=-2), "high"),
            (timedelta(days=1, hours=1), "medium"),
            (timedelta(days=7), "medium"),
            (timedelta(days=7, hours=1), "low"),
            (timedelta(days=30), "low"),
        ],
    )
    def test_priority_thresholds(self, delta, expected):
        assert assignment_priority(self.NOW + delta, now=self.NOW) == expected

    def test_priority_color(self):
        assert priority_color(self.NOW + timedelta(hours=2), now=self.NOW) == PRIORITY_COLORS["high"]
        assert PRIORITY_COLORS == {"high": "#ef4444", "medium": "#f59e0b", "low": "#10b981"}
