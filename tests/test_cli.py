"""Tests for the course2ical command-line driver."""

import argparse
import json
from datetime import datetime

import pytest
from icalendar import Calendar

import course2ical


def epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@pytest.fixture
def records_file(tmp_path):
    document = {
        "terms": [{"_id": "t1", "name": "Winter", "startDate": "2025-01-01", "endDate": "2025-01-14"}],
        "courses": [
            {
                "_id": "c1",
                "title": "Intro to Programming",
                "code": "CS101",
                "meetingDays": ["Mon", "Wed"],
                "meetingStart": "09:00",
                "meetingEnd": "10:15",
                "termId": "t1",
            },
            {
                "_id": "c2",
                "title": "Calculus",
                "code": "MATH200",
                "meetingDays": ["Wed"],
                "meetingStart": "10:00",
                "meetingEnd": "11:00",
                "termId": "t1",
            },
        ],
        "assignments": [
            {"_id": "a1", "title": "Lab report", "dueAt": epoch_ms(datetime(2025, 1, 9, 23, 59)), "status": "todo", "courseId": "c1"},
            {"_id": "a2", "title": "Old quiz", "dueAt": epoch_ms(datetime(2025, 1, 2, 12, 0)), "status": "done"},
        ],
        "events": [
            {
                "_id": "e1",
                "title": "Midterm",
                "type": "exam",
                "startTime": epoch_ms(datetime(2025, 1, 10, 13, 0)),
                "endTime": epoch_ms(datetime(2025, 1, 10, 15, 0)),
                "color": "#ef4444",
                "courseCode": "CS101",
                "location": "Hall A",
            }
        ],
    }
    path = tmp_path / "records.json"
    path.write_text(json.dumps(document))
    return path


class TestArgumentParsing:
    @pytest.mark.parametrize("value,expected", [("Mon", "Mon"), ("mon", "Mon"), ("SUN", "Sun"), ("thu", "Thu")])
    def test_week_start(self, value, expected):
        assert course2ical.parse_week_start(value) == expected

    @pytest.mark.parametrize("value", ["Mo", "Monday", "someday"])
    def test_bad_week_start(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            course2ical.parse_week_start(value)

    def test_moment(self):
        assert course2ical.parse_moment("2025-01-08") == datetime(2025, 1, 8)
        assert course2ical.parse_moment("2025-01-08T09:30") == datetime(2025, 1, 8, 9, 30)

    def test_bad_moment(self):
        with pytest.raises(argparse.ArgumentTypeError):
            course2ical.parse_moment("08/01/2025")


class TestMain:
    def test_writes_ics_with_extension(self, records_file, tmp_path, capsys):
        output = tmp_path / "out"
        course2ical.main(["--input", str(records_file), "-o", str(output), "--date", "2025-01-05"])

        written = tmp_path / "out.ics"
        events = Calendar.from_ical(written.read_bytes()).walk("VEVENT")
        # 1 stored event, 2 assignments, 4 CS101 meetings, 2 MATH200 meetings
        assert len(events) == 9
        assert "Saved 9 events" in capsys.readouterr().out

    def test_exclude_done(self, records_file, tmp_path):
        output = tmp_path / "out.json"
        course2ical.main([
            "--input", str(records_file), "--format", "json", "-o", str(output),
            "--exclude-done", "--date", "2025-01-05",
        ])

        ids = [record["id"] for record in json.loads(output.read_text())]
        assert "assignment-a2" not in ids
        assert "assignment-a1" in ids
        assert len(ids) == 8

    def test_today_view_as_text(self, records_file, capsys):
        course2ical.main([
            "--input", str(records_file), "--view", "today", "--format", "text", "--date", "2025-01-08T08:00",
        ])

        out = capsys.readouterr().out
        assert out.splitlines() == [
            "2025-01-08",
            "  09:00-10:15  [CS101] Intro to Programming (class)",
            "  10:00-11:00  [MATH200] Calculus (class)",
        ]

    def test_upcoming_view(self, records_file, tmp_path):
        output = tmp_path / "due.json"
        course2ical.main([
            "--input", str(records_file), "--view", "upcoming", "--format", "json",
            "-o", str(output), "--date", "2025-01-08T08:00", "--horizon-days", "7",
        ])

        ids = [record["id"] for record in json.loads(output.read_text())]
        assert ids == ["assignment-a1", "e1"]

    def test_week_view_respects_week_start(self, records_file, capsys):
        course2ical.main([
            "--input", str(records_file), "--view", "week", "--format", "text",
            "--date", "2025-01-08", "--week-start", "Thu",
        ])

        days = [line for line in capsys.readouterr().out.splitlines() if not line.startswith(" ")]
        assert days == ["2025-01-02", "2025-01-06", "2025-01-08"]

    def test_conflicts_view(self, records_file, capsys):
        course2ical.main(["--input", str(records_file), "--view", "conflicts"])

        out = capsys.readouterr().out
        assert out.startswith("Found 2 schedule conflict(s):")
        assert "2025-01-01" in out
        assert "2025-01-08" in out

    def test_missing_input(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            course2ical.main(["--input", str(tmp_path / "missing.json")])

        assert exc_info.value.code == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_invalid_records(self, tmp_path, capsys):
        path = tmp_path / "records.json"
        path.write_text(json.dumps({
            "terms": [{"_id": "t1", "startDate": "2025-01-01", "endDate": "2025-01-14"}],
            "courses": [{"_id": "c1", "title": "X", "code": "X1", "meetingDays": ["Mon"],
                         "meetingStart": "9am", "meetingEnd": "10:00", "termId": "t1"}],
        }))

        with pytest.raises(SystemExit) as exc_info:
            course2ical.main(["--input", str(path)])

        assert exc_info.value.code == 1
        assert "c1: invalid meeting_start" in capsys.readouterr().err

    def test_negative_horizon(self, records_file):
        with pytest.raises(SystemExit) as exc_info:
            course2ical.main(["--input", str(records_file), "--horizon-days", "-1"])
        assert exc_info.value.code == 1
