#!/usr/bin/env python3
"""Course records to calendar converter.

Loads terms, courses, assignments and stored events from a JSON export,
expands class meetings over their terms and writes the merged calendar as
an iCalendar (.ics) file, as JSON, or as a plain-text agenda.
"""

import argparse
import sys
from datetime import datetime
from typing import Optional, Sequence

from loguru import logger

from coursecal import (
    ColorAssigner,
    ValidationError,
    build_feed,
    find_conflicts,
    load_records,
    sort_by_time,
    this_week,
    today,
    upcoming_deadlines,
)
from coursecal.models import WEEKDAYS, CalendarEvent
from coursecal.query import group_by_date
from coursecal.recurrence import parse_weekday
from transformer import BaseTransformer, ICalTransformer, JSONTransformer

VIEWS = ("all", "today", "week", "upcoming", "conflicts")
FORMATS = ("ics", "json", "text")


def parse_moment(value: str) -> datetime:
    """Parse YYYY-MM-DD or YYYY-MM-DDTHH:MM into a naive datetime."""
    for fmt in ("%Y-%m-%dT%H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(
        f"Invalid date format: '{value}'. Expected YYYY-MM-DD or YYYY-MM-DDTHH:MM."
    )


def parse_week_start(value: str) -> str:
    """Accept a weekday token like "Mon" (any case)."""
    try:
        return parse_weekday(value, "<cli>", "week_start")
    except ValidationError:
        raise argparse.ArgumentTypeError(
            f"Invalid week start: '{value}'. Expected one of {', '.join(WEEKDAYS)}."
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a course calendar from exported course records.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 course2ical.py --input records.json
  python3 course2ical.py --input records.json --view week --format text --week-start Mon
  python3 course2ical.py --input records.json --view upcoming --horizon-days 14 --format json -o due.json
        """
    )

    parser.add_argument(
        "-i", "--input",
        required=True,
        help="JSON file with 'terms', 'courses', 'assignments' and 'events' arrays"
    )

    parser.add_argument(
        "--view",
        choices=VIEWS,
        default="all",
        help="Which events to output (default: all)"
    )

    parser.add_argument(
        "-f", "--format",
        choices=FORMATS,
        default="ics",
        help="Output format (default: ics)"
    )

    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file path (default: schedule.ics / schedule.json; text goes to stdout)"
    )

    parser.add_argument(
        "--date",
        type=parse_moment,
        default=None,
        help="Reference moment for today/week/upcoming views and priority colors "
             "(format: YYYY-MM-DD or YYYY-MM-DDTHH:MM, default: now)"
    )

    parser.add_argument(
        "--horizon-days",
        type=int,
        default=7,
        help="Days ahead included in the upcoming view (default: 7)"
    )

    parser.add_argument(
        "--week-start",
        type=parse_week_start,
        default="Sun",
        help="First day of the week for the week view (default: Sun)"
    )

    parser.add_argument(
        "--exclude-done",
        action="store_true",
        help="Leave completed assignments out of the calendar"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def select_view(
    events: list[CalendarEvent],
    view: str,
    now: datetime,
    horizon_days: int,
    week_start: str,
) -> list[CalendarEvent]:
    """Apply a named view to the feed and return events in time order."""
    if view == "today":
        return sort_by_time(today(events, now))
    if view == "week":
        return sort_by_time(this_week(events, now, week_start))
    if view == "upcoming":
        return upcoming_deadlines(events, horizon_days, now)
    return sort_by_time(events)


def format_event_line(event: CalendarEvent) -> str:
    if event.is_all_day:
        when = "all day"
    elif event.end_time:
        when = f"{event.start_time:%H:%M}-{event.end_time:%H:%M}"
    else:
        when = f"{event.start_time:%H:%M}"

    label = f"[{event.course_code}] {event.title}" if event.course_code else event.title
    line = f"  {when:<12} {label} ({event.type})"
    if event.location:
        line += f" @ {event.location}"
    return line


def render_agenda(events: Sequence[CalendarEvent]) -> str:
    lines: list[str] = []
    for day, day_events in group_by_date(events).items():
        lines.append(day)
        lines.extend(format_event_line(event) for event in day_events)
    return "\n".join(lines)


def render_conflicts(events: Sequence[CalendarEvent]) -> str:
    conflicts = find_conflicts(events)
    if not conflicts:
        return "No schedule conflicts found."

    lines = [f"Found {len(conflicts)} schedule conflict(s):"]
    for first, second in conflicts:
        lines.append(f"{first.day.isoformat()}")
        lines.append(format_event_line(first))
        lines.append(format_event_line(second))
    return "\n".join(lines)


def make_transformer(output_format: str) -> BaseTransformer:
    if output_format == "json":
        return JSONTransformer()
    return ICalTransformer()


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the converter."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if args.horizon_days < 0:
        print("Error: Horizon must not be negative.", file=sys.stderr)
        sys.exit(1)

    now = args.date or datetime.now()

    try:
        records = load_records(args.input)
        events = build_feed(
            records.terms,
            records.courses,
            records.assignments,
            records.events,
            colors=ColorAssigner(),
            now=now,
            include_done=not args.exclude_done,
        )
        logger.info("Built {} calendar events from {}", len(events), args.input)

        if args.view == "conflicts":
            print(render_conflicts(events))
            return

        selected = select_view(events, args.view, now, args.horizon_days, args.week_start)

        if not selected:
            print("Warning: No events found for this view.", file=sys.stderr)

        if args.format == "text":
            print(render_agenda(selected))
            return

        transformer = make_transformer(args.format)
        output_path = args.output or f"schedule{transformer.extension}"
        # Ensure output file has the matching extension
        if not output_path.lower().endswith(transformer.extension):
            output_path = f"{output_path}{transformer.extension}"

        transformer.transform(selected)
        transformer.save(output_path)

        print(f"Saved {len(selected)} events to: {output_path}")

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except FileNotFoundError as e:
        print(f"Error: Input file not found: {e.filename}", file=sys.stderr)
        sys.exit(1)
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected failure")
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
