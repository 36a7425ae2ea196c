"""
Class Schedule Converter
------------------------
This script reads compact weekly schedule lines (e.g. `TR 11am-12:15pm`) from a
text file (`schedule.txt`) and converts them into calendar formats.

Features:
✅ RFC5545 VEVENT blocks with a weekly RRULE
✅ RFC8984-style JSON recurrence objects
✅ A full `.ics` calendar file you can import into any calendar app
✅ Optional titles: `TR 11am-12:15pm | Intro to Programming`

Dependencies:
- Python 3.9+
- The `ics` library (`pip install ics`)

Usage:
1. Put one schedule line per row in `schedule.txt`
2. Run: `python main.py --format ics`
3. Import the generated `.ics` file into your calendar
"""

import argparse
import json
import logging
import sys

import config
from helpers import (
    ParseError, generate_ics, parse_instant, parse_recurrence_string,
    parse_schedule, parse_to_5545, parse_to_8984,
)


def build_parser():
    parser = argparse.ArgumentParser(description="Convert weekly schedule notation into calendar formats.")
    parser.add_argument("schedule", nargs="?", default=config.SCHEDULE_FILE, help="Schedule text file")
    parser.add_argument("--recurrence", "-r", help="Convert a single recurrence string instead of a file")
    parser.add_argument("--start", default=config.PERIOD_START, help="Period start (ISO-8601)")
    parser.add_argument("--end", default=config.PERIOD_END, help="Period end (ISO-8601)")
    parser.add_argument("--format", "-f", choices=["5545", "8984", "ics"], default="5545", help="Output format")
    parser.add_argument("--output", "-o", help="Output .ics file path (ics format only)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    try:
        period_start = parse_instant(args.start)
        period_end = parse_instant(args.end)
    except ValueError as e:
        print(f"❌ Invalid period: {e}")
        return 1

    if args.recurrence:
        entries = [(args.recurrence, args.recurrence)]
    else:
        try:
            with open(args.schedule, "r", encoding="utf-8") as file:
                entries = parse_schedule(file.read())
        except FileNotFoundError:
            print(f"❌ {args.schedule} not found. Please create this file with your schedule lines.")
            return 1

    if not entries:
        print(f"❌ No schedule lines found in {args.schedule}")
        return 1

    valid = valid_entries(entries)
    if not valid:
        print("❌ No valid schedule lines found. Nothing was written.", file=sys.stderr)
        return 1

    if args.format == "ics":
        filename, cal = generate_ics(period_start, period_end, valid)
        if not cal.events:
            print("❌ No valid schedule lines found. Nothing was written.", file=sys.stderr)
            return 1

        filename = args.output or filename
        with open(filename, "w", encoding="utf-8") as f:
            f.write(cal.serialize())

        print(f"✅ ICS file created: {filename}")
        print(f"📅 Wrote {len(cal.events)} of {len(entries)} events")
        return 0 if len(cal.events) == len(entries) else 1

    if args.format == "5545":
        for _, recurrence in valid:
            print(parse_to_5545(period_start, period_end, recurrence))
    else:
        objects = [parse_to_8984(period_start, period_end, recurrence) for _, recurrence in valid]
        print(json.dumps(objects, indent=2))

    return 0 if len(valid) == len(entries) else 1


def valid_entries(entries):
    """Drop entries that do not parse, reporting each one on stderr."""
    valid = []
    for title, recurrence in entries:
        try:
            parse_recurrence_string(recurrence)
        except ParseError as e:
            print(f"❌ Skipping line {recurrence!r}: {e}", file=sys.stderr)
            continue
        valid.append((title, recurrence))
    return valid


if __name__ == "__main__":
    sys.exit(main())
