import re
import logging
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Dict, List, NamedTuple, Tuple, Union
from ics import Calendar, Event
from ics.grammar.parse import ContentLine

logger = logging.getLogger(__name__)

# Single-letter day abbreviations -> RFC5545 weekday codes
DAY_CODES = MappingProxyType({
    'M': 'MO',
    'T': 'TU',
    'W': 'WE',
    'R': 'TH',
    'F': 'FR',
    'S': 'SA',
    'U': 'SU',
})

DAYS_RE = re.compile(r'^([MTWRFSU]+)\s')
TIME_RANGE_RE = re.compile(
    r'(\d{1,2}(?::\d{2})?\s?(?:am|pm)?)[-–](\d{1,2}(?::\d{2})?\s?(?:am|pm)?)',
    re.IGNORECASE,
)
MERIDIEM_RE = re.compile(r'\s?(am|pm)')


class ParseError(ValueError):
    """Raised when a recurrence string cannot be understood."""


class ClockTime(NamedTuple):
    hours: int
    minutes: int


class RecurrencePattern(NamedTuple):
    days: Tuple[str, ...]
    start_time: ClockTime
    end_time: ClockTime


def parse_time(time_str: str) -> ClockTime:
    """
    Convert a single time token ("9am", "8:30 pm", "14:00") to 24-hour form.
    A token without am/pm is read as a 24-hour clock value.
    """
    time_str = time_str.strip().lower()

    if 'am' in time_str or 'pm' in time_str:
        period = 'pm' if 'pm' in time_str else 'am'
        parts = MERIDIEM_RE.sub('', time_str, count=1).split(':')
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0

        if period == 'pm' and hours < 12:
            hours += 12
        if period == 'am' and hours == 12:
            hours = 0
    else:
        parts = time_str.split(':')
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0

    return ClockTime(hours, minutes)


def parse_recurrence_string(recurrence: str) -> RecurrencePattern:
    """
    Parse strings like "TR 11am-12:15pm" into days and a start/end time.

    Day letters must open the string and be followed by whitespace. Each end
    of the time range is read on its own, so "1-2pm" is 01:00 to 14:00.
    """
    day_match = DAYS_RE.match(recurrence)
    if not day_match:
        raise ParseError('Invalid recurrence string: days not found')

    days = []
    for letter in day_match.group(1):
        if letter not in DAY_CODES:
            raise ParseError(f'Unsupported day letter: {letter}')
        days.append(DAY_CODES[letter])

    time_match = TIME_RANGE_RE.search(recurrence)
    if not time_match:
        raise ParseError('Invalid recurrence string: times not found')

    start_time = parse_time(time_match.group(1))
    end_time = parse_time(time_match.group(2))

    return RecurrencePattern(tuple(days), start_time, end_time)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(text: str) -> datetime:
    """Parse "2025-03-10", "2025-03-10T00:00:00Z" or any ISO-8601 offset form."""
    text = text.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    return as_utc(datetime.fromisoformat(text))


def format_datetime_5545(value: datetime) -> str:
    """Format as YYYYMMDDTHHMMSSZ in UTC."""
    value = as_utc(value)
    return (
        f'{value.year:04d}{value.month:02d}{value.day:02d}'
        f'T{value.hour:02d}{value.minute:02d}{value.second:02d}Z'
    )


def format_datetime_iso(value: datetime) -> str:
    """ISO-8601 UTC string with a Z suffix."""
    return as_utc(value).isoformat().replace('+00:00', 'Z')


def set_time(value: datetime, hours: int, minutes: int) -> datetime:
    """
    Keep the local calendar date of ``value`` but move the clock to hours:minutes.
    Out-of-range values roll over onto later days. Returns an aware UTC datetime.
    """
    local_midnight = as_utc(value).astimezone().replace(
        tzinfo=None, hour=0, minute=0, second=0, microsecond=0
    )
    local = local_midnight + timedelta(hours=hours, minutes=minutes)
    # naive.astimezone() resolves the offset in effect on that local date
    return local.astimezone().astimezone(timezone.utc)


def event_bounds(period_start: datetime, pattern: RecurrencePattern) -> Tuple[datetime, datetime]:
    """DTSTART/DTEND for the first occurrence, both on the period start date."""
    start = set_time(period_start, pattern.start_time.hours, pattern.start_time.minutes)
    end = set_time(period_start, pattern.end_time.hours, pattern.end_time.minutes)
    return start, end


def build_rrule(pattern: RecurrencePattern, period_end: datetime) -> str:
    return f"FREQ=WEEKLY;BYDAY={','.join(pattern.days)};UNTIL={format_datetime_5545(period_end)}"


def parse_to_5545(period_start: datetime, period_end: datetime, recurrence: str) -> str:
    """
    Convert a recurrence string into an RFC5545 VEVENT block.

    Example:
        >>> parse_to_5545(start, end, "MWF 9am-10am")
        'BEGIN:VEVENT\\nDTSTART:...\\nDTEND:...\\nRRULE:FREQ=WEEKLY;BYDAY=MO,WE,FR;UNTIL=...\\nEND:VEVENT'
    """
    pattern = parse_recurrence_string(recurrence)
    dt_start, dt_end = event_bounds(period_start, pattern)

    return '\n'.join([
        'BEGIN:VEVENT',
        f'DTSTART:{format_datetime_5545(dt_start)}',
        f'DTEND:{format_datetime_5545(dt_end)}',
        f'RRULE:{build_rrule(pattern, period_end)}',
        'END:VEVENT',
    ])


def parse_to_8984(period_start: datetime, period_end: datetime, recurrence: str) -> Dict[str, object]:
    """Convert a recurrence string into an RFC8984-style JSON object."""
    pattern = parse_recurrence_string(recurrence)
    event_start, event_end = event_bounds(period_start, pattern)

    return {
        'dtstart': format_datetime_iso(event_start),
        'dtend': format_datetime_iso(event_end),
        'recurrence': {
            'frequency': 'WEEKLY',
            'byDay': list(pattern.days),
            'until': format_datetime_iso(period_end),
        },
    }


def parse_schedule(text: str) -> List[Tuple[str, str]]:
    """
    Split schedule text into (title, recurrence) entries.

    One entry per line, written as "TR 11am-12:15pm" or
    "TR 11am-12:15pm | Intro to Programming". Blank lines and lines
    starting with '#' are ignored.
    """
    entries = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        recurrence, _, title = line.partition('|')
        recurrence = recurrence.strip()
        entries.append((title.strip() or recurrence, recurrence))

    return entries


def generate_ics(
    period_start: datetime,
    period_end: datetime,
    entries: List[Union[Tuple[str, str], str]],
) -> Tuple[str, Calendar]:
    """Generate an ICS calendar with one weekly event per schedule entry."""
    if not entries:
        raise ValueError("No schedule entries provided")

    cal = Calendar()
    for entry in entries:
        title, recurrence = (entry, entry) if isinstance(entry, str) else entry
        try:
            pattern = parse_recurrence_string(recurrence)
            begin, end = event_bounds(period_start, pattern)

            event = Event()
            event.name = title
            event.begin = begin
            event.end = end
            event.extra.append(ContentLine(name='RRULE', value=build_rrule(pattern, period_end)))
            cal.events.add(event)
        except ValueError as e:
            logger.warning("Skipping %r due to parsing error: %s", recurrence, e)

    month_str = as_utc(period_start).strftime("%Y-%m")
    filename = f"class_schedule_{month_str}.ics"
    return filename, cal
