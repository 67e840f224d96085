"""
Date and time rules for scheduling transports.

Occurrence dates of a recurring submission start at the first date
(inclusive) and advance daily, weekly or monthly until they pass the end date
(the end date itself is included).

Monthly series are anchored on the first date's day of month. When a month
is too short for that day the occurrence falls on the month's last day, and
the next month goes back to the anchor day::

    2024-01-31 -> 2024-02-29 -> 2024-03-31 -> 2024-04-30 -> 2024-05-31
"""
import calendar
import re
from datetime import date, datetime, timedelta
from typing import List, Optional

from social_transport.errors import ValidationError

TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
RECURRING_TYPES = (DAILY, WEEKLY, MONTHLY)

# upper bound on occurrences produced by one submission
MAX_OCCURRENCES = 1000

TIME_FORMAT_MESSAGE = "invalid time format, expected HH:MM"


def normalize_time(value: Optional[str]) -> str:
    """Validate ``H:MM`` / ``HH:MM`` and return it zero-padded.

    >>> normalize_time("9:30")
    '09:30'
    """
    if value is None:
        raise ValidationError(TIME_FORMAT_MESSAGE)
    match = TIME_PATTERN.match(str(value).strip())
    if not match:
        raise ValidationError(TIME_FORMAT_MESSAGE)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValidationError(TIME_FORMAT_MESSAGE)
    return f"{hours:02d}:{minutes:02d}"


def parse_date(value: Optional[str], field: str = "date") -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    if not value or not DATE_PATTERN.match(str(value).strip()):
        raise ValidationError(f"invalid {field}, expected YYYY-MM-DD")
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"invalid {field}, expected YYYY-MM-DD")


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def add_months(anchor: date, months: int) -> date:
    """Shift ``anchor`` by whole months, clamping to the target month's last day."""
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(anchor.day, last_day))


def expand_dates(start: date, recurring_type: str, end: date) -> List[date]:
    """All occurrence dates from ``start`` to ``end``, both inclusive."""
    if recurring_type not in RECURRING_TYPES:
        raise ValidationError(
            f"invalid recurringType '{recurring_type}', expected one of: {', '.join(RECURRING_TYPES)}"
        )
    if end < start:
        raise ValidationError("recurringEndDate must not be before date")

    dates: List[date] = []
    step = 0
    current = start
    while current <= end:
        if len(dates) >= MAX_OCCURRENCES:
            raise ValidationError(f"recurring series exceeds {MAX_OCCURRENCES} occurrences")
        dates.append(current)
        step += 1
        if recurring_type == DAILY:
            current = start + timedelta(days=step)
        elif recurring_type == WEEKLY:
            current = start + timedelta(weeks=step)
        else:
            current = add_months(start, step)
    return dates
