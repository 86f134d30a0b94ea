"""Pure month-grid logic - no I/O dependencies.

Months are 0-indexed throughout (January = 0) so that month arithmetic such as
``month - 1`` or ``month + 1`` can run past the ends of the year and be
normalized afterwards.
"""

from datetime import date, timedelta

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

WEEKDAY_LABELS = ["S", "M", "T", "W", "T", "F", "S"]


def normalize_month(year: int, month: int) -> tuple[int, int]:
    """Fold an out-of-range month into the right year.

    ``(2026, -1)`` is December 2025, ``(2026, 12)`` is January 2027.
    """
    years, month = divmod(month, 12)
    return year + years, month


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st of the month, Sunday = 0."""
    year, month = normalize_month(year, month)
    # date.weekday() is Monday = 0
    return (date(year, month + 1, 1).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    """Number of days in the month.

    Day 0 of the next month is the last day of this one.
    """
    next_year, next_month = normalize_month(year, month + 1)
    last_day = date(next_year, next_month + 1, 1) - timedelta(days=1)
    return last_day.day


def generate_days(year: int, month: int) -> list[int | None]:
    """
    Day cells for a month grid.

    Leading ``None`` cells pad day 1 under its weekday column, followed by
    1..N. Pure function - no I/O.
    """
    padding: list[int | None] = [None] * first_weekday(year, month)
    return padding + list(range(1, days_in_month(year, month) + 1))


def format_date_key(day: int | None, month: int, year: int) -> str | None:
    """Build a ``YYYY-MM-DD`` key from a 0-indexed month. None for padding cells."""
    if not day:
        return None
    year, month = normalize_month(year, month)
    return f"{year:04d}-{month + 1:02d}-{day:02d}"


def date_key(d: date) -> str:
    """Key for a date object."""
    return format_date_key(d.day, d.month - 1, d.year)


def parse_date_key(key: str) -> tuple[int, int, int]:
    """Split a key into (year, 0-indexed month, day).

    Raises ValueError for anything that is not a real calendar day.
    """
    parsed = date.fromisoformat(key)
    if parsed.isoformat() != key:
        raise ValueError(f"Not a canonical date key: {key!r}")
    return parsed.year, parsed.month - 1, parsed.day


def key_to_date(key: str) -> date:
    year, month, day = parse_date_key(key)
    return date(year, month + 1, day)


def month_bounds(year: int, month: int) -> tuple[str, str]:
    """First and last date keys of a month, both inclusive."""
    year, month = normalize_month(year, month)
    return (
        format_date_key(1, month, year),
        format_date_key(days_in_month(year, month), month, year),
    )


def month_title(year: int, month: int) -> str:
    """Display title such as 'February 2026'."""
    year, month = normalize_month(year, month)
    return f"{MONTH_NAMES[month]} {year}"


def is_past(day_date: date, today: date) -> bool:
    """A day is past only if it is strictly before today."""
    return day_date < today
