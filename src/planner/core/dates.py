"""Calendar day helpers - pure functions, no I/O.

A calendar day is a ``datetime.date``; an instant is a ``datetime.datetime``.
Days are parsed and formatted from their local components only, so nothing
here ever passes through a UTC timestamp.
"""

import calendar
import re
from datetime import date, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from .errors import InvalidDateFormat, InvalidTimeFormat

_YMD_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_HHMM_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")


def to_local_date(ymd: str | date) -> date:
    """
    Parse ``YYYY-MM-DD`` as a local calendar day.

    Strict: no time suffix, no single-digit parts, no impossible dates.
    Raises InvalidDateFormat otherwise.
    """
    if isinstance(ymd, datetime):
        # An instant is not a calendar day; callers must pick the zone first.
        raise InvalidDateFormat(ymd)
    if isinstance(ymd, date):
        return ymd
    if not isinstance(ymd, str):
        raise InvalidDateFormat(ymd)

    match = _YMD_PATTERN.fullmatch(ymd)
    if not match:
        raise InvalidDateFormat(ymd)
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidDateFormat(ymd) from None


def is_same_calendar_day(a: date | datetime, b: date | datetime) -> bool:
    """Compare year/month/day only, ignoring any time of day."""
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def format_ymd(day: date | datetime) -> str:
    """Render the local components of a day as YYYY-MM-DD."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def _resolve_tz(tz: tzinfo | str | None) -> tzinfo | None:
    if isinstance(tz, str):
        return ZoneInfo(tz) if tz else None
    return tz


def to_local(instant: datetime, tz: tzinfo | str | None = None) -> datetime:
    """
    Express an instant in local wall-clock terms.

    Naive instants are taken to be local already. Aware instants are
    converted to ``tz`` when one is given, otherwise kept in their own offset.
    """
    zone = _resolve_tz(tz)
    if instant.tzinfo is None or zone is None:
        return instant
    return instant.astimezone(zone)


def local_day(instant: datetime, tz: tzinfo | str | None = None) -> date:
    """Calendar day an instant falls on in local time."""
    return to_local(instant, tz).date()


def local_time_minutes(instant: datetime, tz: tzinfo | str | None = None) -> int:
    """Minutes since local midnight."""
    local = to_local(instant, tz)
    return local.hour * 60 + local.minute


def parse_hhmm(value: str) -> int:
    """Parse HH:MM into minutes since midnight."""
    match = _HHMM_PATTERN.fullmatch(value or "")
    if not match:
        raise InvalidTimeFormat(value)
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeFormat(value)
    return hour * 60 + minute


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of a shorter month."""
    return day + relativedelta(months=months)


def add_years(day: date, years: int) -> date:
    """Shift by whole years; Feb 29 lands on Feb 28 in non-leap years."""
    return day + relativedelta(years=years)


def week_start(day: date) -> date:
    """The Sunday on or before ``day``."""
    # date.weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)
