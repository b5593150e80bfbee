import calendar
from datetime import date, datetime, time, timedelta

import pytz

from services.validation_service import parse_day_value, parse_time_str


def is_valid_timezone(tz_name):
    return bool(tz_name) and tz_name in pytz.all_timezones_set


def to_local(value, tz_name=None):
    """
    Return a naive local datetime. Aware values are converted to tz_name first;
    without a tz_name they keep their own wall-clock fields.
    """
    if value.tzinfo is None:
        return value
    if tz_name:
        value = value.astimezone(pytz.timezone(tz_name))
    return value.replace(tzinfo=None)


def now_local(tz_name=None):
    """Current wall-clock time in tz_name, or in the server's zone without one."""
    if tz_name:
        return datetime.now(pytz.timezone(tz_name)).replace(tzinfo=None)
    return datetime.now()


def to_date_key(value, tz_name=None):
    """
    Build the YYYY-MM-DD key used to bucket items by day.

    Always built from local calendar fields so an item at 23:30 local time lands
    on its local day even when its UTC timestamp is already on the next one.
    """
    if isinstance(value, datetime):
        value = to_local(value, tz_name)
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def to_clock_label(value, tz_name=None):
    """Format a time or datetime as 'H:MM AM/PM'."""
    if isinstance(value, datetime):
        value = to_local(value, tz_name).time()
    hour = value.hour % 12 or 12
    period = 'PM' if value.hour >= 12 else 'AM'
    return f"{hour}:{value.minute:02d} {period}"


def parse_date_key(key):
    parsed = parse_day_value(key)
    if parsed is None:
        raise ValueError(f"Invalid date key: {key!r}")
    return parsed


def parse_clock_label(label):
    parsed = parse_time_str(label)
    if parsed is None:
        raise ValueError(f"Invalid time: {label!r}")
    return parsed


def combine_local(key, label):
    """Inverse of to_date_key + to_clock_label: a naive local datetime."""
    return datetime.combine(parse_date_key(key), parse_clock_label(label))


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_weekday_of_month(year: int, month: int) -> int:
    """Weekday of day 1 with Sunday as 0."""
    return (date(year, month, 1).weekday() + 1) % 7


def week_range(day: date):
    """Sunday..Saturday week containing day."""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def format_long_date(day: date) -> str:
    return f"{day.strftime('%A')}, {day.strftime('%B')} {day.day}"


def format_month_title(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"
