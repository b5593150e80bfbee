"""The item shape shared by the calendar grid, day grid and layout engine."""

from dataclasses import dataclass
from datetime import date, datetime, time

from date_utils import minutes_since_midnight, to_clock_label, to_date_key, to_local
from services.validation_service import parse_day_value, parse_time_str

DEFAULT_EVENT_COLOR = 'bg-blue-100 border-blue-500'
TIMEBLOCK_COLOR = 'bg-green-100 border-green-500'


@dataclass(frozen=True)
class ScheduledItem:
    id: str
    title: str
    date: date
    start_time: time
    end_time: time
    color_tag: str = DEFAULT_EVENT_COLOR

    @property
    def date_key(self):
        return to_date_key(self.date)

    @property
    def start_minutes(self):
        return minutes_since_midnight(self.start_time)

    @property
    def end_minutes(self):
        return minutes_since_midnight(self.end_time)

    def overlaps(self, other):
        """Half-open overlap: items that only touch at an endpoint do not overlap."""
        return self.start_minutes < other.end_minutes and self.end_minutes > other.start_minutes

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'date': self.date_key,
            'start_time': to_clock_label(self.start_time),
            'end_time': to_clock_label(self.end_time),
            'color': self.color_tag,
        }


def make_item(item_id, title, day, start, end, color_tag=DEFAULT_EVENT_COLOR):
    """
    Build a ScheduledItem from loose values: day as a date or 'YYYY-MM-DD',
    start/end as time objects, 'HH:MM' or 'H:MM AM/PM'.
    """
    day_value = parse_day_value(day)
    start_value = parse_time_str(start)
    end_value = parse_time_str(end)
    if day_value is None or start_value is None or end_value is None:
        raise ValueError(f"Invalid schedule for item {item_id!r}")
    return ScheduledItem(str(item_id), title, day_value, start_value, end_value, color_tag)


def _span_to_item(item_id, title, start, end, color_tag, tz_name):
    start = to_local(start, tz_name)
    end = to_local(end, tz_name) if isinstance(end, datetime) else start
    # Items are single-day; anything running past midnight is cut at 23:59.
    end_time = end.time() if end.date() == start.date() else time(23, 59)
    return ScheduledItem(item_id, title, start.date(), start.time(), end_time, color_tag)


def event_to_item(event, tz_name=None):
    return _span_to_item(
        f"event-{event.id}", event.title, event.start_time, event.end_time,
        event.color or DEFAULT_EVENT_COLOR, tz_name,
    )


def time_block_to_item(block, tz_name=None):
    return _span_to_item(
        f"block-{block.id}", block.title or 'Time block', block.start_time, block.end_time,
        TIMEBLOCK_COLOR, tz_name,
    )


def items_for_day(items, day):
    key = to_date_key(day)
    return [item for item in items if item.date_key == key]
