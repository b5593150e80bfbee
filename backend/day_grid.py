"""Time-block day grid: hourly slots plus pixel geometry for each item."""

from dataclasses import dataclass, field
from datetime import date, time, timedelta
from typing import List

from backend.layout_engine import layout_day_columns
from date_utils import format_long_date, to_clock_label, to_date_key

DEFAULT_START_HOUR = 8
DEFAULT_SLOT_COUNT = 13
DEFAULT_PIXELS_PER_MINUTE = 0.8


@dataclass(frozen=True)
class DayWindow:
    """
    The visible part of the day. The default is 13 one-hour slots starting at
    08:00 (labels 8:00 AM .. 8:00 PM, covering 08:00-21:00), 48px per hour.
    """
    start_hour: int = DEFAULT_START_HOUR
    slot_count: int = DEFAULT_SLOT_COUNT
    pixels_per_minute: float = DEFAULT_PIXELS_PER_MINUTE

    def __post_init__(self):
        if not (0 <= self.start_hour <= 23) or self.slot_count < 1 or self.start_hour + self.slot_count > 24:
            raise ValueError(f"Invalid day window {self.start_hour}+{self.slot_count}")
        if self.pixels_per_minute <= 0:
            raise ValueError("pixels_per_minute must be positive")

    @property
    def start_minutes(self):
        return self.start_hour * 60

    @property
    def end_minutes(self):
        return (self.start_hour + self.slot_count) * 60

    @property
    def slot_height(self):
        return 60 * self.pixels_per_minute

    @property
    def total_height(self):
        return self.slot_count * self.slot_height

    def slot_labels(self):
        return [to_clock_label(time(hour=self.start_hour + i)) for i in range(self.slot_count)]

    def minutes_since_start(self, minutes):
        return minutes - self.start_minutes


@dataclass(frozen=True)
class PlacedBlock:
    item: object
    top: float
    height: float
    left: float
    width: float
    column: int
    total_columns: int

    def to_dict(self):
        payload = self.item.to_dict()
        payload.update({
            'top': self.top,
            'height': self.height,
            'left': self.left,
            'width': self.width,
            'column': self.column,
            'total_columns': self.total_columns,
        })
        return payload


@dataclass
class DayGrid:
    day: date
    window: DayWindow
    blocks: List[PlacedBlock] = field(default_factory=list)
    hidden: list = field(default_factory=list)

    def to_dict(self):
        return {
            'date': to_date_key(self.day),
            'title': format_long_date(self.day),
            'slots': [
                {'label': label, 'top': index * self.window.slot_height}
                for index, label in enumerate(self.window.slot_labels())
            ],
            'height': self.window.total_height,
            'blocks': [block.to_dict() for block in self.blocks],
            'hidden': [item.to_dict() for item in self.hidden],
        }


def build_day_grid(day, items=(), window=None):
    """
    Place a day's items on the window. Items are clipped to the window; items
    that fall completely outside it go to DayGrid.hidden.
    """
    window = window or DayWindow()
    key = to_date_key(day)
    day_items = [item for item in items if item.date_key == key]

    visible, hidden = [], []
    for item in day_items:
        if item.end_minutes <= window.start_minutes or item.start_minutes >= window.end_minutes:
            hidden.append(item)
            continue
        visible.append(item)

    layout = layout_day_columns(visible)
    grid = DayGrid(day, window, hidden=hidden)
    for item in sorted(visible, key=lambda i: (i.start_minutes, layout[i.id].column)):
        start = max(item.start_minutes, window.start_minutes)
        end = min(item.end_minutes, window.end_minutes)
        slot = layout[item.id]
        width = 100.0 / slot.total_columns
        grid.blocks.append(PlacedBlock(
            item=item,
            top=round(window.minutes_since_start(start) * window.pixels_per_minute, 2),
            height=round((end - start) * window.pixels_per_minute, 2),
            left=round(slot.column * width, 4),
            width=round(width, 4),
            column=slot.column,
            total_columns=slot.total_columns,
        ))
    return grid


def shift_day(current, delta):
    return current + timedelta(days=delta)
