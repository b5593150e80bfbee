"""Month grid: leading blanks, one cell per day, items bucketed by date key."""

from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date
from typing import List, Optional

from date_utils import days_in_month, first_weekday_of_month, format_month_title, to_date_key

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass
class DayCell:
    day: Optional[int]
    items: list = field(default_factory=list)
    is_today: bool = False

    @property
    def is_empty(self):
        return self.day is None

    def to_dict(self):
        return {
            'day': self.day,
            'is_today': self.is_today,
            'items': [item.to_dict() for item in self.items],
        }


@dataclass
class MonthGrid:
    year: int
    month: int
    cells: List[DayCell]

    @property
    def title(self):
        return format_month_title(self.year, self.month)

    @property
    def leading_blanks(self):
        return sum(1 for cell in self.cells if cell.is_empty)

    def weeks(self):
        """Rows of seven cells; the last row is padded with empty cells."""
        padded = list(self.cells)
        while len(padded) % 7:
            padded.append(DayCell(None))
        return [padded[i:i + 7] for i in range(0, len(padded), 7)]

    def cell_for(self, day_of_month):
        for cell in self.cells:
            if cell.day == day_of_month:
                return cell
        return None

    def to_dict(self):
        return {
            'year': self.year,
            'month': self.month,
            'title': self.title,
            'weekday_labels': list(WEEKDAY_LABELS),
            'cells': [cell.to_dict() for cell in self.cells],
            'weeks': [[cell.to_dict() for cell in week] for week in self.weeks()],
        }


def build_month_grid(year, month, items=(), today=None):
    """
    Build the grid for year/month. today defaults to the real current date,
    captured once per build.
    """
    today = today or date.today()
    by_key = {}
    for item in items:
        by_key.setdefault(item.date_key, []).append(item)

    cells = [DayCell(None) for _ in range(first_weekday_of_month(year, month))]
    for day_of_month in range(1, days_in_month(year, month) + 1):
        current = date(year, month, day_of_month)
        day_items = sorted(by_key.get(to_date_key(current), []), key=lambda item: item.start_minutes)
        cells.append(DayCell(day_of_month, day_items, current == today))
    return MonthGrid(year, month, cells)


def shift_month(current, delta):
    """Move by delta months, always landing on day 1 of the target month."""
    index = current.year * 12 + (current.month - 1) + delta
    if not MINYEAR <= index // 12 <= MAXYEAR:
        raise ValueError("Month out of range")
    return date(index // 12, index % 12 + 1, 1)
