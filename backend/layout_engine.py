"""Assign side-by-side columns to a day's time-overlapping items."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnSlot:
    column: int
    total_columns: int


def _place_in_columns(ordered_items):
    columns = []
    placed = {}
    for item in ordered_items:
        for index, column in enumerate(columns):
            if not any(item.overlaps(other) for other in column):
                column.append(item)
                placed[item.id] = index
                break
        else:
            columns.append([item])
            placed[item.id] = len(columns) - 1
    return placed


def _overlap_clusters(ordered_items):
    """Group items connected by a chain of overlaps."""
    clusters = []
    seen = set()
    for root in ordered_items:
        if root.id in seen:
            continue
        seen.add(root.id)
        cluster = [root]
        pending = [root]
        while pending:
            current = pending.pop()
            for other in ordered_items:
                if other.id not in seen and current.overlaps(other):
                    seen.add(other.id)
                    cluster.append(other)
                    pending.append(other)
        clusters.append(cluster)
    return clusters


def layout_day_columns(items):
    """
    Lay out one day's items (callers filter by date key first).

    Items are sorted by start time with ties kept in input order, then each is
    put into the first column holding nothing it overlaps. Every item reports
    the column count of its overlap cluster so a whole cluster shares one width.
    Returns {item.id: ColumnSlot}.
    """
    ordered = sorted(items, key=lambda item: item.start_minutes)
    placed = _place_in_columns(ordered)

    layout = {}
    for cluster in _overlap_clusters(ordered):
        total = 1 + max(placed[item.id] for item in cluster)
        for item in cluster:
            layout[item.id] = ColumnSlot(placed[item.id], total)
    return layout
