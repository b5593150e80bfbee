from itertools import combinations

from backend.layout_engine import ColumnSlot, layout_day_columns
from backend.scheduled_items import make_item


def item(item_id, start, end, day='2025-04-21'):
    return make_item(item_id, item_id.upper(), day, start, end)


def test_empty_input_gives_empty_layout():
    assert layout_day_columns([]) == {}


def test_single_item():
    assert layout_day_columns([item('a', '09:00', '10:00')]) == {'a': ColumnSlot(0, 1)}


def test_disjoint_items_share_the_first_column():
    items = [item('a', '13:00', '14:00'), item('b', '08:00', '09:00'), item('c', '18:15', '19:45')]
    layout = layout_day_columns(items)
    assert set(layout.values()) == {ColumnSlot(0, 1)}


def test_identical_items_get_separate_columns():
    layout = layout_day_columns([item('a', '09:00', '10:00'), item('b', '09:00', '10:00')])
    assert layout == {'a': ColumnSlot(0, 2), 'b': ColumnSlot(1, 2)}


def test_ties_keep_input_order():
    layout = layout_day_columns([item('b', '09:00', '10:00'), item('a', '09:00', '10:00')])
    assert layout['b'].column == 0
    assert layout['a'].column == 1


def test_touching_items_do_not_overlap():
    layout = layout_day_columns([item('a', '9:00 AM', '10:00 AM'), item('b', '10:00 AM', '11:00 AM')])
    assert layout == {'a': ColumnSlot(0, 1), 'b': ColumnSlot(0, 1)}


def test_three_mutually_overlapping_items():
    layout = layout_day_columns([
        item('a', '09:00', '12:00'),
        item('b', '09:30', '11:00'),
        item('c', '10:00', '10:30'),
    ])
    assert {slot.column for slot in layout.values()} == {0, 1, 2}
    assert all(slot.total_columns == 3 for slot in layout.values())


def test_total_columns_spans_the_whole_overlap_chain():
    # e only overlaps d directly, but d chains back to the three-wide group.
    layout = layout_day_columns([
        item('a', '09:00', '10:00'),
        item('b', '09:00', '10:00'),
        item('c', '09:30', '11:00'),
        item('d', '10:30', '12:00'),
        item('e', '11:00', '12:00'),
    ])
    assert layout == {
        'a': ColumnSlot(0, 3),
        'b': ColumnSlot(1, 3),
        'c': ColumnSlot(2, 3),
        'd': ColumnSlot(0, 3),
        'e': ColumnSlot(1, 3),
    }


def test_separate_clusters_are_sized_independently():
    layout = layout_day_columns([
        item('a', '09:00', '10:00'),
        item('b', '09:30', '10:30'),
        item('c', '14:00', '15:00'),
    ])
    assert layout['a'] == ColumnSlot(0, 2)
    assert layout['b'] == ColumnSlot(1, 2)
    assert layout['c'] == ColumnSlot(0, 1)


def test_zero_length_item_inside_another_needs_its_own_column():
    layout = layout_day_columns([item('long', '09:00', '11:00'), item('mark', '10:00', '10:00')])
    assert layout['long'] == ColumnSlot(0, 2)
    assert layout['mark'] == ColumnSlot(1, 2)


def test_items_sharing_a_column_never_overlap():
    items = [
        item('a', '08:00', '09:30'), item('b', '08:15', '08:45'), item('c', '08:45', '10:00'),
        item('d', '09:00', '09:15'), item('e', '09:30', '11:00'), item('f', '10:00', '10:30'),
        item('g', '10:15', '12:00'), item('h', '11:00', '11:30'),
    ]
    layout = layout_day_columns(items)
    for first, second in combinations(items, 2):
        if layout[first.id].column == layout[second.id].column:
            assert not first.overlaps(second)


def test_layout_is_deterministic():
    items = [item('a', '09:00', '10:00'), item('b', '09:30', '10:30'), item('c', '09:45', '11:00')]
    assert layout_day_columns(items) == layout_day_columns(list(items))
