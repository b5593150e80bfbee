from datetime import date, datetime, time

import pytest

from services.validation_service import (
    ValidationError,
    normalize_priority,
    parse_bool,
    parse_datetime_value,
    parse_day_value,
    parse_int,
    parse_time_str,
    require_text,
)


@pytest.mark.parametrize('raw, expected', [
    ('14:30', time(14, 30)),
    ('2:30 PM', time(14, 30)),
    ('2:30 p.m.', time(14, 30)),
    ('12am', time(0, 0)),
    ('12 PM', time(12, 0)),
    ('9', time(9, 0)),
])
def test_parse_time_str_accepts_common_formats(raw, expected):
    assert parse_time_str(raw) == expected


@pytest.mark.parametrize('raw', ['', None, '25:00', '13:00 PM', '0 AM', '9:75', 'noon'])
def test_parse_time_str_rejects_garbage(raw):
    assert parse_time_str(raw) is None


def test_parse_day_value():
    assert parse_day_value('2025-04-21') == date(2025, 4, 21)
    assert parse_day_value(datetime(2025, 4, 21, 18)) == date(2025, 4, 21)
    assert parse_day_value('21/04/2025') is None


def test_parse_datetime_value():
    assert parse_datetime_value('2025-04-21T09:15') == datetime(2025, 4, 21, 9, 15)
    assert parse_datetime_value('') is None
    assert parse_datetime_value('tomorrow') is None


def test_small_parsers():
    assert parse_int('7') == 7
    assert parse_int('seven', 0) == 0
    assert parse_bool('Yes') is True
    assert parse_bool(None, default=True) is True
    assert normalize_priority(' HIGH ') == 'high'
    assert normalize_priority('urgent') == 'medium'


def test_require_text():
    assert require_text('  Essay ', 'Title is required') == 'Essay'
    with pytest.raises(ValidationError, match='Title is required'):
        require_text('   ', 'Title is required')
