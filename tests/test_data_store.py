from datetime import date, datetime

import pytest

from backend.data_store import DataLayerError, RowNotFound
from models import User, db


def add_task(store, user, title, **fields):
    fields.setdefault('status', 'pending')
    return store.create_task(dict(user_id=user.id, title=title, **fields))


def test_tasks_are_ordered_by_due_date_with_undated_last(store, user):
    add_task(store, user, 'someday')
    add_task(store, user, 'later', due_date=datetime(2025, 5, 10))
    add_task(store, user, 'sooner', due_date=datetime(2025, 5, 1))
    assert [t.title for t in store.get_tasks(user.id)] == ['sooner', 'later', 'someday']


def test_task_filters(store, user):
    add_task(store, user, 'essay', priority='high', subject='History')
    add_task(store, user, 'laundry', priority='low')
    assert [t.title for t in store.get_tasks(user.id, {'priority': 'high'})] == ['essay']
    assert [t.title for t in store.get_tasks(user.id, {'subject': 'History', 'status': None})] == ['essay']


def test_other_users_rows_look_missing(store, user):
    other = User(username='jo')
    db.session.add(other)
    db.session.commit()
    task = add_task(store, user, 'private')

    with pytest.raises(RowNotFound):
        store.update_task(task.id, {'title': 'hijacked'}, user_id=other.id)
    with pytest.raises(RowNotFound):
        store.delete_task(task.id, user_id=other.id)
    assert store.get_tasks(other.id) == []


def test_update_ignores_unknown_fields(store, user):
    task = add_task(store, user, 'draft')
    store.update_task(task.id, {'title': 'final', 'user_id': 999}, user_id=user.id)
    assert task.title == 'final'
    assert task.user_id == user.id


def test_constraint_failures_become_data_layer_errors(store, user):
    with pytest.raises(DataLayerError):
        store.create_task({'user_id': user.id, 'title': None})
    # The session is usable again after the rollback.
    assert store.get_tasks(user.id) == []


def test_time_blocks_can_be_limited_to_one_day(store, user):
    for day in (21, 22):
        store.create_study_session({
            'user_id': user.id,
            'session_type': 'timeblock',
            'title': f'block {day}',
            'start_time': datetime(2025, 4, day, 9),
            'end_time': datetime(2025, 4, day, 10),
            'duration_planned': 60,
        })
    store.create_study_session({
        'user_id': user.id,
        'session_type': 'focus',
        'start_time': datetime(2025, 4, 21, 12),
        'duration_planned': 25,
    })
    assert [b.title for b in store.get_time_blocks(user.id, date(2025, 4, 21))] == ['block 21']
    assert len(store.get_time_blocks(user.id)) == 2


def test_workouts_for_week_and_progress(store, user):
    inside = store.create_user_workout({
        'user_id': user.id, 'exercise_name': 'Squats', 'workout_date': date(2025, 4, 26), 'sets': 4,
    })
    store.create_user_workout({
        'user_id': user.id, 'exercise_name': 'Plank', 'workout_date': date(2025, 4, 27), 'sets': 1,
    })
    week = store.get_user_workouts_for_week(user.id, date(2025, 4, 20), date(2025, 4, 26))
    assert [w.exercise_name for w in week] == ['Squats']

    store.update_user_workout_progress(inside.id, 2, user_id=user.id)
    assert inside.notes == '{"setProgress": 2}'
    store.complete_user_workout(inside.id, user_id=user.id)
    assert inside.completed is True
    assert inside.completed_at is not None

    store.delete_user_workout(inside.id, user_id=user.id)
    with pytest.raises(RowNotFound):
        store.complete_user_workout(inside.id)
