"""Data-access layer: every read and write the views make goes through DataStore."""

import json
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from models import CalendarEvent, StudySession, Task, UserWorkout

TASK_FILTER_FIELDS = ('status', 'priority', 'category', 'subject')
TASK_UPDATABLE_FIELDS = (
    'title', 'description', 'status', 'priority', 'category', 'subject',
    'due_date', 'estimated_duration', 'completed_at',
)


class DataLayerError(Exception):
    """Any failure reported by the storage backend."""


class RowNotFound(DataLayerError):
    """The row does not exist or belongs to another user."""


class DataStore:
    """
    Handle over one SQLAlchemy session. Built per request by the routes (or by
    tests) and passed into the view controllers; it is never a module global.
    """

    def __init__(self, session):
        self.session = session

    def _commit(self, action):
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise DataLayerError(f"{action}: {exc}") from exc

    def _query(self, action, build):
        try:
            return build()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise DataLayerError(f"{action}: {exc}") from exc

    def _get(self, model, row_id, action, user_id=None):
        row = self._query(action, lambda: self.session.get(model, row_id))
        if row is None or (user_id is not None and row.user_id != user_id):
            raise RowNotFound(f"{model.__name__} {row_id} not found")
        return row

    def _insert(self, model, fields, action):
        row = model(**fields)
        self.session.add(row)
        self._commit(action)
        return row

    # Tasks

    def get_tasks(self, user_id, filters=None):
        def build():
            query = self.session.query(Task).filter(Task.user_id == user_id)
            for key in TASK_FILTER_FIELDS:
                value = (filters or {}).get(key)
                if value:
                    query = query.filter(getattr(Task, key) == value)
            return query.order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.id.asc()).all()
        return self._query('get tasks', build)

    def create_task(self, fields):
        return self._insert(Task, fields, 'create task')

    def update_task(self, task_id, fields, user_id=None):
        task = self._get(Task, task_id, 'update task', user_id)
        for key, value in fields.items():
            if key in TASK_UPDATABLE_FIELDS:
                setattr(task, key, value)
        self._commit('update task')
        return task

    def delete_task(self, task_id, user_id=None):
        task = self._get(Task, task_id, 'delete task', user_id)
        self.session.delete(task)
        self._commit('delete task')

    # Calendar events and time blocks

    def get_calendar_events(self, user_id):
        return self._query('get calendar events', lambda: self.session.query(CalendarEvent).filter(
            CalendarEvent.user_id == user_id
        ).order_by(CalendarEvent.start_time.asc(), CalendarEvent.id.asc()).all())

    def create_calendar_event(self, fields):
        return self._insert(CalendarEvent, fields, 'create calendar event')

    def create_study_session(self, fields):
        return self._insert(StudySession, fields, 'create study session')

    def get_time_blocks(self, user_id, day=None):
        def build():
            query = self.session.query(StudySession).filter(
                StudySession.user_id == user_id,
                StudySession.session_type == 'timeblock',
            )
            if day is not None:
                day_start = datetime.combine(day, datetime.min.time())
                query = query.filter(
                    StudySession.start_time >= day_start,
                    StudySession.start_time < day_start + timedelta(days=1),
                )
            return query.order_by(StudySession.start_time.asc(), StudySession.id.asc()).all()
        return self._query('get time blocks', build)

    # Workouts

    def get_user_workouts_for_week(self, user_id, week_start, week_end):
        return self._query('get workouts', lambda: self.session.query(UserWorkout).filter(
            UserWorkout.user_id == user_id,
            UserWorkout.workout_date >= week_start,
            UserWorkout.workout_date <= week_end,
        ).order_by(UserWorkout.workout_date.asc(), UserWorkout.id.asc()).all())

    def create_user_workout(self, fields):
        return self._insert(UserWorkout, fields, 'create workout')

    def complete_user_workout(self, workout_id, user_id=None):
        workout = self._get(UserWorkout, workout_id, 'complete workout', user_id)
        workout.completed = True
        workout.completed_at = datetime.utcnow()
        self._commit('complete workout')
        return workout

    def update_user_workout_progress(self, workout_id, set_count, notes_json=None, user_id=None):
        workout = self._get(UserWorkout, workout_id, 'update workout progress', user_id)
        workout.notes = notes_json if notes_json is not None else json.dumps({'setProgress': set_count})
        workout.updated_at = datetime.utcnow()
        self._commit('update workout progress')
        return workout

    def delete_user_workout(self, workout_id, user_id=None):
        workout = self._get(UserWorkout, workout_id, 'delete workout', user_id)
        self.session.delete(workout)
        self._commit('delete workout')
