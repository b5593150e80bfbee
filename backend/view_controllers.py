"""
Per-view controllers for the task, calendar, time-block and workout views.

Every controller follows the same cycle: mount -> fetch -> ready | error, and
after any create/update/delete it refetches instead of patching local state.
Store failures are logged and turned into a message on the controller; they
never propagate out of it.
"""

import json
import logging
from datetime import date, datetime
from enum import Enum

from backend.calendar_grid import build_month_grid, shift_month
from backend.data_store import DataLayerError, RowNotFound
from backend.day_grid import DayWindow, build_day_grid, shift_day
from backend.scheduled_items import event_to_item, items_for_day, time_block_to_item
from date_utils import to_date_key, to_local, week_range
from services.validation_service import (
    ALLOWED_TASK_STATUSES,
    ValidationError,
    normalize_priority,
    parse_datetime_value,
    parse_day_value,
    parse_int,
    parse_time_str,
    require_text,
)


class ViewStatus(Enum):
    LOADING = 'loading'
    READY = 'ready'
    ERROR = 'error'


class ViewController:
    fetch_error_message = 'Failed to load'

    def __init__(self, store, user_id, logger=None):
        self.store = store
        self.user_id = user_id
        self.logger = logger or logging.getLogger(__name__)
        self.status = ViewStatus.LOADING
        self.error = None
        self.form_error = None
        self.missing = False
        self._alive = True
        self._generation = 0

    @property
    def is_mounted(self):
        return self._alive

    def mount(self):
        self.refresh()
        return self

    def unmount(self):
        self._alive = False

    def set_user(self, user_id):
        if user_id != self.user_id:
            self.user_id = user_id
            self.refresh()

    def _is_current(self, generation):
        return self._alive and generation == self._generation

    def refresh(self):
        """Fetch everything for the view; no-op when unmounted or signed out."""
        if not self._alive or self.user_id is None:
            return
        self._generation += 1
        generation = self._generation
        self.status = ViewStatus.LOADING
        self.error = None
        try:
            data = self._fetch()
        except DataLayerError as exc:
            if self._is_current(generation):
                self.logger.error("%s for user %s: %s", self.fetch_error_message, self.user_id, exc)
                self.status = ViewStatus.ERROR
                self.error = self.fetch_error_message
            return
        if not self._is_current(generation):
            # Unmounted or superseded by a newer fetch while this one ran.
            return
        self._apply(data)
        self.status = ViewStatus.READY

    def _mutate(self, label, action):
        """
        Run a validated write, then refetch. Returns the action's result, or
        None when signed out, when validation fails or when the store fails.
        """
        if not self._alive or self.user_id is None:
            return None
        self.form_error = None
        self.missing = False
        try:
            result = action()
        except ValidationError as exc:
            self.form_error = str(exc)
            return None
        except RowNotFound as exc:
            self.missing = True
            self.form_error = str(exc)
            return None
        except DataLayerError as exc:
            self.logger.error("Failed to %s for user %s: %s", label, self.user_id, exc)
            if self._alive:
                self.status = ViewStatus.ERROR
                self.error = f"Failed to {label}: {exc}"
            return None
        self.refresh()
        return result

    def _fetch(self):
        raise NotImplementedError

    def _apply(self, data):
        raise NotImplementedError

    def state_dict(self):
        return {
            'status': self.status.value,
            'error': self.error,
            'form_error': self.form_error,
        }


class TaskViewController(ViewController):
    fetch_error_message = 'Failed to fetch tasks'

    def __init__(self, store, user_id, filters=None, logger=None):
        super().__init__(store, user_id, logger)
        self.filters = {k: v for k, v in (filters or {}).items() if v}
        self.tasks = []

    def _fetch(self):
        return self.store.get_tasks(self.user_id, self.filters or None)

    def _apply(self, data):
        self.tasks = list(data)

    def _find(self, task_id):
        return next((t for t in self.tasks if t.id == task_id), None)

    def create_task(self, title, description=None, due_date=None, priority='medium',
                    category=None, subject=None, estimated_duration=None):
        def action():
            fields = {
                'user_id': self.user_id,
                'title': require_text(title, 'Title is required'),
                'description': (description or '').strip() or None,
                'due_date': _parse_due_date(due_date),
                'status': 'pending',
                'priority': normalize_priority(priority),
                'category': (category or '').strip() or None,
                'subject': (subject or '').strip() or None,
                'estimated_duration': parse_int(estimated_duration),
                'completed_at': None,
            }
            return self.store.create_task(fields)
        return self._mutate('create task', action)

    def toggle_task(self, task_id, current_status=None):
        """Flip pending <-> completed."""
        def action():
            status = current_status
            if status is None:
                task = self._find(task_id)
                if task is None:
                    raise RowNotFound(f'Task {task_id} not found')
                status = task.status
            if status == 'completed':
                changes = {'status': 'pending', 'completed_at': None}
            else:
                changes = {'status': 'completed', 'completed_at': datetime.utcnow()}
            return self.store.update_task(task_id, changes, user_id=self.user_id)
        return self._mutate('update task', action)

    def update_task(self, task_id, data):
        def action():
            changes = {}
            if 'title' in data:
                changes['title'] = require_text(data.get('title'), 'Title is required')
            if 'description' in data:
                changes['description'] = (data.get('description') or '').strip() or None
            if 'priority' in data:
                changes['priority'] = normalize_priority(data.get('priority'))
            if 'status' in data:
                status = data.get('status')
                if status not in ALLOWED_TASK_STATUSES:
                    raise ValidationError('Invalid status')
                changes['status'] = status
                changes['completed_at'] = datetime.utcnow() if status == 'completed' else None
            if 'due_date' in data:
                changes['due_date'] = _parse_due_date(data.get('due_date'))
            for key in ('category', 'subject'):
                if key in data:
                    changes[key] = (data.get(key) or '').strip() or None
            if 'estimated_duration' in data:
                changes['estimated_duration'] = parse_int(data.get('estimated_duration'))
            return self.store.update_task(task_id, changes, user_id=self.user_id)
        return self._mutate('update task', action)

    def delete_task(self, task_id):
        return self._mutate('delete task', lambda: self.store.delete_task(task_id, user_id=self.user_id) or True)

    def to_dict(self):
        payload = self.state_dict()
        payload.update({
            'filters': self.filters,
            'tasks': [t.to_dict() for t in self.tasks],
            'completed_count': sum(1 for t in self.tasks if t.status == 'completed'),
        })
        return payload


def _parse_due_date(raw):
    if raw in (None, ''):
        return None
    value = parse_datetime_value(raw)
    if value is None:
        raise ValidationError('Invalid due date')
    return value


def _parse_span(start, end, day=None, tz_name=None):
    """
    Turn form input into (start, end) datetimes. Accepts full ISO datetimes or
    clock times ('14:00', '2:00 PM') combined with day.
    """
    def one(raw, label):
        value = None
        if isinstance(raw, datetime) or 'T' in str(raw):
            value = parse_datetime_value(raw)
        if value is None:
            clock = parse_time_str(raw)
            day_value = parse_day_value(day) if day is not None else None
            if clock is None or day_value is None:
                raise ValidationError(f'Invalid {label} time')
            value = datetime.combine(day_value, clock)
        return to_local(value, tz_name)

    if not start or not end:
        raise ValidationError('Start and end times are required')
    start_dt, end_dt = one(start, 'start'), one(end, 'end')
    if end_dt <= start_dt:
        raise ValidationError('End time must be after start time')
    if start_dt.date() != end_dt.date():
        raise ValidationError('Start and end must be on the same day')
    return start_dt, end_dt


class _ScheduleController(ViewController):
    """Shared fetch for views built from calendar events and time blocks."""

    def __init__(self, store, user_id, dashboard, logger=None, tz_name=None):
        super().__init__(store, user_id, logger)
        self.dashboard = dashboard
        self.tz_name = tz_name
        self.items = []

    def _fetch_items(self, day=None):
        events = self.store.get_calendar_events(self.user_id)
        blocks = self.store.get_time_blocks(self.user_id, day)
        items = [event_to_item(ev, self.tz_name) for ev in events]
        items.extend(time_block_to_item(block, self.tz_name) for block in blocks)
        return items


class CalendarViewController(_ScheduleController):
    fetch_error_message = 'Failed to fetch calendar events'

    def __init__(self, store, user_id, dashboard, displayed=None, today=None, logger=None, tz_name=None):
        super().__init__(store, user_id, dashboard, logger, tz_name)
        self.displayed = (displayed or dashboard.target.date).replace(day=1)
        self.today = today
        self.grid = build_month_grid(self.displayed.year, self.displayed.month, (), today)

    def _fetch(self):
        return self._fetch_items()

    def _apply(self, data):
        self.items = data
        self._rebuild()

    def _rebuild(self):
        self.grid = build_month_grid(self.displayed.year, self.displayed.month, self.items, self.today)

    def _move(self, delta):
        self.form_error = None
        try:
            self.displayed = shift_month(self.displayed, delta)
        except ValueError as exc:
            self.form_error = str(exc)
            return
        self._rebuild()

    def next_month(self):
        self._move(1)

    def prev_month(self):
        self._move(-1)

    def select_day(self, day_of_month):
        """Day click: point the time-block view at that date and switch to it."""
        target = date(self.displayed.year, self.displayed.month, day_of_month)
        self.dashboard.navigate_to_time_block(target)
        return target

    def create_event(self, title, start, end, description=None, location=None, color=None,
                     event_type=None, subject=None, related_task_id=None, day=None):
        def action():
            start_dt, end_dt = _parse_span(start, end, day or self.dashboard.target.date, self.tz_name)
            fields = {
                'user_id': self.user_id,
                'title': require_text(title, 'Title is required'),
                'description': (description or '').strip() or None,
                'event_type': event_type,
                'subject': subject,
                'location': (location or '').strip() or None,
                'start_time': start_dt,
                'end_time': end_dt,
                'is_all_day': False,
                'color': color,
                'related_task_id': parse_int(related_task_id),
            }
            return self.store.create_calendar_event(fields)
        return self._mutate('create event', action)

    def to_dict(self):
        payload = self.state_dict()
        payload['grid'] = self.grid.to_dict()
        return payload


class TimeBlockViewController(_ScheduleController):
    """Day grid for the dashboard's target date; refetches whenever the target moves."""
    fetch_error_message = 'Failed to fetch time blocks'

    def __init__(self, store, user_id, dashboard, window=None, logger=None, tz_name=None):
        super().__init__(store, user_id, dashboard, logger, tz_name)
        self.window = window or DayWindow()
        self.grid = build_day_grid(self.current_date, (), self.window)
        self._unsubscribe = dashboard.target.subscribe(self._on_navigate)

    @property
    def current_date(self):
        return self.dashboard.target.date

    def _on_navigate(self, _target_date):
        self.refresh()

    def unmount(self):
        super().unmount()
        self._unsubscribe()

    def _fetch(self):
        return self.current_date, self._fetch_items(self.current_date)

    def _apply(self, data):
        day, items = data
        self.items = items_for_day(items, day)
        self.grid = build_day_grid(day, self.items, self.window)

    def next_day(self):
        self.dashboard.target.set(shift_day(self.current_date, 1))

    def prev_day(self):
        self.dashboard.target.set(shift_day(self.current_date, -1))

    def create_time_block(self, title, start, end, subject=None, related_task_id=None):
        def action():
            name = require_text(title, 'Name is required')
            start_dt, end_dt = _parse_span(start, end, self.current_date, self.tz_name)
            fields = {
                'user_id': self.user_id,
                'session_type': 'timeblock',
                'title': name,
                'subject': subject,
                'start_time': start_dt,
                'end_time': end_dt,
                'duration_planned': int((end_dt - start_dt).total_seconds() // 60),
                'completed': False,
                'related_task_id': parse_int(related_task_id),
            }
            return self.store.create_study_session(fields)
        return self._mutate('create time block', action)

    def to_dict(self):
        payload = self.state_dict()
        payload['grid'] = self.grid.to_dict()
        return payload


WORKOUT_TEMPLATES = [
    {'name': 'Push-ups', 'video_url': 'https://youtube.com/watch?v=IODxDxX7oi4', 'sets': 3, 'reps': 15,
     'type': 'strength', 'muscle_group': 'Chest'},
    {'name': 'Plank', 'video_url': 'https://youtube.com/watch?v=pSHjTRCQxIw', 'duration': '60 seconds',
     'type': 'strength', 'muscle_group': 'Core'},
    {'name': 'Squats', 'video_url': 'https://youtube.com/watch?v=aclHkVaku9U', 'sets': 4, 'reps': 20,
     'type': 'strength', 'muscle_group': 'Legs'},
    {'name': 'Jumping Jacks', 'video_url': 'https://youtube.com/watch?v=c4DAnQ6DtF8', 'duration': '45 seconds',
     'type': 'cardio', 'muscle_group': 'Full Body'},
]


def template_form(name, today=None):
    """Prefilled create-workout form for one of WORKOUT_TEMPLATES."""
    template = next((t for t in WORKOUT_TEMPLATES if t['name'].lower() == str(name).lower()), None)
    if template is None:
        return None
    duration = template.get('duration')
    return {
        'exercise_name': template['name'],
        'sets': template.get('sets') or 1,
        'duration_minutes': parse_int(duration.split()[0]) if duration else None,
        'video_url': template.get('video_url') or '',
        'workout_date': to_date_key(today or date.today()),
    }


def read_set_progress(notes):
    """Set progress saved in a workout's notes JSON; 0 when missing or unreadable."""
    if not notes:
        return 0
    try:
        data = json.loads(notes)
    except (TypeError, ValueError):
        return 0
    if not isinstance(data, dict):
        return 0
    return parse_int(data.get('setProgress'), 0) or 0


def exercise_type(workout):
    if workout.duration_minutes:
        return 'cardio'
    if (workout.sets or 0) > 0:
        return 'strength'
    return 'flexibility'


class WorkoutViewController(ViewController):
    fetch_error_message = 'Failed to fetch workouts'

    def __init__(self, store, user_id, today=None, logger=None):
        super().__init__(store, user_id, logger)
        self.today = today or date.today()
        self.week_start, self.week_end = week_range(self.today)
        self.workouts = []
        self.completed_sets = {}

    def _fetch(self):
        return self.store.get_user_workouts_for_week(self.user_id, self.week_start, self.week_end)

    def _apply(self, data):
        self.workouts = list(data)
        self.completed_sets = {w.id: read_set_progress(w.notes) for w in self.workouts}

    def _find(self, workout_id):
        return next((w for w in self.workouts if w.id == workout_id), None)

    def progress(self, workout):
        if (workout.sets or 0) > 0:
            return min(100.0, self.completed_sets.get(workout.id, 0) / workout.sets * 100)
        return 100.0 if workout.completed else 0.0

    def is_fully_completed(self, workout):
        if (workout.sets or 0) > 0:
            return self.completed_sets.get(workout.id, 0) >= workout.sets
        return bool(workout.completed)

    def total_completed(self):
        return sum(1 for w in self.workouts if self.is_fully_completed(w))

    def create_workout(self, exercise_name, sets=3, duration_minutes=None, video_url=None, workout_date=None):
        def action():
            name = require_text(exercise_name, 'Exercise name is required')
            set_count = parse_int(sets, 0)
            if set_count is None or set_count < 0:
                raise ValidationError('Sets must be zero or more')
            day = parse_day_value(workout_date) if workout_date else self.today
            if day is None:
                raise ValidationError('Invalid workout date')
            fields = {
                'user_id': self.user_id,
                'exercise_name': name,
                'workout_date': day,
                'sets': set_count,
                'completed': False,
                'duration_minutes': parse_int(duration_minutes),
                'video_url': (video_url or '').strip() or None,
                'notes': None,
            }
            return self.store.create_user_workout(fields)
        return self._mutate('create workout', action)

    def complete_set(self, workout_id, set_number):
        """
        Record set_number as done. Progress never goes backwards, and reaching
        the workout's set count marks the whole workout completed.
        """
        def action():
            workout = self._find(workout_id)
            if workout is None:
                raise RowNotFound(f'UserWorkout {workout_id} not found')
            number = parse_int(set_number)
            if number is None or number < 1 or number > (workout.sets or 0):
                raise ValidationError('Invalid set number')
            progress = max(self.completed_sets.get(workout_id, 0), number)
            notes = json.dumps({'setProgress': progress})
            updated = self.store.update_user_workout_progress(workout_id, progress, notes, user_id=self.user_id)
            if progress >= workout.sets:
                updated = self.store.complete_user_workout(workout_id, user_id=self.user_id)
            return updated
        return self._mutate('save set progress', action)

    def complete_workout(self, workout_id):
        return self._mutate(
            'complete workout',
            lambda: self.store.complete_user_workout(workout_id, user_id=self.user_id),
        )

    def delete_workout(self, workout_id):
        return self._mutate(
            'delete workout',
            lambda: self.store.delete_user_workout(workout_id, user_id=self.user_id) or True,
        )

    def to_dict(self):
        payload = self.state_dict()
        workouts = []
        for w in self.workouts:
            data = w.to_dict()
            data.update({
                'set_progress': self.completed_sets.get(w.id, 0),
                'progress': self.progress(w),
                'fully_completed': self.is_fully_completed(w),
                'type': exercise_type(w),
            })
            workouts.append(data)
        payload.update({
            'week_start': self.week_start.isoformat(),
            'week_end': self.week_end.isoformat(),
            'workouts': workouts,
            'completed_count': self.total_completed(),
            'total_count': len(self.workouts),
        })
        return payload
