"""Shared navigation state: which view is active and which date it points at."""

from datetime import date

from services.validation_service import parse_day_value

VIEWS = ('tasks', 'calendar', 'timeblock', 'workout')
DEFAULT_VIEW = 'tasks'


class NavigationTarget:
    """
    Current target date shared by the calendar and time-block controllers.
    Subscribers are called synchronously on every change; with no subscribers
    a change only updates the stored date.
    """

    def __init__(self, target_date=None):
        self.date = target_date or date.today()
        self._subscribers = []

    def subscribe(self, callback):
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def set(self, target_date):
        self.date = target_date
        for callback in list(self._subscribers):
            callback(target_date)


class Dashboard:
    """Owner of the navigation target and of the active view."""

    def __init__(self, current_view=DEFAULT_VIEW, target_date=None):
        self.current_view = current_view if current_view in VIEWS else DEFAULT_VIEW
        self.target = NavigationTarget(target_date)

    def switch_view(self, view):
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self.current_view = view

    def navigate_to_time_block(self, target_date):
        self.target.set(target_date)
        self.current_view = 'timeblock'

    @classmethod
    def from_session(cls, session, default_date=None):
        state = session.get('dashboard') or {}
        return cls(state.get('view', DEFAULT_VIEW), parse_day_value(state.get('date')) or default_date)

    def save(self, session):
        session['dashboard'] = self.to_dict()

    def to_dict(self):
        return {'view': self.current_view, 'date': self.target.date.isoformat()}
