"""Core non-route application logic shared by the route modules."""

from flask import current_app, jsonify, request, session

from backend.data_store import DataStore
from backend.day_grid import DayWindow
from backend.navigation import Dashboard
from date_utils import is_valid_timezone, now_local
from models import User, db


def get_current_user():
    """Resolve the current user from a shared API key + user id header, else fall back to session."""
    # Header-based auth for service callers
    api_key = request.headers.get('X-API-Key')
    api_user_id = request.headers.get('X-User-Id')
    shared_key = current_app.config.get('API_SHARED_KEY')
    if shared_key and api_key and api_user_id:
        try:
            api_uid_int = int(api_user_id)
        except (TypeError, ValueError):
            api_uid_int = None
        if api_uid_int and api_key == shared_key:
            user = db.session.get(User, api_uid_int)
            if user:
                return user

    # Session-based auth for browser users
    user_id = session.get('user_id')
    if user_id:
        return db.session.get(User, user_id)
    return None


def get_store():
    return DataStore(db.session)


def get_dashboard(user=None):
    """Dashboard state from the session; a fresh one opens on the user's local today."""
    return Dashboard.from_session(session, default_date=_now_local(user).date())


def timezone_for(user=None):
    if user is not None and is_valid_timezone(user.timezone):
        return user.timezone
    return current_app.config.get('DEFAULT_TIMEZONE', 'UTC')


def _now_local(user=None):
    return now_local(timezone_for(user))


def day_window_from_config():
    return DayWindow(
        start_hour=current_app.config['TIMEBLOCK_START_HOUR'],
        slot_count=current_app.config['TIMEBLOCK_SLOTS'],
        pixels_per_minute=current_app.config['TIMEBLOCK_PIXELS_PER_MINUTE'],
    )


def controller_response(controller, success_code=200):
    """
    JSON for a controller after an action: 400 for a form error, 500 when the
    store failed, success_code otherwise.
    """
    payload = controller.to_dict()
    if controller.missing:
        payload['error'] = controller.form_error
        return jsonify(payload), 404
    if controller.form_error:
        payload['error'] = controller.form_error
        return jsonify(payload), 400
    if controller.error:
        return jsonify(payload), 500
    return jsonify(payload), success_code
