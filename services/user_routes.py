"""User/session and dashboard routes."""

from flask import jsonify, request, session

from backend.app_core_logic import get_current_user, get_dashboard
from date_utils import is_valid_timezone
from models import User, db


def set_user(user_id):
    """Set the current user in session"""
    user = db.get_or_404(User, user_id)
    session['user_id'] = user.id
    session.permanent = True
    return jsonify({'success': True, 'username': user.username, 'user_id': user.id})


def create_user():
    """Create a new user and select it"""
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()

    if not username:
        return jsonify({'error': 'Username is required'}), 400

    if User.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already exists'}), 400

    timezone = (data.get('timezone') or '').strip() or None
    if timezone and not is_valid_timezone(timezone):
        return jsonify({'error': 'Invalid timezone'}), 400

    user = User(
        username=username,
        email=(data.get('email') or '').strip() or None,
        full_name=(data.get('full_name') or '').strip() or None,
        timezone=timezone,
    )
    db.session.add(user)
    db.session.commit()

    # Automatically set as current user
    session['user_id'] = user.id
    session.permanent = True

    return jsonify({'success': True, 'user_id': user.id, 'username': user.username}), 201


def current_user_info():
    """Get current user info"""
    user = get_current_user()
    if user:
        return jsonify({'user_id': user.id, 'username': user.username})
    return jsonify({'user_id': None, 'username': None})


def logout_user():
    session.pop('user_id', None)
    session.pop('dashboard', None)
    return jsonify({'success': True})


def dashboard_state():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401
    return jsonify(get_dashboard(user).to_dict())


def switch_dashboard_view():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    data = request.get_json(silent=True) or {}
    dashboard = get_dashboard(user)
    try:
        dashboard.switch_view(data.get('view'))
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    dashboard.save(session)
    return jsonify(dashboard.to_dict())


def register(app):
    app.add_url_rule('/api/set-user/<int:user_id>', view_func=set_user, methods=['POST'])
    app.add_url_rule('/api/create-user', view_func=create_user, methods=['POST'])
    app.add_url_rule('/api/current-user', view_func=current_user_info, methods=['GET'])
    app.add_url_rule('/api/logout', view_func=logout_user, methods=['POST'])
    app.add_url_rule('/api/dashboard', view_func=dashboard_state, methods=['GET'])
    app.add_url_rule('/api/dashboard/view', view_func=switch_dashboard_view, methods=['POST'])
