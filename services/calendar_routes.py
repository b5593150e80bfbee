"""Month calendar routes."""

from datetime import MAXYEAR, MINYEAR, date

from flask import current_app, jsonify, request, session

from backend.app_core_logic import (
    _now_local,
    controller_response,
    get_current_user,
    get_dashboard,
    get_store,
    timezone_for,
)
from backend.view_controllers import CalendarViewController
from services.validation_service import ValidationError, parse_day_value, parse_int


def _displayed_month(default_day):
    year = parse_int(request.args.get('year') or (request.get_json(silent=True) or {}).get('year'))
    month = parse_int(request.args.get('month') or (request.get_json(silent=True) or {}).get('month'))
    if year is None and month is None:
        return default_day.replace(day=1)
    if year is None or month is None or not (MINYEAR <= year <= MAXYEAR and 1 <= month <= 12):
        raise ValidationError('Invalid month')
    return date(year, month, 1)


def _controller(user, dashboard, displayed):
    return CalendarViewController(
        get_store(),
        user.id,
        dashboard,
        displayed=displayed,
        today=_now_local(user).date(),
        logger=current_app.logger,
        tz_name=timezone_for(user),
    )


def calendar_month():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    dashboard = get_dashboard(user)
    try:
        displayed = _displayed_month(dashboard.target.date)
    except ValidationError as exc:
        return jsonify({'error': str(exc)}), 400
    controller = _controller(user, dashboard, displayed).mount()
    step = request.args.get('step')
    if step == 'next':
        controller.next_month()
    elif step == 'prev':
        controller.prev_month()
    return controller_response(controller)


def create_calendar_event():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    data = request.get_json(silent=True) or {}
    dashboard = get_dashboard(user)
    try:
        displayed = _displayed_month(dashboard.target.date)
    except ValidationError as exc:
        return jsonify({'error': str(exc)}), 400
    controller = _controller(user, dashboard, displayed).mount()
    created = controller.create_event(
        data.get('title'),
        data.get('start_time'),
        data.get('end_time'),
        description=data.get('description'),
        location=data.get('location'),
        color=data.get('color'),
        event_type=data.get('event_type'),
        subject=data.get('subject'),
        related_task_id=data.get('related_task_id'),
        day=parse_day_value(data.get('day')),
    )
    if created is not None:
        current_app.logger.info("Created calendar event %s for user %s", created.id, user.id)
    return controller_response(controller, 201 if created is not None else 200)


def select_calendar_day():
    """Day click in the month grid: jump the time-block view to that date."""
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    data = request.get_json(silent=True) or {}
    dashboard = get_dashboard(user)
    target = parse_day_value(data.get('date'))
    if target is None:
        day_of_month = parse_int(data.get('day'))
        if not day_of_month:
            return jsonify({'error': 'date or day is required'}), 400
        try:
            displayed = _displayed_month(dashboard.target.date)
            target = date(displayed.year, displayed.month, day_of_month)
        except ValueError:
            return jsonify({'error': 'Invalid day'}), 400

    controller = _controller(user, dashboard, target)
    controller.select_day(target.day)
    dashboard.save(session)
    return jsonify(dashboard.to_dict())


def register(app):
    app.add_url_rule('/api/calendar', view_func=calendar_month, methods=['GET'])
    app.add_url_rule('/api/calendar/events', view_func=create_calendar_event, methods=['POST'])
    app.add_url_rule('/api/calendar/select-day', view_func=select_calendar_day, methods=['POST'])
