"""Daily time-block routes."""

from flask import current_app, jsonify, request, session

from backend.app_core_logic import (
    controller_response,
    day_window_from_config,
    get_current_user,
    get_dashboard,
    get_store,
    timezone_for,
)
from backend.view_controllers import TimeBlockViewController
from services.validation_service import parse_day_value


def _controller(user, dashboard):
    return TimeBlockViewController(
        get_store(),
        user.id,
        dashboard,
        window=day_window_from_config(),
        logger=current_app.logger,
        tz_name=timezone_for(user),
    )


def time_block_day():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    dashboard = get_dashboard(user)
    if request.args.get('day'):
        day = parse_day_value(request.args.get('day'))
        if not day:
            return jsonify({'error': 'Invalid day'}), 400
        dashboard.target.set(day)

    controller = _controller(user, dashboard).mount()
    step = request.args.get('step')
    if step == 'next':
        controller.next_day()
    elif step == 'prev':
        controller.prev_day()
    dashboard.save(session)
    controller.unmount()
    return controller_response(controller)


def create_time_block():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    data = request.get_json(silent=True) or {}
    dashboard = get_dashboard(user)
    if data.get('day'):
        day = parse_day_value(data.get('day'))
        if not day:
            return jsonify({'error': 'Invalid day'}), 400
        dashboard.target.set(day)

    controller = _controller(user, dashboard).mount()
    created = controller.create_time_block(
        data.get('title'),
        data.get('start_time'),
        data.get('end_time'),
        subject=data.get('subject'),
        related_task_id=data.get('related_task_id'),
    )
    if created is not None:
        current_app.logger.info("Created time block %s for user %s", created.id, user.id)
    dashboard.save(session)
    controller.unmount()
    return controller_response(controller, 201 if created is not None else 200)


def register(app):
    app.add_url_rule('/api/timeblocks', view_func=time_block_day, methods=['GET'])
    app.add_url_rule('/api/timeblocks', view_func=create_time_block, methods=['POST'])
