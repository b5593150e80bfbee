"""Task list routes."""

from flask import current_app, jsonify, request

from backend.app_core_logic import controller_response, get_current_user, get_store
from backend.view_controllers import TaskViewController


def _mount(user):
    filters = {key: request.args.get(key) for key in ('status', 'priority', 'category', 'subject')}
    return TaskViewController(get_store(), user.id, filters=filters, logger=current_app.logger).mount()


def handle_tasks():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    controller = _mount(user)
    if request.method == 'GET':
        return controller_response(controller)

    data = request.get_json(silent=True) or {}
    created = controller.create_task(
        data.get('title'),
        description=data.get('description'),
        due_date=data.get('due_date'),
        priority=data.get('priority'),
        category=data.get('category'),
        subject=data.get('subject'),
        estimated_duration=data.get('estimated_duration'),
    )
    if created is not None:
        current_app.logger.info("Created task %s for user %s", created.id, user.id)
    return controller_response(controller, 201 if created is not None else 200)


def handle_task(task_id):
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    controller = _mount(user)
    if request.method == 'DELETE':
        controller.delete_task(task_id)
    else:
        controller.update_task(task_id, request.get_json(silent=True) or {})
    return controller_response(controller)


def toggle_task(task_id):
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    controller = _mount(user)
    data = request.get_json(silent=True) or {}
    controller.toggle_task(task_id, data.get('current_status'))
    return controller_response(controller)


def register(app):
    app.add_url_rule('/api/tasks', view_func=handle_tasks, methods=['GET', 'POST'])
    app.add_url_rule('/api/tasks/<int:task_id>', view_func=handle_task, methods=['PUT', 'DELETE'])
    app.add_url_rule('/api/tasks/<int:task_id>/toggle', view_func=toggle_task, methods=['POST'])
