"""Workout tracker routes."""

from flask import current_app, jsonify, request

from backend.app_core_logic import _now_local, controller_response, get_current_user, get_store
from backend.view_controllers import WORKOUT_TEMPLATES, WorkoutViewController, template_form
from services.validation_service import parse_day_value


def _mount(user):
    today = parse_day_value(request.args.get('week_of')) or _now_local(user).date()
    return WorkoutViewController(get_store(), user.id, today=today, logger=current_app.logger).mount()


def handle_workouts():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    controller = _mount(user)
    if request.method == 'GET':
        return controller_response(controller)

    data = request.get_json(silent=True) or {}
    created = controller.create_workout(
        data.get('exercise_name'),
        sets=data.get('sets', 3),
        duration_minutes=data.get('duration_minutes'),
        video_url=data.get('video_url'),
        workout_date=data.get('workout_date'),
    )
    return controller_response(controller, 201 if created is not None else 200)


def complete_workout_set(workout_id, set_number):
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    controller = _mount(user)
    controller.complete_set(workout_id, set_number)
    return controller_response(controller)


def complete_workout(workout_id):
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    controller = _mount(user)
    controller.complete_workout(workout_id)
    return controller_response(controller)


def delete_workout(workout_id):
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401

    controller = _mount(user)
    controller.delete_workout(workout_id)
    return controller_response(controller)


def workout_templates():
    user = get_current_user()
    if not user:
        return jsonify({'error': 'No user selected'}), 401
    today = _now_local(user).date()
    return jsonify([
        dict(template, form=template_form(template['name'], today)) for template in WORKOUT_TEMPLATES
    ])


def register(app):
    app.add_url_rule('/api/workouts', view_func=handle_workouts, methods=['GET', 'POST'])
    app.add_url_rule('/api/workouts/templates', view_func=workout_templates, methods=['GET'])
    app.add_url_rule('/api/workouts/<int:workout_id>/sets/<int:set_number>',
                     view_func=complete_workout_set, methods=['POST'])
    app.add_url_rule('/api/workouts/<int:workout_id>/complete', view_func=complete_workout, methods=['POST'])
    app.add_url_rule('/api/workouts/<int:workout_id>', view_func=delete_workout, methods=['DELETE'])
