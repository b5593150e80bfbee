import os

from dotenv import load_dotenv
from flask import Flask, jsonify

load_dotenv()

from models import db
from services import calendar_routes, task_routes, timeblock_routes, user_routes, workout_routes


def _load_config(app, overrides=None):
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///planner.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    app.config['PERMANENT_SESSION_LIFETIME'] = 365 * 24 * 60 * 60  # 1 year in seconds
    app.config['API_SHARED_KEY'] = os.environ.get('API_SHARED_KEY')  # Optional shared key for API callers
    app.config['DEFAULT_TIMEZONE'] = os.environ.get('DEFAULT_TIMEZONE', 'America/New_York')
    # Time-block window: one policy for the whole app (08:00 + 13 hourly slots, 48px/hour)
    app.config['TIMEBLOCK_START_HOUR'] = int(os.environ.get('TIMEBLOCK_START_HOUR', 8))
    app.config['TIMEBLOCK_SLOTS'] = int(os.environ.get('TIMEBLOCK_SLOTS', 13))
    app.config['TIMEBLOCK_PIXELS_PER_MINUTE'] = float(os.environ.get('TIMEBLOCK_PIXELS_PER_MINUTE', 0.8))
    if overrides:
        app.config.update(overrides)


def create_app(overrides=None):
    app = Flask(__name__)
    _load_config(app, overrides)

    db.init_app(app)
    with app.app_context():
        db.create_all()

    for module in (user_routes, task_routes, calendar_routes, timeblock_routes, workout_routes):
        module.register(app)

    @app.errorhandler(404)
    def _not_found(_exc):
        return jsonify({'error': 'Not found'}), 404

    app.logger.info("Planner app ready (database %s)", app.config['SQLALCHEMY_DATABASE_URI'])
    return app


if __name__ == '__main__':
    create_app().run(debug=os.environ.get('FLASK_DEBUG') == '1')
