from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from datetime import datetime

db = SQLAlchemy()

class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    full_name = db.Column(db.String(120), nullable=True)
    timezone = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    tasks = db.relationship('Task', backref='owner', lazy=True, cascade="all, delete-orphan")
    calendar_events = db.relationship('CalendarEvent', backref='owner', lazy=True, cascade="all, delete-orphan")
    study_sessions = db.relationship('StudySession', backref='owner', lazy=True, cascade="all, delete-orphan")
    workouts = db.relationship('UserWorkout', backref='owner', lazy=True, cascade="all, delete-orphan")

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'full_name': self.full_name,
            'timezone': self.timezone,
        }


class Task(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), default='pending')  # 'pending' | 'completed'
    priority = db.Column(db.String(10), default='medium')  # low | medium | high
    category = db.Column(db.String(80), nullable=True)
    subject = db.Column(db.String(80), nullable=True)
    due_date = db.Column(db.DateTime, nullable=True)
    estimated_duration = db.Column(db.Integer, nullable=True)  # minutes
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_at = db.Column(db.DateTime, nullable=True)

    def is_completed(self):
        return self.status == 'completed'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'description': self.description,
            'status': self.status,
            'priority': self.priority,
            'category': self.category,
            'subject': self.subject,
            'due_date': self.due_date.isoformat() if self.due_date else None,
            'estimated_duration': self.estimated_duration,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }


class CalendarEvent(db.Model):
    """
    Timed calendar entry. start_time/end_time are naive datetimes in the
    app's local timezone (DEFAULT_TIMEZONE).
    """
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    event_type = db.Column(db.String(40), nullable=True)
    subject = db.Column(db.String(80), nullable=True)
    location = db.Column(db.String(200), nullable=True)
    start_time = db.Column(db.DateTime, nullable=False)
    end_time = db.Column(db.DateTime, nullable=False)
    is_all_day = db.Column(db.Boolean, default=False)
    color = db.Column(db.String(40), nullable=True)
    related_task_id = db.Column(db.Integer, db.ForeignKey('task.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'description': self.description,
            'event_type': self.event_type,
            'subject': self.subject,
            'location': self.location,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'is_all_day': self.is_all_day,
            'color': self.color,
            'related_task_id': self.related_task_id,
        }


class StudySession(db.Model):
    """Focus/study session. Ad-hoc time blocks are stored with session_type='timeblock'."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    session_type = db.Column(db.String(20), default='focus')
    title = db.Column(db.String(200), nullable=True)
    subject = db.Column(db.String(80), nullable=True)
    duration_planned = db.Column(db.Integer, nullable=False)  # minutes
    duration_actual = db.Column(db.Integer, nullable=True)
    start_time = db.Column(db.DateTime, nullable=False)
    end_time = db.Column(db.DateTime, nullable=True)
    completed = db.Column(db.Boolean, default=False)
    notes = db.Column(db.Text, nullable=True)
    related_task_id = db.Column(db.Integer, db.ForeignKey('task.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'session_type': self.session_type,
            'title': self.title,
            'subject': self.subject,
            'duration_planned': self.duration_planned,
            'duration_actual': self.duration_actual,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'completed': self.completed,
            'notes': self.notes,
            'related_task_id': self.related_task_id,
        }


class UserWorkout(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    exercise_name = db.Column(db.String(120), nullable=False)
    workout_date = db.Column(db.Date, nullable=False)
    sets = db.Column(db.Integer, default=0)
    completed = db.Column(db.Boolean, default=False)
    duration_minutes = db.Column(db.Integer, nullable=True)
    video_url = db.Column(db.String(300), nullable=True)
    notes = db.Column(db.Text, nullable=True)  # JSON: {"setProgress": n}
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'exercise_name': self.exercise_name,
            'workout_date': self.workout_date.isoformat() if self.workout_date else None,
            'sets': self.sets,
            'completed': self.completed,
            'duration_minutes': self.duration_minutes,
            'video_url': self.video_url,
            'notes': self.notes,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }
