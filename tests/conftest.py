"""Shared pytest fixtures: an in-memory app, a test client and a signed-in user."""

import pytest

from app import create_app
from backend.data_store import DataStore
from models import User, db


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SECRET_KEY': 'test',
        'API_SHARED_KEY': 'shared-test-key',
        'DEFAULT_TIMEZONE': 'UTC',
    })
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return DataStore(db.session)


@pytest.fixture
def user(app):
    user = User(username='alex')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def signed_in(client):
    """Client with a freshly created user selected in its session."""
    response = client.post('/api/create-user', json={'username': 'sam'})
    assert response.status_code == 201
    return client
