"""
Shared pytest fixtures: an in-memory MongoDB (mongomock) behind a real
DocumentStore, and a Flask test client wired to it.
"""

import mongomock
import pytest

from app import create_app
from store import DocumentStore


@pytest.fixture
def store():
    """DocumentStore backed by an in-memory MongoDB"""
    store = DocumentStore(mongomock.MongoClient(), 'restaurantDirectory')
    yield store
    store.close()


@pytest.fixture
def app(store):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'ENABLE_DEBUG_ENDPOINT': True,
    }, store=store)
    return app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
