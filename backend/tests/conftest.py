"""
Pytest fixtures for TailPOS backend tests.

Provides an in-memory database, a fresh till session per test, and a test
client.
"""

import pytest

from tailpos import create_app
from tailpos.extensions import db
from tailpos.services import auth_service, store_service
from tailpos.services.presentation import Presentation
from tailpos.services.register_service import PosSession, EXTENSION_KEY


class RecordingPresentation(Presentation):
    """Presentation back end that remembers every cue instead of playing it."""

    def __init__(self):
        self.sounds = []
        self.alerts = []
        self.printed = []

    def play_sound(self, src):
        self.sounds.append(src)

    def alert(self, message):
        self.alerts.append(message)

    def print_receipt(self, title, html):
        self.printed.append((title, html))


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
        'RECEIPT_PREFIX': 'TWPOS-KS',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def presentation():
    return RecordingPresentation()


@pytest.fixture(scope='function')
def pos_session(app, db_session, presentation):
    """Install a fresh till session on the app for the duration of a test."""
    session = PosSession(presentation=presentation)
    previous = app.extensions[EXTENSION_KEY]
    app.extensions[EXTENSION_KEY] = session
    yield session
    app.extensions[EXTENSION_KEY] = previous


@pytest.fixture(scope='function')
def client(app, pos_session):
    """Create test client bound to the fresh till session."""
    return app.test_client()


@pytest.fixture(scope='function')
def products(db_session):
    """Three catalog entries; returns their records in insertion order."""
    rows = [
        {"name": "Kopi Susu", "price": 15000, "image": "img/kopi-susu.png", "option": "Iced"},
        {"name": "Es Teh Manis", "price": 5000, "image": "img/es-teh.png", "option": "Regular"},
        {"name": "Roti Bakar", "price": 10000, "image": None, "option": None},
    ]
    ids = [store_service.add(store_service.PRODUCTS, row) for row in rows]
    by_id = {p["id"]: p for p in store_service.get_all(store_service.PRODUCTS)}
    return [by_id[i] for i in ids]


@pytest.fixture(scope='function')
def cashier(db_session):
    """Create user "kasir" with password "rahasia"."""
    user_id = auth_service.create_user("kasir", "rahasia", name="Kasir Satu")
    return {"id": user_id, "username": "kasir", "password": "rahasia"}


def login(client, username: str, password: str):
    """Helper to log the till in through the API."""
    return client.post('/api/auth/login', json={
        'username': username,
        'password': password,
    })


@pytest.fixture(scope='function')
def logged_in_client(client, cashier):
    response = login(client, cashier["username"], cashier["password"])
    assert response.status_code == 200
    return client
