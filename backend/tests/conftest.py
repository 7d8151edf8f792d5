"""
Pytest fixtures for the purchase order backend tests.

Provides an in-memory database, a seeded administrator and test clients.
"""

import pytest

from po_api import create_app
from po_api.config import Config
from po_api.extensions import db
from po_api.models import PurchaseOrder
from po_api.services.schema_service import seed_admin_user

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


class TestingConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SESSION_COOKIE_SECURE = False
    BCRYPT_ROUNDS = 4
    AUTO_INIT_DB = False
    LOGIN_REQUIRED = True
    ALLOWED_ORIGINS = {"http://localhost:5173"}
    APP_ENV = "testing"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Fresh data for each test: empty tables plus the default administrator."""
    with app.app_context():
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        seed_admin_user()

        yield db.session

        db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def auth_client(client):
    """Test client holding an administrator session cookie."""
    response = login(client, ADMIN_USERNAME, ADMIN_PASSWORD)
    assert response.status_code == 200, response.json
    return client


def login(client, username: str, password: str):
    """Helper to log in through the API."""
    return client.post('/api/auth/login', json={
        'username': username,
        'password': password,
    })


def make_order(**overrides) -> dict:
    """Valid purchase order payload."""
    payload = {
        "date": "2024-03-01",
        "order_number": "PO-1001",
        "party_name": "Acme Traders",
        "broker": "B. Shah",
        "mill": "Sunrise Mills",
        "weight": 12.5,
        "bags": 40,
        "product": "Cotton",
        "rate": 2150,
        "terms_and_conditions": "Net 30",
    }
    payload.update(overrides)
    return payload


def count_orders() -> int:
    db.session.expire_all()
    return db.session.query(PurchaseOrder).count()
