from datetime import datetime, timedelta

import pytest

from app import create_app
from config import TestConfig
from models import db
from services import get_services


JOHN = {
    "name": "John Doe",
    "username": "johndoe",
    "email": "john@x.com",
    "password": "123456",
}


@pytest.fixture
def app():
    """Fresh app and empty database for every test; nothing leaks between cases."""
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return get_services()


@pytest.fixture
def john(services):
    return services.auth.register(dict(JOHN))


@pytest.fixture
def product(services):
    return services.products.create({"name": "Cordless drill", "code": "DRILL-1", "price": 1500})


@pytest.fixture
def other_product(services):
    return services.products.create({"name": "Ladder", "code": "LADDER-1", "price": 800})


@pytest.fixture
def dates():
    start = datetime(2026, 11, 1, 9, 0, 0)
    return start, start + timedelta(days=3)


@pytest.fixture
def auth_headers(client, john):
    resp = client.post("/auth/login", json={"user": JOHN["username"], "password": JOHN["password"]})
    assert resp.status_code == 200
    token = resp.get_json()["data"]["accessToken"]
    return {"Authorization": f"Bearer {token}"}
